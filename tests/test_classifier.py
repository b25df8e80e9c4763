import pytest

from services.processing.classifier import Sport, classify_sport, is_meter_distance, normalize_key


@pytest.mark.parametrize(
    "label,sport",
    [
        ("Running", Sport.RUN),
        ("Treadmill Running", Sport.RUN),
        ("Trail Run", Sport.RUN),
        ("Course à pied", Sport.RUN),
        ("Cycling", Sport.BIKE),
        ("Indoor Cycling", Sport.BIKE),
        ("Mountain Bike Ride", Sport.BIKE),
        ("Vélo", Sport.BIKE),
        ("Pool Swim", Sport.SWIM),
        ("Open Water Swimming", Sport.SWIM),
        ("Walking", Sport.WALK_HIKE),
        ("Hiking", Sport.WALK_HIKE),
        ("Treadmill", Sport.WALK_HIKE),
        ("Strength Training", Sport.STRENGTH),
        ("Weight Lifting", Sport.STRENGTH),
        ("Yoga", Sport.OTHER),
        ("", Sport.OTHER),
    ],
)
def test_classify_sport(label, sport):
    assert classify_sport(label) is sport


def test_normalize_key_strips_accents_and_punctuation():
    assert normalize_key("Type d’activité") == "typedactivite"
    assert normalize_key("Open-Water  Swimming") == "openwaterswimming"


def test_meter_distance_labels():
    assert is_meter_distance("Open Water Swimming")
    assert is_meter_distance("pool swim")
    assert is_meter_distance("Track Running")
    assert is_meter_distance("Swimming")
    assert not is_meter_distance("Cycling")
    assert not is_meter_distance("Running")
