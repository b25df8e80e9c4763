import pytest

from packages import metrics
from services.processing.wrapped import (
    CsvParseError,
    NoRowsError,
    UnknownCategoryError,
    WrappedState,
    aggregate,
    read_table,
    run_category,
)
from tests.fixtures.wrapped_csv import ACTIVITIES_CSV, SLEEP_CSV, STEPS_WEEKLY_CSV


def test_read_table_strips_bom():
    table = read_table(("\ufeff" + STEPS_WEEKLY_CSV).encode("utf-8"))
    assert table[0] == ["Week", "Steps"]
    assert read_table("\ufeffWeek,Steps\n")[0] == ["Week", "Steps"]


def test_read_table_rejects_undecodable_bytes():
    with pytest.raises(CsvParseError):
        read_table(b"\xff\xfe\xfa,\x00\n")


def test_read_table_rejects_malformed_quoting():
    with pytest.raises(CsvParseError):
        read_table('Week,Steps\n"Jan 1"x,100\n')


def test_aggregate_each_category():
    assert aggregate("activities", ACTIVITIES_CSV).sessions == 5
    assert aggregate("steps", STEPS_WEEKLY_CSV).total_days == 14
    assert aggregate("sleep", SLEEP_CSV).periods == 2


def test_aggregate_options_override_config():
    snap = aggregate("activities", ACTIVITIES_CSV, top_types=1)
    assert len(snap.top_activity_types) == 1


def test_aggregate_raises_no_rows():
    with pytest.raises(NoRowsError):
        aggregate("steps", "")
    with pytest.raises(NoRowsError):
        aggregate("activities", "Activity Type,Date,Distance\n")


def test_unknown_category():
    with pytest.raises(UnknownCategoryError):
        run_category("weight", "a,b\n")


def test_run_category_ok():
    result = run_category("activities", ACTIVITIES_CSV.encode("utf-8"))
    assert result.ok
    assert result.status == "ok"
    assert result.error is None
    assert result.snapshot.sessions == 5


@pytest.mark.parametrize(
    "category,message",
    [
        ("activities", "No activity rows found."),
        ("steps", "No steps rows found."),
        ("sleep", "No sleep rows found."),
    ],
)
def test_run_category_no_rows(category, message):
    result = run_category(category, "")
    assert result.status == "no_rows"
    assert result.snapshot is None
    assert result.error == message


@pytest.mark.parametrize(
    "category,message",
    [
        ("activities", "Failed reading that Activities CSV."),
        ("steps", "Failed to parse Steps CSV."),
        ("sleep", "Failed to parse Sleep CSV."),
    ],
)
def test_run_category_parse_failure(category, message):
    result = run_category(category, b"\xff\xfe\xfa")
    assert result.status == "parse_failure"
    assert result.error == message


def test_run_category_counts_uploads():
    metrics.reset()
    run_category("steps", STEPS_WEEKLY_CSV)
    run_category("steps", "")
    counters, durations = metrics.snapshot()
    assert counters['wrapped_uploads_total{category="steps",status="ok"}'] == 1
    assert counters['wrapped_uploads_total{category="steps",status="no_rows"}'] == 1
    assert 'wrapped_duration_seconds{category="steps"}' in durations


def test_run_category_is_idempotent():
    first = run_category("sleep", SLEEP_CSV)
    second = run_category("sleep", SLEEP_CSV)
    assert first == second


def test_wrapped_state_apply_returns_new_state():
    empty = WrappedState()
    ok = run_category("steps", STEPS_WEEKLY_CSV)
    state = empty.apply(ok)
    assert empty.results == {}
    assert state.snapshot("steps") is ok.snapshot
    assert state.snapshot("sleep") is None

    failed = state.apply(run_category("steps", ""))
    assert failed.snapshot("steps") is None
    assert failed.error("steps") == "No steps rows found."
    # Earlier state still holds the previous snapshot.
    assert state.snapshot("steps") is ok.snapshot


def test_wrapped_state_categories_are_independent():
    state = WrappedState().apply(run_category("steps", STEPS_WEEKLY_CSV)).apply(run_category("sleep", SLEEP_CSV))
    state = state.apply(run_category("sleep", ""))
    assert state.snapshot("steps") is not None
    assert state.snapshot("sleep") is None
