import importlib


def test_config_reads_env(monkeypatch):
    import packages.config as config

    monkeypatch.setenv("FITNESS_TOP_ACTIVITY_TYPES", "5")
    monkeypatch.setenv("FITNESS_INCLUDE_UNDATED", "1")
    monkeypatch.setenv("FITNESS_CORS_ORIGINS", "http://a.test, http://b.test,")
    importlib.reload(config)
    try:
        assert config.TOP_ACTIVITY_TYPES == 5
        assert config.INCLUDE_UNDATED is True
        assert config.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    finally:
        monkeypatch.undo()
        importlib.reload(config)
    assert config.TOP_ACTIVITY_TYPES == 3
    assert config.INCLUDE_UNDATED is False
