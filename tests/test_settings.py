from gofloaters.config.settings import Settings, get_logging_config, get_settings


def test_packaged_defaults_load():
    settings = get_settings()
    assert settings.upstream.space_sub_type == "meetingSpace"
    assert settings.location.default_lat == 12.9304278
    assert settings.location.default_lng == 77.678404
    assert {f.id for f in settings.filters.facility_options} >= {"AC", "Hi Speed WiFi"}


def test_default_criteria_sit_at_the_sentinels():
    filters = get_settings().filters
    limits = filters.limits()
    criteria = filters.default_criteria()
    assert criteria.price_range[1] == limits.max_price
    assert criteria.capacity_range[1] == limits.max_capacity
    assert criteria.max_distance_km == limits.max_distance_km
    assert criteria.sort_key == "distance"
    assert criteria.sort_direction == "asc"


def test_default_reference_point():
    point = get_settings().location.default_reference_point()
    assert point.name == "Koramangala, Bengaluru"
    assert point.source == "default"


def test_env_overrides_apply(monkeypatch):
    monkeypatch.setenv("GOFLOATERS_UPSTREAM_URL", "https://example.test/spaces")
    monkeypatch.setenv("GOFLOATERS_LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.upstream.base_url == "https://example.test/spaces"
        assert settings.app.log_level == "DEBUG"
    finally:
        get_settings.cache_clear()


def test_external_config_file(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("filters:\n  max_price: 10000\n", encoding="utf-8")
    monkeypatch.setenv("GOFLOATERS_CONFIG_PATH", str(path))
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.filters.limits().max_price == 10000
        assert settings.upstream == Settings().upstream
    finally:
        get_settings.cache_clear()


def test_logging_config_is_a_dict_config():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]
