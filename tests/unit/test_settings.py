import pytest

from sensorchart.adapters.config.settings_loader import load_settings
from sensorchart.core.domain.settings import SystemSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SC_CONFIG_FILE", "SC_CHARTS_FILE", "SC_LOG_LEVEL", "SC_REQUEST_TIMEOUT", "SC_DEFAULT_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)


def test_system_settings_defaults():
    settings = SystemSettings()
    assert settings.charts_file == "charts.yaml"
    assert settings.log_level == "INFO"
    assert settings.request_timeout == 30.0
    assert settings.default_timezone == "UTC"


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("SC_CHARTS_FILE", "/etc/sensorchart/charts.yaml")
    monkeypatch.setenv("SC_REQUEST_TIMEOUT", "5")

    settings = load_settings(path="non_existent.yaml")

    assert settings.charts_file == "/etc/sensorchart/charts.yaml"
    assert settings.request_timeout == 5.0


def test_load_settings_from_file(tmp_path):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
charts_file: "custom_charts.yaml"
log_level: "DEBUG"
    """)

    settings = load_settings(path=str(config_file))

    assert settings.charts_file == "custom_charts.yaml"
    assert settings.log_level == "DEBUG"
    # Defaults preserved
    assert settings.default_timezone == "UTC"


def test_load_settings_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text('default_timezone: "Europe/Berlin"')

    monkeypatch.setenv("SC_DEFAULT_TIMEZONE", "Asia/Tokyo")

    settings = load_settings(path=str(config_file))

    # Env var should hold precedence
    assert settings.default_timezone == "Asia/Tokyo"


def test_load_settings_path_from_env(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text('log_level: "WARNING"')
    monkeypatch.setenv("SC_CONFIG_FILE", str(config_file))

    assert load_settings().log_level == "WARNING"


def test_load_settings_corrupt_file(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("charts_file: [unclosed")

    with pytest.raises(RuntimeError, match="Failed to load configuration"):
        load_settings(path=str(config_file))
