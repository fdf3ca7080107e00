import os

import yaml

from sensorchart.core.domain.settings import SystemSettings

_ENV_OVERRIDES = {
    "SC_CHARTS_FILE": "charts_file",
    "SC_LOG_LEVEL": "log_level",
    "SC_REQUEST_TIMEOUT": "request_timeout",
    "SC_DEFAULT_TIMEZONE": "default_timezone",
}


def load_settings(path: str | None = None) -> SystemSettings:
    """
    Load system settings from a YAML file.
    Environment variables override values from the file.

    Args:
        path: Path to config.yaml. Defaults to SC_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("SC_CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}") from e

    # Env vars > File > Defaults
    for env_var, field in _ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            config_data[field] = value

    return SystemSettings(**config_data)
