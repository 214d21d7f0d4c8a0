"""Configuration for intake.

    from intake.config import get_settings

    settings = get_settings()
    settings.extraction.model

Values come from config/default.toml, the config/{INTAKE_ENV}.toml
overlay and INTAKE_* environment variables, in increasing priority.
"""

from functools import lru_cache

from intake.config.loader import load_config
from intake.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; see reload_settings."""
    layers = load_config(Settings)
    set_toml_config(layers.values)
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read the config files again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
