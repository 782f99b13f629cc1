"""Configuration module for js2ts."""

from js2ts.config.settings import (
    AISettings,
    Settings,
    find_config_file,
    get_settings,
    load_config,
)

__all__ = [
    "AISettings",
    "Settings",
    "find_config_file",
    "get_settings",
    "load_config",
]
