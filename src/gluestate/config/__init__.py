"""
Configuration module for gluestate.

Uses pydantic-settings for environment variable and YAML loading.
"""

from gluestate.config.settings import (
    Settings,
    clear_cache,
    configure_logging,
    get_settings,
)
from gluestate.config.sources import ConfigFileError

__all__ = [
    "ConfigFileError",
    "Settings",
    "clear_cache",
    "configure_logging",
    "get_settings",
]
