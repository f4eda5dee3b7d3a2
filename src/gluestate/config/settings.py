"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with GLUESTATE_ prefix
3. User YAML config (~/.config/gluestate/config.yaml)

Nested config uses double underscore delimiter:
  GLUESTATE_SNAPSHOT__MAX_DEPTH=200
  GLUESTATE_NOTIFY__TRACE=true
"""

import logging as _logging
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import gluestate.config.sources as sources
import gluestate.config.types as types

LOGGER_NAME = "gluestate"

# Settings shared by every Glue created without explicit settings
_cached_settings: "Settings | None" = None


class Settings(_pydantic_settings.BaseSettings):
    """
    gluestate configuration settings.

    All settings can be overridden via environment variables with GLUESTATE_
    prefix. For nested config, use double underscore:
    GLUESTATE_NOTIFY__TRACE=true
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="GLUESTATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) - highest
        2. env_settings (GLUESTATE_* env vars)
        3. yaml_settings (user config.yaml)
        4. (defaults via Field definitions) - lowest
        """
        return (
            init_settings,
            env_settings,
            sources.YamlSettingsSource(settings_cls),
            file_secret_settings,
        )

    snapshot: types.SnapshotConfig = _pydantic.Field(default_factory=types.SnapshotConfig)
    """Snapshot limits."""

    notify: types.NotifyConfig = _pydantic.Field(default_factory=types.NotifyConfig)
    """Notification settings."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    @classmethod
    def defaults(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from field defaults only, ignoring env and files."""
        return cls.model_construct(**kwargs)


def configure_logging(settings: Settings) -> None:
    """Apply ``settings.logging.level`` to the package logger, if set."""
    level = settings.logging.level
    if level is None:
        return
    _logging.getLogger(LOGGER_NAME).setLevel(level.upper())


def get_settings(*, force_reload: bool = False) -> Settings:
    """Get the process-wide settings.

    Loaded from env and config files on first use, which is also the only
    time ``configure_logging`` runs. Use force_reload=True to reload.

    Args:
        force_reload: If True, reload from env and config files.

    Returns:
        The cached Settings.
    """
    global _cached_settings

    if not force_reload and _cached_settings is not None:
        return _cached_settings

    _cached_settings = Settings()
    configure_logging(_cached_settings)
    return _cached_settings


def clear_cache() -> None:
    """Clear the cached settings. Useful for testing."""
    global _cached_settings
    _cached_settings = None
