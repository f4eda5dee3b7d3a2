"""Configuration section types for gluestate settings.

Each section is a Pydantic model nested inside ``Settings``:
- SnapshotConfig: limits for structural snapshots
- NotifyConfig: dispatch tracing
- LoggingConfig: level for the ``gluestate`` logger

Sections reject unknown keys so that typos in config files surface as
validation errors instead of being silently ignored.
"""

import typing as _typing

import pydantic as _pydantic

import gluestate.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """Base class for all config sections."""

    model_config = _pydantic.ConfigDict(extra="forbid")


class SnapshotConfig(ConfigBase):
    """
    Snapshot settings.

    YAML section: snapshot.*
    """

    max_depth: int = _pydantic.Field(default=constants.DEFAULT_SNAPSHOT_MAX_DEPTH, ge=1)
    """Maximum container nesting a target may have."""


class NotifyConfig(ConfigBase):
    """
    Notification settings.

    YAML section: notify.*
    """

    trace: bool = False
    """Log every dispatched message at DEBUG level."""


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] | None = None
    """Level for the ``gluestate`` logger. None leaves it untouched."""
