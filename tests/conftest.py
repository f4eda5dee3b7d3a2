"""
Shared pytest fixtures for gluestate tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing

import pytest as _pytest

import gluestate.config as config
import gluestate.config.settings as settings_module
import gluestate.glue as glue
import gluestate.observers.messages as messages

# =============================================================================
# Environment Isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_config(
    monkeypatch: _pytest.MonkeyPatch,
    tmp_path_factory: _pytest.TempPathFactory,
) -> None:
    """Keep user config files and GLUESTATE_* env vars out of every test."""
    for key in list(_os.environ):
        if key.startswith("GLUESTATE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("GLUESTATE_CONFIG_DIR", str(tmp_path_factory.mktemp("gluestate-config")))
    settings_module.clear_cache()


# =============================================================================
# Glue Fixtures
# =============================================================================


class Recorder:
    """Callable that records every message it receives."""

    def __init__(self) -> None:
        self.messages: list[messages.Message] = []

    def __call__(self, message: messages.Message) -> None:
        self.messages.append(message)

    @property
    def count(self) -> int:
        return len(self.messages)

    @property
    def last(self) -> messages.Message:
        return self.messages[-1]

    def dicts(self) -> list[dict[str, _typing.Any]]:
        return [m.to_dict() for m in self.messages]

    def reset(self) -> None:
        self.messages.clear()


@_pytest.fixture
def recorder() -> Recorder:
    """A fresh message recorder."""
    return Recorder()


@_pytest.fixture
def make_recorder() -> _typing.Callable[[], Recorder]:
    """Factory for tests that need several independent recorders."""
    return Recorder


@_pytest.fixture
def settings() -> config.Settings:
    """Default settings, ignoring env and config files."""
    return config.Settings.defaults()


@_pytest.fixture
def make_glue(settings: config.Settings) -> _typing.Callable[..., glue.Glue]:
    """Factory creating a Glue with default settings."""

    def _make(target: _typing.Any, **kwargs: _typing.Any) -> glue.Glue:
        kwargs.setdefault("settings", settings)
        return glue.Glue(target, **kwargs)

    return _make
