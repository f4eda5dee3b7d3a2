"""Custom pydantic-settings source for gluestate configuration.

Configuration layers (in precedence order, highest first):
1. Constructor arguments
2. Environment variables (GLUESTATE_*, handled by pydantic-settings)
3. User config: ~/.config/gluestate/config.yaml (or GLUESTATE_CONFIG_DIR)
4. Field defaults

Environment variables:
- GLUESTATE_CONFIG_DIR: Override user config directory (default: ~/.config/gluestate)
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "GLUESTATE_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects GLUESTATE_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "gluestate"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML config file into a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping; empty if the file is missing or empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """Settings source that reads the user's config.yaml."""

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        *,
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            config_path: Override path for the config file (for testing).
                If not provided, uses GLUESTATE_CONFIG_DIR or the XDG path.
        """
        super().__init__(settings_cls)
        self._config_path = config_path or get_user_config_path()
        self._data = load_yaml_file(self._config_path)

    @property
    def config_path(self) -> _pathlib.Path:
        return self._config_path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the loaded file.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the file contents as a plain dict for Pydantic validation."""
        return dict(self._data)
