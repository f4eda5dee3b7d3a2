"""
gluestate - observable object graphs.

Wrap a plain object graph in a ``Glue``, mutate it through path-addressed
operations, and observers registered on those paths are told what changed.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("gluestate")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from gluestate.bus import EventBus, Subscription  # noqa: E402
from gluestate.config import ConfigFileError, Settings  # noqa: E402
from gluestate.glue import Glue, NotAListError  # noqa: E402
from gluestate.observers import ANY, Message  # noqa: E402
from gluestate.paths import (  # noqa: E402
    MISSING,
    InvalidPathError,
    PathError,
    UnresolvedPathError,
)
from gluestate.snapshot import (  # noqa: E402
    CyclicTargetError,
    SnapshotDepthError,
    SnapshotError,
)

__all__ = [
    "__version__",
    "__version_info__",
    "ANY",
    "ConfigFileError",
    "CyclicTargetError",
    "EventBus",
    "Glue",
    "InvalidPathError",
    "MISSING",
    "Message",
    "NotAListError",
    "PathError",
    "Settings",
    "SnapshotDepthError",
    "SnapshotError",
    "Subscription",
    "UnresolvedPathError",
]
