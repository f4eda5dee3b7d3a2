"""
Structural snapshots of a target graph.

A snapshot is an independent copy used only to compare a target before and
after a mutation. Containers (dicts, lists, tuples) and plain attribute
objects are rebuilt recursively; immutable scalars and callables are shared;
anything else goes through ``copy.deepcopy``.

Cyclic graphs are rejected up front with ``CyclicTargetError``. Sharing a
sub-object between two branches is fine; only a container that contains
itself (directly or through its descendants) is a cycle.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import typing as _typing

import gluestate.constants as constants
import gluestate.paths as paths
import gluestate.utils as utils

_IMMUTABLE_TYPES = (str, bytes, int, float, complex, bool, type(None))


class SnapshotError(ValueError):
    """Raised when a target cannot be snapshotted."""


class CyclicTargetError(SnapshotError):
    """Raised when a target contains a reference cycle."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Target contains a reference cycle at {location or '<root>'}")


class SnapshotDepthError(SnapshotError):
    """Raised when a target is nested deeper than the configured limit."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"Target is nested deeper than {max_depth} levels")


def _location(parent: str, token: str | int) -> str:
    if isinstance(token, int):
        return f"{parent}[{token}]"
    return f"{parent}.{token}" if parent else str(token)


class _Cloner:
    """Recursive copier tracking the ancestry of the container being copied."""

    def __init__(self, max_depth: int) -> None:
        self._max_depth = max_depth
        self._ancestors: set[int] = set()

    def clone(self, value: _typing.Any, location: str, depth: int) -> _typing.Any:
        if isinstance(value, _IMMUTABLE_TYPES) or value is paths.MISSING:
            return value
        if callable(value) and not isinstance(value, (_abc.Mapping, _abc.Sequence)):
            return value

        is_container = isinstance(value, (dict, list, tuple)) or utils.is_plain_object(value)
        if not is_container:
            return _copy.deepcopy(value)

        if depth > self._max_depth:
            raise SnapshotDepthError(self._max_depth)
        marker = id(value)
        if marker in self._ancestors:
            raise CyclicTargetError(location)

        self._ancestors.add(marker)
        try:
            if isinstance(value, dict):
                return {
                    key: self.clone(item, _location(location, key), depth + 1)
                    for key, item in value.items()
                }
            if isinstance(value, (list, tuple)):
                items = [
                    self.clone(item, _location(location, index), depth + 1)
                    for index, item in enumerate(value)
                ]
                return items if isinstance(value, list) else tuple(items)
            clone = _copy.copy(value)
            state = vars(clone)
            for name, item in vars(value).items():
                state[name] = self.clone(item, _location(location, name), depth + 1)
            return clone
        finally:
            self._ancestors.discard(marker)


def take_snapshot(
    value: _typing.Any,
    *,
    max_depth: int = constants.DEFAULT_SNAPSHOT_MAX_DEPTH,
) -> _typing.Any:
    """
    Return an independent structural copy of ``value``.

    Args:
        value: Target graph to copy.
        max_depth: Maximum container nesting allowed.

    Returns:
        A copy sharing no mutable containers with ``value``.

    Raises:
        CyclicTargetError: If a container is reachable from itself.
        SnapshotDepthError: If nesting exceeds ``max_depth``.
    """
    return _Cloner(max_depth).clone(value, "", 0)
