"""
Pure helpers used by the notifier, snapshots and the list operations.

Equality here is structural and stricter than ``==`` in the ways that matter
for change detection: NaN equals NaN, booleans never equal numbers, and plain
attribute objects compare by type and attributes instead of identity.
"""

from __future__ import annotations

import collections.abc as _abc
import math as _math
import types as _types
import typing as _typing

import gluestate.paths as paths

T = _typing.TypeVar("T")


def _is_nan(value: _typing.Any) -> bool:
    return isinstance(value, float) and _math.isnan(value)


def is_plain_object(value: _typing.Any) -> bool:
    """
    Check whether a value is an attribute object without its own equality.

    Such objects compare by identity under ``==``, so snapshots and
    ``deep_equal`` treat them structurally through ``vars()``. Callables are
    excluded; they are always compared by identity.
    """
    return (
        hasattr(value, "__dict__")
        and type(value).__eq__ is object.__eq__
        and not callable(value)
        and not isinstance(value, _types.ModuleType)
    )


def deep_equal(a: _typing.Any, b: _typing.Any) -> bool:
    """
    Compare two values structurally.

    Args:
        a: First value (``MISSING`` allowed).
        b: Second value (``MISSING`` allowed).

    Returns:
        True if both values have the same shape and leaves. Mappings compare
        by key set and recursive values; lists and tuples by length and
        recursive elements; plain attribute objects by type and recursive
        attributes; ``MISSING`` only equals ``MISSING``.
    """
    if a is b:
        return True
    if a is paths.MISSING or b is paths.MISSING:
        return False
    if _is_nan(a) and _is_nan(b):
        return True
    if a is None or b is None:
        return False
    if isinstance(a, bool) != isinstance(b, bool):
        return False

    if isinstance(a, _abc.Mapping):
        if not isinstance(b, _abc.Mapping) or len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b or not deep_equal(value, b[key]):
                return False
        return True

    if paths.is_list_like(a):
        if not paths.is_list_like(b) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if isinstance(b, _abc.Mapping) or paths.is_list_like(b):
        return False

    if is_plain_object(a) or is_plain_object(b):
        return type(a) is type(b) and deep_equal(vars(a), vars(b))

    try:
        return bool(a == b)
    except Exception:
        # Objects with array-valued __eq__ (e.g. numpy) cannot be reduced to bool
        return False


def filter(  # noqa: A001 - mirrors the mutation operation name
    items: _typing.Sequence[T],
    predicate: _typing.Callable[[T], bool],
) -> list[T]:
    """Return the elements for which ``predicate`` is true, in order."""
    return [item for item in items if predicate(item)]


def sort_by(
    items: _typing.Iterable[T],
    key_fn: _typing.Callable[[T], _typing.Any],
) -> list[T]:
    """Return a new list sorted by ``key_fn``; equal keys keep their order."""
    return sorted(items, key=key_fn)
