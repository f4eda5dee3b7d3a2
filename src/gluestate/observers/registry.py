"""
Observer registry.

Observers are stored in two tables:
- specific: exact path -> observers ("a.b", "items[2]", "*")
- generic:  path ending in "[]" -> observers ("items[]"), which are told about
  every element of the addressed list

Within one key, observers keep registration order. A key whose last observer
is removed is deleted from its table.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import gluestate.constants as constants
import gluestate.observers.messages as messages
import gluestate.paths as paths

_logger = _logging.getLogger(__name__)

Callback = _typing.Callable[[messages.Message], _typing.Any]


class _AnyContext:
    def __repr__(self) -> str:
        return "ANY"


ANY: _typing.Final = _AnyContext()
"""Removal criterion matching every context."""


@_dataclasses.dataclass(frozen=True)
class Observer:
    """A registered callback with its context and operation filter."""

    callback: Callback
    context: _typing.Any
    operations: frozenset[str] = frozenset()
    """Operations this observer cares about; empty means all of them."""

    def accepts(self, operation: str) -> bool:
        """Check whether this observer wants messages for ``operation``."""
        return not self.operations or operation in self.operations


class ObserverRegistry:
    """
    Registry of specific and generic observers.

    Registration strings follow the path grammar plus two extensions:
    comma-separated keys register the same callback on several paths, and a
    colon-suffixed list of operation names restricts which mutations the
    observer hears about ("items[], total:push,pop").
    """

    def __init__(self) -> None:
        self._specific: dict[str, list[Observer]] = {}
        self._generic: dict[str, list[Observer]] = {}

    def _table_for(self, key: str) -> dict[str, list[Observer]]:
        return self._generic if paths.is_generic(key) else self._specific

    def add(
        self,
        key: str,
        callback: Callback,
        context: _typing.Any,
    ) -> list[Observer]:
        """
        Register ``callback`` on every key in a registration string.

        Args:
            key: Registration string; "" registers on the whole target.
            callback: Called with a ``Message`` on each relevant change.
            context: Registration context, carried on each message.

        Returns:
            The observer records created, one per key.

        Raises:
            TypeError: If ``callback`` is not callable.
        """
        if not callable(callback):
            raise TypeError(f"Observer callback must be callable, got {type(callback).__name__}")

        keys, operations = paths.split_keys_and_operations(key)
        created: list[Observer] = []
        for k in keys:
            k = k or constants.WILDCARD_KEY
            observer = Observer(callback, context, frozenset(operations))
            self._table_for(k).setdefault(k, []).append(observer)
            created.append(observer)
            _logger.debug("Added observer on %r (operations=%s)", k, sorted(operations) or "all")
        return created

    def remove(
        self,
        key: str | None = None,
        context: _typing.Any = ANY,
    ) -> int:
        """
        Remove observers by key, by context, or both.

        With an operation filter in ``key`` ("a:set"), only those operations
        are subtracted from matching observers; an observer left with no
        operations is removed. Without one, matching observers are removed
        outright.

        Args:
            key: Registration string; None or "" means every key.
            context: Only remove observers registered with this exact
                context object (compared by identity). ``ANY`` matches all.

        Returns:
            Number of observer records removed.
        """
        keys, operations = paths.split_keys_and_operations(key or "")
        if keys == [""]:
            targets = list(self._specific) + list(self._generic)
        else:
            targets = [k or constants.WILDCARD_KEY for k in keys]

        removed = 0
        for k in targets:
            table = self._table_for(k)
            observers = table.get(k)
            if not observers:
                continue

            kept: list[Observer] = []
            for observer in observers:
                if context is not ANY and observer.context is not context:
                    kept.append(observer)
                    continue
                if operations:
                    remaining = observer.operations.difference(operations)
                    if remaining:
                        kept.append(_dataclasses.replace(observer, operations=remaining))
                        continue
                removed += 1

            if kept:
                table[k] = kept
            else:
                del table[k]

        _logger.debug("Removed %d observer(s) for %r", removed, key or "<all>")
        return removed

    def clear(self) -> None:
        """Remove every observer."""
        self._specific.clear()
        self._generic.clear()

    def specific_items(self) -> list[tuple[str, tuple[Observer, ...]]]:
        """Snapshot of the specific table, safe to iterate while it changes."""
        return [(k, tuple(v)) for k, v in self._specific.items()]

    def generic_items(self) -> list[tuple[str, tuple[Observer, ...]]]:
        """Snapshot of the generic table, safe to iterate while it changes."""
        return [(k, tuple(v)) for k, v in self._generic.items()]

    def observers_for(self, key: str) -> tuple[Observer, ...]:
        """Observers registered on exactly ``key`` (empty if none)."""
        return tuple(self._table_for(key).get(key, ()))

    def keys(self) -> list[str]:
        """All registered keys, specific first."""
        return list(self._specific) + list(self._generic)

    def __len__(self) -> int:
        return sum(len(v) for v in self._specific.values()) + sum(
            len(v) for v in self._generic.values()
        )

    def __contains__(self, key: str) -> bool:
        return key in self._table_for(key)
