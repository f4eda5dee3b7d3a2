"""
Change notifier - decides which observers hear about a mutation.

After every mutation the notifier compares a snapshot taken before the
change with one taken after it, and dispatches messages in three passes:

1. Specific observers. Every specific key in the registry is compared, not
   only keys related to the mutated path, because a registered path may alias
   into the mutated subtree (``swap`` and shared sub-objects both do this).
2. Generic observers on the indexed prefixes of the mutated path. Setting
   "items[2].name" tells "items[]" observers about index 2.
3. Generic observers on lists below the mutated path. Each element of each
   such list is compared; indices run high to low for reversed operations
   (``filter`` and ``sort_by``), low to high otherwise.

Dispatch is synchronous. An exception raised by a callback stops the pass and
propagates to the caller of the mutation.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import gluestate.constants as constants
import gluestate.observers.messages as messages
import gluestate.observers.registry as registry
import gluestate.paths as paths
import gluestate.snapshot as snapshot
import gluestate.utils as utils

_logger = _logging.getLogger(__name__)


def _length(value: _typing.Any) -> int:
    return len(value) if paths.is_list_like(value) else 0


def _element(value: _typing.Any, index: int) -> _typing.Any:
    if paths.is_list_like(value) and index < len(value):
        return value[index]
    return paths.MISSING


def _public(value: _typing.Any) -> _typing.Any:
    return None if value is paths.MISSING else value


class Notifier:
    """
    Diff-driven dispatcher for one registry.

    The notifier holds no target of its own; callers pass the live target and
    the pre-mutation snapshot on every call.
    """

    def __init__(
        self,
        observer_registry: registry.ObserverRegistry,
        *,
        trace: bool = False,
        max_snapshot_depth: int = constants.DEFAULT_SNAPSHOT_MAX_DEPTH,
    ) -> None:
        """
        Initialize the notifier.

        Args:
            observer_registry: Registry to read observers from.
            trace: Log every dispatched message at DEBUG level.
            max_snapshot_depth: Nesting limit for the post-mutation snapshot.
        """
        self._registry = observer_registry
        self._trace = trace
        self._max_snapshot_depth = max_snapshot_depth

    def snapshot(self, target: _typing.Any) -> _typing.Any:
        """Take a snapshot of ``target`` with this notifier's depth limit."""
        return snapshot.take_snapshot(target, max_depth=self._max_snapshot_depth)

    def notify(
        self,
        operation: str,
        key: str,
        old_snapshot: _typing.Any,
        target: _typing.Any,
        *,
        reverse: bool = False,
    ) -> int:
        """
        Dispatch messages for a mutation that has already been applied.

        Args:
            operation: Name of the mutation ("set", "push", ...).
            key: The path passed to the mutation ("" for the root).
            old_snapshot: Snapshot of the target taken before the mutation.
            target: The live, already-mutated target.
            reverse: Walk list indices from high to low in the third pass.

        Returns:
            Number of messages delivered.
        """
        current_snapshot = self.snapshot(target)
        delivered = 0

        for k, observers in self._registry.specific_items():
            delivered += self._compare(
                operation, observers, k, old_snapshot, current_snapshot, target
            )

        for permutation in paths.permutate_key(key):
            observers = self._registry.observers_for(permutation.generic)
            if observers:
                delivered += self._compare(
                    operation,
                    observers,
                    permutation.specific,
                    old_snapshot,
                    current_snapshot,
                    target,
                    index=permutation.index,
                )

        for k, observers in self._registry.generic_items():
            if k.startswith(key):
                delivered += self._compare_elements(
                    operation, observers, k, old_snapshot, current_snapshot, target, reverse
                )

        return delivered

    def _compare(
        self,
        operation: str,
        observers: _typing.Sequence[registry.Observer],
        path: str,
        old_snapshot: _typing.Any,
        current_snapshot: _typing.Any,
        target: _typing.Any,
        *,
        index: int | None = None,
    ) -> int:
        """Dispatch to ``observers`` if the value at ``path`` changed."""
        old_value = paths.resolve(path, old_snapshot)
        current_value = paths.resolve(path, current_snapshot)
        if utils.deep_equal(old_value, current_value):
            return 0
        live_value = paths.resolve(path, target)
        return self._dispatch(observers, operation, _public(live_value), index, path)

    def _compare_elements(
        self,
        operation: str,
        observers: _typing.Sequence[registry.Observer],
        generic_key: str,
        old_snapshot: _typing.Any,
        current_snapshot: _typing.Any,
        target: _typing.Any,
        reverse: bool,
    ) -> int:
        """Dispatch per-index messages for the list under a generic key."""
        base = paths.base_key(generic_key)
        live_list = paths.resolve(base, target)
        old_list = paths.resolve(base, old_snapshot)
        current_list = paths.resolve(base, current_snapshot)

        max_range = max(_length(old_list), _length(current_list))
        indices = range(max_range - 1, -1, -1) if reverse else range(max_range)

        delivered = 0
        for index in indices:
            if utils.deep_equal(_element(old_list, index), _element(current_list, index)):
                continue
            value = _public(_element(live_list, index))
            delivered += self._dispatch(observers, operation, value, index, generic_key)
        return delivered

    def _dispatch(
        self,
        observers: _typing.Sequence[registry.Observer],
        operation: str,
        value: _typing.Any,
        index: int | None,
        path: str,
    ) -> int:
        delivered = 0
        for observer in observers:
            if not observer.accepts(operation):
                continue
            message = messages.Message(operation, value, index, context=observer.context)
            if self._trace:
                _logger.debug("Dispatching %s on %r: %r", operation, path, message.to_dict())
            observer.callback(message)
            delivered += 1
        return delivered
