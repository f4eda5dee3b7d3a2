"""
Glue - an observable wrapper around a mutable object graph.

A ``Glue`` owns a target (typically nested dicts and lists) and mutates it
on request. Every mutation follows the same three steps: snapshot the target,
change it in place, then hand the snapshot to the notifier, which compares
before and after and calls the observers whose values actually changed.

Example:
    glue = Glue({"cart": {"items": [], "total": 0}})
    glue.add_observer("cart.items[]:push", lambda msg: print(msg.index, msg.value))
    glue.push("cart.items", {"name": "coffee", "price": 5})

Mutating ``glue.target`` directly is allowed but notifies no one.
"""

from __future__ import annotations

import itertools as _itertools
import typing as _typing

import gluestate.bus as bus_module
import gluestate.config as config
import gluestate.constants as constants
import gluestate.observers.notifier as notifier
import gluestate.observers.registry as observer_registry
import gluestate.paths as paths
import gluestate.utils as utils


class NotAListError(TypeError):
    """Raised when a list operation addresses something that is not a list."""

    def __init__(self, path: str, value: _typing.Any) -> None:
        self.path = path
        found = "nothing" if value is paths.MISSING else type(value).__name__
        super().__init__(f"Expected a list at {path or '<root>'!r}, found {found}")


class _Unset:
    def __repr__(self) -> str:
        return "<target>"


_DEFAULT_CONTEXT: _typing.Final = _Unset()


class Glue:
    """
    Observable target with path-addressed mutations.

    Observers are registered on paths and receive a ``Message`` for each
    change that affects their path. Mutations return the Glue for chaining,
    except those whose natural result is a value (``remove``, ``pop``,
    ``filter``, ``sort_by``).
    """

    _object_ids = _itertools.count(1)

    @classmethod
    def next_object_id(cls) -> int:
        """Return a new process-unique object id."""
        return next(cls._object_ids)

    def __init__(
        self,
        target: _typing.Any,
        *,
        bus: bus_module.EventBus | None = None,
        settings: config.Settings | None = None,
    ) -> None:
        """
        Initialize the Glue.

        Args:
            target: The object graph to observe.
            bus: Event bus for ``add_listener``/``emit``. A private bus is
                created when omitted.
            settings: Configuration. The shared ``config.get_settings()``
                (loaded once from env and config files) when omitted.
        """
        self.target = target
        self.settings = settings if settings is not None else config.get_settings()
        self.bus = bus if bus is not None else bus_module.EventBus()
        self.obj_id = Glue.next_object_id()
        self._registry = observer_registry.ObserverRegistry()
        self._notifier = notifier.Notifier(
            self._registry,
            trace=self.settings.notify.trace,
            max_snapshot_depth=self.settings.snapshot.max_depth,
        )

    def __repr__(self) -> str:
        return f"Glue(obj_id={self.obj_id}, observers={len(self._registry)})"

    @property
    def registry(self) -> observer_registry.ObserverRegistry:
        """The observer registry (read it; register through ``add_observer``)."""
        return self._registry

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(
        self,
        key: str,
        callback: observer_registry.Callback,
        *,
        context: _typing.Any = _DEFAULT_CONTEXT,
    ) -> Glue:
        """
        Register ``callback`` for changes at ``key``.

        Args:
            key: Registration string: one or more comma-separated paths, an
                optional ":op1,op2" operation filter. "" and "*" observe the
                whole target; a trailing "[]" observes every list element.
            callback: Called with a ``Message``.
            context: Carried on each message as ``message.context`` and used
                to remove observers in bulk. Defaults to the current target.

        Returns:
            This Glue.
        """
        if context is _DEFAULT_CONTEXT:
            context = self.target
        self._registry.add(key, callback, context)
        return self

    def remove_observer(
        self,
        key: str | None = None,
        *,
        context: _typing.Any = observer_registry.ANY,
    ) -> None:
        """
        Remove observers.

        - ``remove_observer()`` removes everything.
        - ``remove_observer("a, b")`` removes by key across all contexts.
        - ``remove_observer(context=obj)`` removes by context across all keys.
        - ``remove_observer("a", context=obj)`` requires both to match.

        An operation filter ("a:set") subtracts only those operations.
        Removal does not affect a notification pass already in progress.
        """
        self._registry.remove(key, context)

    def reset_observers(self) -> None:
        """Remove every observer."""
        self._registry.clear()

    # =========================================================================
    # Reads
    # =========================================================================

    def get(
        self,
        path: str = "",
        source: _typing.Any = None,
        default: _typing.Any = None,
    ) -> _typing.Any:
        """
        Read the value at ``path``. Never notifies and never raises.

        Args:
            path: Path to read; "" or "*" return the whole target.
            source: Graph to read from instead of the target.
            default: Returned when the path cannot be resolved.
        """
        root = self.target if source is None else source
        value = paths.resolve(paths.normalize_key(path), root)
        return default if value is paths.MISSING else value

    # =========================================================================
    # Mutations
    # =========================================================================

    def _snapshot(self) -> _typing.Any:
        return self._notifier.snapshot(self.target)

    def _notify(
        self,
        operation: str,
        key: str,
        old_snapshot: _typing.Any,
    ) -> None:
        reverse = operation in constants.REVERSED_OPERATIONS
        self._notifier.notify(operation, key, old_snapshot, self.target, reverse=reverse)

    def _locate(self, path: str) -> tuple[_typing.Any, str | int]:
        location = paths.resolve_for_write(path)
        container = paths.resolve(location.container_path, self.target)
        return container, location.leaf

    def _list_at(self, path: str) -> tuple[str, list[_typing.Any]]:
        key = paths.normalize_key(path)
        if paths.is_root(key):
            key = ""
        collection = paths.resolve(key, self.target)
        if not isinstance(collection, list):
            raise NotAListError(key, collection)
        return key, collection

    def set(self, path: str, value: _typing.Any) -> Glue:
        """
        Write ``value`` at ``path``.

        Raises:
            InvalidPathError: If the path is malformed or is the root.
            UnresolvedPathError: If the containing object does not exist.
        """
        path = paths.normalize_key(path)
        old_snapshot = self._snapshot()
        container, leaf = self._locate(path)
        paths.assign(container, leaf, value, path=path)
        self._notify(constants.OP_SET, path, old_snapshot)
        return self

    def remove(self, path: str) -> _typing.Any:
        """
        Delete the property or list element at ``path``.

        "items[2]" removes index 2 from ``items`` (shifting later elements);
        "[2]" does the same on a root list; "a.b" deletes key ``b`` from ``a``.
        An index removal is reported on the literal path, so "items[]"
        observers hear about the removed index only; a property removal is
        reported on the parent object.

        Returns:
            The removed value, or None if nothing was there.

        Raises:
            UnresolvedPathError: If the containing object does not exist.
        """
        path = paths.normalize_key(path)
        old_snapshot = self._snapshot()
        location = paths.resolve_for_write(path)
        container = paths.resolve(location.container_path, self.target)
        removed = paths.delete(container, location.leaf, path=path)
        if isinstance(location.leaf, int) or not location.container_path:
            changed = path
        else:
            changed = location.container_path
        self._notify(constants.OP_REMOVE, changed, old_snapshot)
        return removed

    def swap(self, path_a: str, path_b: str) -> Glue:
        """
        Exchange the values at two paths.

        Swapping a path with itself changes nothing and notifies no one.
        Otherwise one notification pass runs per path.
        """
        path_a = paths.normalize_key(path_a)
        path_b = paths.normalize_key(path_b)
        old_snapshot = self._snapshot()

        value_a = paths.resolve(path_a, self.target)
        value_b = paths.resolve(path_b, self.target)
        container_a, leaf_a = self._locate(path_a)
        container_b, leaf_b = self._locate(path_b)
        paths.require_container(container_a, path_a)
        paths.require_container(container_b, path_b)

        paths.assign(container_a, leaf_a, value_b, path=path_a)
        paths.assign(container_b, leaf_b, value_a, path=path_b)

        if path_a == path_b:
            return self
        self._notify(constants.OP_SWAP, path_a, old_snapshot)
        self._notify(constants.OP_SWAP, path_b, old_snapshot)
        return self

    def push(self, path: str, value: _typing.Any) -> Glue:
        """Append ``value`` to the list at ``path`` ("" for a root list)."""
        key, collection = self._list_at(path)
        old_snapshot = self._snapshot()
        collection.append(value)
        self._notify(constants.OP_PUSH, key, old_snapshot)
        return self

    def pop(self, path: str = "") -> _typing.Any:
        """Remove and return the last element of the list at ``path`` (None if empty)."""
        key, collection = self._list_at(path)
        old_snapshot = self._snapshot()
        value = collection.pop() if collection else None
        self._notify(constants.OP_POP, key, old_snapshot)
        return value

    def insert(self, path: str, index: int, value: _typing.Any) -> Glue:
        """Insert ``value`` before ``index`` in the list at ``path`` (``list.insert`` rules)."""
        key, collection = self._list_at(path)
        old_snapshot = self._snapshot()
        collection.insert(index, value)
        self._notify(constants.OP_INSERT, key, old_snapshot)
        return self

    def filter(
        self,
        path: str,
        predicate: _typing.Callable[[_typing.Any], bool],
    ) -> list[_typing.Any]:
        """
        Keep only the elements of the list at ``path`` that satisfy ``predicate``.

        The predicate runs over every element before the list is touched, so
        a predicate that raises leaves the list unchanged. Per-index messages
        to generic observers arrive highest index first.

        Returns:
            The filtered list (the same list object, modified in place).
        """
        key, collection = self._list_at(path)
        old_snapshot = self._snapshot()
        collection[:] = utils.filter(collection, predicate)
        self._notify(constants.OP_FILTER, key, old_snapshot)
        return collection

    def sort_by(
        self,
        path: str,
        key_fn: _typing.Callable[[_typing.Any], _typing.Any],
    ) -> list[_typing.Any]:
        """
        Stable in-place sort of the list at ``path`` by ``key_fn(element)``.

        Per-index messages to generic observers arrive highest index first.

        Returns:
            The sorted list (the same list object).
        """
        key, collection = self._list_at(path)
        old_snapshot = self._snapshot()
        collection[:] = utils.sort_by(collection, key_fn)
        self._notify(constants.OP_SORT_BY, key, old_snapshot)
        return collection

    # =========================================================================
    # Events
    # =========================================================================

    def add_listener(
        self,
        event: str,
        callback: bus_module.Listener,
    ) -> bus_module.Subscription:
        """Subscribe ``callback`` to ``event`` on this Glue's bus."""
        return self.bus.subscribe(event, callback, owner=self)

    def remove_listener(
        self,
        event: str,
        callback: bus_module.Listener | None = None,
    ) -> int:
        """Remove this Glue's listeners for ``event`` (only ``callback`` if given)."""
        return self.bus.unsubscribe(event, callback=callback, owner=self)

    def emit(self, event: str, *args: _typing.Any, **kwargs: _typing.Any) -> int:
        """Call every listener of ``event`` on the bus; returns how many ran."""
        return self.bus.emit(event, *args, **kwargs)
