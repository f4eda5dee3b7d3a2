"""
In-process event bus for named events.

Unlike observers, listeners here are not tied to paths or diffs: ``emit``
calls every listener subscribed to an event name, synchronously and in
subscription order. A bus is an ordinary object. Several ``Glue`` instances
can share one by passing it in; each instance subscribes as its own owner, so
removing its listeners leaves the others alone.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)

Listener = _typing.Callable[..., _typing.Any]


@_dataclasses.dataclass(frozen=True)
class _Entry:
    callback: Listener
    owner: _typing.Any


class Subscription:
    """Handle returned by ``EventBus.subscribe``; call ``close()`` to unsubscribe."""

    def __init__(self, bus: EventBus, event: str, entry: _Entry) -> None:
        self._bus = bus
        self.event = event
        self._entry = entry
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._discard(self.event, self._entry)


class EventBus:
    """Synchronous publish/subscribe keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Entry]] = {}

    def subscribe(
        self,
        event: str,
        callback: Listener,
        *,
        owner: _typing.Any = None,
    ) -> Subscription:
        """
        Subscribe ``callback`` to ``event``.

        Args:
            event: Event name.
            callback: Called with the arguments given to ``emit``.
            owner: Optional owner object, used to unsubscribe in bulk.

        Returns:
            Subscription handle for this registration.

        Raises:
            TypeError: If ``callback`` is not callable.
        """
        if not callable(callback):
            raise TypeError(f"Listener must be callable, got {type(callback).__name__}")
        entry = _Entry(callback, owner)
        self._listeners.setdefault(event, []).append(entry)
        _logger.debug("Subscribed listener to %r", event)
        return Subscription(self, event, entry)

    def unsubscribe(
        self,
        event: str,
        *,
        callback: Listener | None = None,
        owner: _typing.Any = None,
    ) -> int:
        """
        Remove listeners of ``event`` matching every given criterion.

        With neither ``callback`` nor ``owner`` given, every listener of the
        event is removed.

        Returns:
            Number of listeners removed.
        """
        entries = self._listeners.get(event)
        if not entries:
            return 0

        def matches(entry: _Entry) -> bool:
            if callback is not None and entry.callback != callback:
                return False
            if owner is not None and entry.owner is not owner:
                return False
            return True

        kept = [e for e in entries if not matches(e)]
        removed = len(entries) - len(kept)
        if kept:
            self._listeners[event] = kept
        else:
            del self._listeners[event]
        _logger.debug("Unsubscribed %d listener(s) from %r", removed, event)
        return removed

    def _discard(self, event: str, entry: _Entry) -> None:
        entries = self._listeners.get(event)
        if not entries:
            return
        for i in range(len(entries) - 1, -1, -1):
            if entries[i] is entry:
                entries.pop(i)
                break
        if not entries:
            del self._listeners[event]

    def emit(self, event: str, *args: _typing.Any, **kwargs: _typing.Any) -> int:
        """
        Call every listener of ``event`` with the given arguments.

        Listeners run over a copy of the subscription list, so subscribing or
        unsubscribing from inside a listener affects later emits only.
        Exceptions from listeners propagate.

        Returns:
            Number of listeners called.
        """
        entries = list(self._listeners.get(event, ()))
        for entry in entries:
            entry.callback(*args, **kwargs)
        return len(entries)

    def events(self) -> list[str]:
        """Event names with at least one listener."""
        return list(self._listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def clear(self) -> None:
        self._listeners.clear()
