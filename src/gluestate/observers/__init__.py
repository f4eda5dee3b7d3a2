"""
Observer registration and change notification.

Example usage:
    import gluestate.observers as observers

    registry = observers.ObserverRegistry()
    registry.add("items[]:push", on_item, context=None)
    notifier = observers.Notifier(registry)
    notifier.notify("push", "items", old_snapshot, target)
"""

from gluestate.observers.messages import Message
from gluestate.observers.notifier import Notifier
from gluestate.observers.registry import (
    ANY,
    Observer,
    ObserverRegistry,
)

__all__ = [
    "ANY",
    "Message",
    "Notifier",
    "Observer",
    "ObserverRegistry",
]
