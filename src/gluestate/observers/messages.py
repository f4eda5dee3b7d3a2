"""
Message payloads delivered to observers.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing


@_dataclasses.dataclass(frozen=True)
class Message:
    """
    A change notification.

    Attributes:
        operation: Name of the mutation that caused the change.
        value: Current value at the observed path (``None`` if it is gone).
        index: Element index, present only for generic (``path[]``) observers.
        context: The observer's registration context. Not part of equality.
    """

    operation: str
    value: _typing.Any
    index: int | None = None
    context: _typing.Any = _dataclasses.field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to a plain dict; ``index`` is included only when set."""
        result: dict[str, _typing.Any] = {
            "operation": self.operation,
            "value": self.value,
        }
        if self.index is not None:
            result["index"] = self.index
        return result
