"""
Shared constants for gluestate.

This module provides a single source of truth for the path tokens and
operation names used across the path grammar, the registry and the notifier.
"""

# Path tokens
ROOT_KEYS = frozenset({"", "*"})
"""Keys that address the whole target."""

WILDCARD_KEY = "*"
"""Registry key used when an observer is added without a path."""

GENERIC_SUFFIX = "[]"
"""Trailing marker that turns a path into a generic (every element) key."""

KEY_SEPARATOR = ","
"""Separates independent keys inside one registration string."""

OPERATIONS_SEPARATOR = ":"
"""Separates the key part from the operation filter."""

# Operation names
OP_SET = "set"
OP_REMOVE = "remove"
OP_SWAP = "swap"
OP_PUSH = "push"
OP_POP = "pop"
OP_INSERT = "insert"
OP_FILTER = "filter"
OP_SORT_BY = "sort_by"

OPERATIONS = (
    OP_SET,
    OP_REMOVE,
    OP_SWAP,
    OP_PUSH,
    OP_POP,
    OP_INSERT,
    OP_FILTER,
    OP_SORT_BY,
)
"""All operation names a mutation can report, in declaration order."""

REVERSED_OPERATIONS = frozenset({OP_FILTER, OP_SORT_BY})
"""Operations whose per-index messages are delivered highest index first."""

# Snapshot defaults
DEFAULT_SNAPSHOT_MAX_DEPTH = 500
"""Default nesting limit for snapshots (kept below the interpreter recursion limit)."""
