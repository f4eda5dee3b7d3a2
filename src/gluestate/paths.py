"""
Path grammar and resolver.

Paths address values inside a target graph:
- "a.b.c"          nested properties
- "items[2].name"  list indices in brackets
- "[0]"            an index into a root list
- "" or "*"        the whole target
- "items[]"        generic key: every element of ``items`` (registration only)

Resolution is plain traversal. Path text is never evaluated as code, and a
read through an absent or ``None`` link yields ``MISSING`` instead of raising.
Writes go through ``resolve_for_write`` and ``assign``, which refuse to create
intermediate structure.
"""

from __future__ import annotations

import collections.abc as _abc
import functools as _functools
import re as _re
import typing as _typing

import gluestate.constants as constants


class _Missing:
    """Type of the ``MISSING`` sentinel."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> _Missing:
        return self


MISSING: _typing.Final = _Missing()
"""Marks a value that could not be resolved. Distinct from ``None``."""


class PathError(Exception):
    """Base class for errors raised while interpreting a path."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path!r}")


class InvalidPathError(PathError, ValueError):
    """Raised when path text does not follow the grammar."""


class UnresolvedPathError(PathError, LookupError):
    """Raised when a write would have to go through an absent container."""


class KeyPermutation(_typing.NamedTuple):
    """An indexed prefix of a path, paired with its generic form."""

    specific: str
    generic: str
    index: int


class WriteLocation(_typing.NamedTuple):
    """Where a write lands: the container's path and the leaf inside it."""

    container_path: str
    leaf: str | int


Token = _typing.Union[str, int]

_WHITESPACE_RE = _re.compile(r"\s")
_SEGMENT_RE = _re.compile(r"^(?P<name>[^\[\]]*)(?P<indices>(?:\[\d+\])*)$")
_INDEX_RE = _re.compile(r"\[(\d+)\]")
_TRAILING_INDEX_RE = _re.compile(r"\[(\d+)\]$")
_TRAILING_BRACKET_RE = _re.compile(r"\[[^\[]*\]$")

# Values that never expose traversable attributes
_OPAQUE_TYPES = (str, bytes, bytearray, int, float, complex, bool)


def normalize_key(key: str) -> str:
    """Remove all whitespace from a key string."""
    return _WHITESPACE_RE.sub("", key)


def is_root(path: str) -> bool:
    """Check whether a path addresses the whole target."""
    return path in constants.ROOT_KEYS


def is_generic(path: str) -> bool:
    """Check whether a path is a generic (every element) key."""
    return path.endswith(constants.GENERIC_SUFFIX)


def base_key(path: str) -> str:
    """
    Strip one trailing bracket group from a path.

    "a.b[3]" becomes "a.b" and "arr[]" becomes "arr".
    """
    return _TRAILING_BRACKET_RE.sub("", path, count=1)


@_functools.lru_cache(maxsize=2048)
def parse_path(path: str) -> tuple[Token, ...]:
    """
    Split a path into property names and list indices.

    Args:
        path: Path text such as "a.items[2].name".

    Returns:
        Tuple of tokens; strings are property names, ints are indices.
        Root paths ("" and "*") give an empty tuple.

    Raises:
        InvalidPathError: If a segment is empty or a bracket is malformed.
    """
    if is_root(path):
        return ()

    tokens: list[Token] = []
    for segment in path.split("."):
        match = _SEGMENT_RE.match(segment)
        if match is None or not segment:
            raise InvalidPathError(path, "malformed path segment")
        name = match.group("name")
        if name:
            tokens.append(name)
        tokens.extend(int(i) for i in _INDEX_RE.findall(match.group("indices")))
    return tuple(tokens)


def split_keys_and_operations(ko: str) -> tuple[list[str], list[str]]:
    """
    Split a registration string into keys and an operation filter.

    "a, b[]:set,push" gives (["a", "b[]"], ["set", "push"]).

    Args:
        ko: Registration string; whitespace is insignificant.

    Returns:
        Tuple of (keys, operations). An empty key part yields [""]; an
        empty operation part yields [].
    """
    normalized = normalize_key(ko)
    key_part, _, operations_part = normalized.partition(constants.OPERATIONS_SEPARATOR)
    keys = key_part.split(constants.KEY_SEPARATOR) if key_part else [""]
    operations = [op for op in operations_part.split(constants.KEY_SEPARATOR) if op]
    return keys, operations


def permutate_key(path: str) -> list[KeyPermutation]:
    """
    List the indexed dot-prefixes of a path.

    For "a[1].b[2].c" this yields ("a[1]", "a[]", 1) and
    ("a[1].b[2]", "a[1].b[]", 2).
    """
    permutations: list[KeyPermutation] = []
    segments = path.split(".")
    for i in range(1, len(segments) + 1):
        prefix = ".".join(segments[:i])
        match = _TRAILING_INDEX_RE.search(prefix)
        if match:
            permutations.append(
                KeyPermutation(
                    specific=prefix,
                    generic=prefix[: match.start()] + constants.GENERIC_SUFFIX,
                    index=int(match.group(1)),
                )
            )
    return permutations


def is_list_like(value: _typing.Any) -> bool:
    """Check whether a value is an indexable sequence other than text."""
    return isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes, bytearray))


def _step(container: _typing.Any, token: Token) -> _typing.Any:
    if isinstance(container, _abc.Mapping):
        return container.get(token, MISSING)
    if isinstance(token, int):
        if is_list_like(container) and token < len(container):
            return container[token]
        return MISSING
    if isinstance(container, _OPAQUE_TYPES) or is_list_like(container):
        return MISSING
    return getattr(container, token, MISSING)


def resolve_tokens(tokens: _typing.Iterable[Token], root: _typing.Any) -> _typing.Any:
    """Walk already-parsed tokens from ``root``; see ``resolve``."""
    current = root
    for token in tokens:
        if current is None or current is MISSING:
            return MISSING
        current = _step(current, token)
    return current


def resolve(path: str, root: _typing.Any) -> _typing.Any:
    """
    Read the value at ``path`` inside ``root``.

    Never raises: malformed paths and absent or ``None`` links all give
    ``MISSING``. A ``None`` stored at the leaf itself is returned as ``None``.
    """
    try:
        tokens = parse_path(path)
    except InvalidPathError:
        return MISSING
    return resolve_tokens(tokens, root)


def resolve_for_write(path: str) -> WriteLocation:
    """
    Split a path into the container to write through and the leaf key.

    The split happens at whichever comes last of the final "." and the final
    "[". "a.b[2]" gives ("a.b", 2); "a.b" gives ("a", "b"); "[0]" gives
    ("", 0).

    Raises:
        InvalidPathError: If the path is malformed or addresses the root.
    """
    if is_root(path):
        raise InvalidPathError(path, "cannot write to the whole target")
    parse_path(path)

    last_dot = path.rfind(".")
    last_bracket = path.rfind("[")
    split = max(last_dot, last_bracket)
    container_path = path[:split] if split > 0 else ""
    if container_path.endswith("."):
        container_path = container_path[:-1]

    leaf: str | int
    if split >= 0 and split == last_bracket:
        leaf = int(path[split + 1 : -1])
    else:
        leaf = path[split + 1 :]
    return WriteLocation(container_path, leaf)


def require_container(container: _typing.Any, path: str) -> None:
    """Raise ``UnresolvedPathError`` unless ``container`` can be written through."""
    if container is None or container is MISSING:
        raise UnresolvedPathError(path, "cannot write through an absent container")


def assign(container: _typing.Any, leaf: str | int, value: _typing.Any, *, path: str) -> None:
    """
    Write ``value`` into ``container`` at ``leaf``.

    Lists grow when the index is at or past the end; the gap is padded with
    ``None``. Assigning ``MISSING`` deletes a mapping key or attribute.

    Args:
        container: Live container resolved from the target.
        leaf: Property name or list index.
        value: Value to store.
        path: Full path, used in error messages.

    Raises:
        UnresolvedPathError: If the container is absent or cannot hold ``leaf``.
    """
    require_container(container, path)

    if isinstance(container, _abc.MutableMapping):
        if value is MISSING:
            container.pop(leaf, None)
        else:
            container[leaf] = value
        return

    if isinstance(leaf, int) and isinstance(container, _abc.MutableSequence):
        if value is MISSING:
            value = None
        size = len(container)
        if leaf < size:
            container[leaf] = value
        else:
            container.extend([None] * (leaf - size))
            container.append(value)
        return

    if isinstance(leaf, int) or isinstance(container, _OPAQUE_TYPES) or is_list_like(container):
        raise UnresolvedPathError(path, f"cannot assign into {type(container).__name__}")

    if value is MISSING:
        if hasattr(container, leaf):
            delattr(container, leaf)
    else:
        setattr(container, leaf, value)


def delete(container: _typing.Any, leaf: str | int, *, path: str) -> _typing.Any:
    """
    Remove ``leaf`` from ``container`` and return what was there.

    Returns ``None`` when nothing was stored at ``leaf`` (including list
    indices out of range).

    Raises:
        UnresolvedPathError: If the container is absent or cannot hold ``leaf``.
    """
    require_container(container, path)

    if isinstance(container, _abc.MutableMapping):
        return container.pop(leaf, None)

    if isinstance(leaf, int) and isinstance(container, _abc.MutableSequence):
        if 0 <= leaf < len(container):
            return container.pop(leaf)
        return None

    if isinstance(leaf, int) or isinstance(container, _OPAQUE_TYPES) or is_list_like(container):
        raise UnresolvedPathError(path, f"cannot delete from {type(container).__name__}")

    if not hasattr(container, leaf):
        return None
    value = getattr(container, leaf)
    delattr(container, leaf)
    return value
