"""Dotted field path access for nested documents.

Supports paths like:
  - 'author'              → simple key
  - 'inner.book'          → nested key
  - 'inner.books[0].author' → list index (same as 'inner.books.0.author')

Lookups never raise on a missing segment; they return ``MISSING`` instead.
Assignment only ever overwrites a field that already exists: ``set_path`` never
creates keys or list slots.
"""

import re
from typing import Any

_INDEX_RE = re.compile(r'\[(\d+)\]')


class _Missing:
    """Marker for a path that does not resolve to a value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def split_path(path: str) -> list[str]:
    """Split a path into segments, normalizing ``[n]`` to ``.n``.

    Args:
        path: Dotted path, optionally with bracketed list indexes.

    Returns:
        List of non-empty segments.
    """
    if not path:
        return []
    normalized = _INDEX_RE.sub(r'.\1', path)
    return [part for part in normalized.split('.') if part]


def last_segment(path: str) -> str:
    """Return the final segment of a path (the path itself if it has no separators)."""
    parts = split_path(path)
    return parts[-1] if parts else path


def get_path(data: Any, path: str) -> Any:
    """Read the value at ``path``.

    Args:
        data: Root document.
        path: Dotted path with optional [n] indexes.

    Returns:
        The value found, or ``MISSING`` if any segment is absent.
    """
    node = data
    for part in split_path(path):
        node = _step(node, part)
        if node is MISSING:
            return MISSING
    return node


def has_path(data: Any, path: str) -> bool:
    """True if ``path`` resolves to a value (``None`` counts as present)."""
    return get_path(data, path) is not MISSING


def set_path(data: Any, path: str, value: Any) -> bool:
    """Overwrite the existing field at ``path`` with ``value`` (mutates ``data``).

    Only assigns when the terminal segment already exists on its parent:
    a dict key already present, or a list index within range. Missing
    intermediate segments or a missing terminal field leave ``data`` untouched.

    Args:
        data: Root document (mutated in place).
        path: Dotted path with optional [n] indexes.
        value: Replacement value.

    Returns:
        True if the value was assigned, False otherwise.
    """
    parts = split_path(path)
    if not parts:
        return False

    parent = data
    for part in parts[:-1]:
        parent = _step(parent, part)
        if parent is MISSING:
            return False

    terminal = parts[-1]
    if isinstance(parent, dict):
        if terminal not in parent:
            return False
        parent[terminal] = value
        return True
    if isinstance(parent, list):
        index = _as_index(terminal, len(parent))
        if index is None:
            return False
        parent[index] = value
        return True
    return False


def _step(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node[part] if part in node else MISSING
    if isinstance(node, list):
        index = _as_index(part, len(node))
        return node[index] if index is not None else MISSING
    return MISSING


def _as_index(part: str, length: int) -> int | None:
    if not part.isdigit():
        return None
    index = int(part)
    return index if index < length else None
