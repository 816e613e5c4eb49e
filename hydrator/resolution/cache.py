"""Per-call memoization of resolved children.

One ``ResolutionCache`` lives for exactly one top-level expand call (a whole
collection shares one). It maps ``(model name, key value)`` to whatever was
resolved for that pair so a provider is asked at most once per call.
A lookup that fails is evicted, so a later reference to the same pair asks
again; references awaiting it while it is in flight share the failure.
"""

import asyncio
from collections.abc import Hashable
from typing import Any, Callable, Iterator

from hydrator.domain.field_path import MISSING


class ResolutionCache:
    """Cache of ``(model_name, key_value) → value``.

    Key values that cannot be hashed (keyless models receive whole dict
    references) are kept in a per-model list and matched by equality.
    """

    def __init__(self) -> None:
        self._hashed: dict[tuple[str, Hashable], Any] = {}
        self._unhashed: dict[str, list[tuple[Any, Any]]] = {}

    def get(self, model_name: str, key_value: Any) -> Any:
        """Return the cached value, or ``MISSING`` on a miss."""
        if _is_hashable(key_value):
            return self._hashed.get((model_name, key_value), MISSING)
        for cached_key, value in self._unhashed.get(model_name, []):
            if cached_key == key_value:
                return value
        return MISSING

    def add(self, model_name: str, key_value: Any, value: Any) -> None:
        """Store ``value`` unless the pair is already cached (first write wins)."""
        if (model_name, key_value) in self:
            return
        if _is_hashable(key_value):
            self._hashed[(model_name, key_value)] = value
        else:
            self._unhashed.setdefault(model_name, []).append((key_value, value))

    def get_or_create(self, model_name: str, key_value: Any, factory: Callable[[], Any]) -> tuple[Any, bool]:
        """Return ``(value, hit)``, calling ``factory`` and caching its result on a miss."""
        cached = self.get(model_name, key_value)
        if cached is not MISSING:
            return cached, True
        value = factory()
        self.add(model_name, key_value, value)
        return value, False

    def discard(self, model_name: str, key_value: Any, value: Any = MISSING) -> bool:
        """Remove a cached pair, returning whether anything was removed.

        When ``value`` is given, the pair is only removed while it still holds
        that exact object.
        """
        if _is_hashable(key_value):
            cached = self._hashed.get((model_name, key_value), MISSING)
            if cached is MISSING or (value is not MISSING and cached is not value):
                return False
            del self._hashed[(model_name, key_value)]
            return True
        entries = self._unhashed.get(model_name, [])
        for index, (cached_key, cached) in enumerate(entries):
            if cached_key == key_value:
                if value is not MISSING and cached is not value:
                    return False
                del entries[index]
                return True
        return False

    def cancel_pending(self) -> int:
        """Cancel and evict every cached future that has not settled yet."""
        cancelled = 0
        for (model_name, key_value), value in list(self._items()):
            if isinstance(value, asyncio.Future) and not value.done():
                value.cancel()
                self.discard(model_name, key_value, value)
                cancelled += 1
        return cancelled

    def _items(self) -> Iterator[tuple[tuple[str, Any], Any]]:
        yield from self._hashed.items()
        for model_name, entries in self._unhashed.items():
            for key_value, value in entries:
                yield (model_name, key_value), value

    def clear(self) -> None:
        self._hashed.clear()
        self._unhashed.clear()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        return self.get(*item) is not MISSING

    def __len__(self) -> int:
        return len(self._hashed) + sum(len(entries) for entries in self._unhashed.values())


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True
