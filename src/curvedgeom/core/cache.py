"""Memo cell for flattened results.

A cell holds at most one (key, value) pair. The pair is published with a
single attribute assignment after the value is computed, so a concurrent
reader sees either the old entry, no entry, or the complete new entry.
Racing writers may compute the same value twice; the last one wins.
"""

import logging
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FlattenCache(Generic[T]):
    """Single-entry cache keyed by the parameters a result was computed with.

    Example:
        cache = FlattenCache()
        line = cache.get_or_compute((0.5, 3), lambda: expensive(0.5))
    """

    __slots__ = ("_entry",)

    def __init__(self) -> None:
        self._entry: tuple[Hashable, T] | None = None

    def get(self, key: Hashable) -> T | None:
        """Return the cached value if it was computed for ``key``."""
        entry = self._entry
        if entry is not None and entry[0] == key:
            return entry[1]
        return None

    def put(self, key: Hashable, value: T) -> T:
        """Publish a value for ``key``, replacing any previous entry."""
        self._entry = (key, value)
        return value

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        entry = self._entry
        if entry is not None and entry[0] == key:
            return entry[1]
        logger.debug("Flatten cache miss for key %r", key)
        return self.put(key, compute())

    def invalidate(self) -> None:
        """Drop the cached entry."""
        self._entry = None

    @property
    def is_empty(self) -> bool:
        return self._entry is None
