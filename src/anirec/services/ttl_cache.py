"""In-memory TTL cache with LRU eviction.

Each upstream client owns one instance. Entries expire lazily: an entry
older than the TTL is deleted when a lookup finds it, and nothing sweeps the
cache in the background. Recency is the iteration order of the underlying
``OrderedDict``; a hit moves the entry to the most-recent end without
refreshing its insertion time.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from anirec.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """Cached value and the clock reading taken when it was stored."""

    value: V
    inserted_at: float


class TTLCache(Generic[V]):
    """Bounded mapping from string keys to values with a time-to-live.

    Args:
        max_size: Maximum number of entries; the least recently used entry
            is evicted to make room for a new key
        ttl: Entry lifetime in seconds, measured from insertion
        clock: Monotonic time source, injectable for tests
        name: Label used in log messages

    Raises:
        ApplicationError: If max_size or ttl is not positive
    """

    def __init__(
        self,
        max_size: int,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        if max_size <= 0 or ttl <= 0:
            raise ApplicationError(
                ErrorCode.VALIDATION_ERROR,
                f"Cache limits must be positive, got max_size={max_size}, ttl={ttl}",
                ErrorContext(
                    operation="ttl_cache_init",
                    additional_data={"name": name, "max_size": max_size, "ttl": ttl},
                ),
            )

        self.max_size = max_size
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[V]] = OrderedDict()

    def get(self, key: str) -> V | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.inserted_at >= self.ttl:
            del self._entries[key]
            logger.debug("Cache %s: expired entry %s", self.name, key)
            return None

        self._entries.move_to_end(key)
        return entry.value

    def put(self, key: str, value: V) -> None:
        """Store a value, evicting the least recently used entry when full."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache %s: evicted %s", self.name, evicted)

        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership test only: no expiry check and no recency update
        return key in self._entries
