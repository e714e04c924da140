"""TTL cache з FIFO eviction та hit/miss statistics.

Cache advisory: caller має працювати коректно навіть якщо кожен get()
повертає "not found". Lookups ніколи не raise - absence це `default`.

Entries expire lazily on get() and in bulk via the periodic sweep
(start()/stop()). Single event loop only, no internal locking.
"""

import logging
import time
from typing import Any, Awaitable, Callable

from inventory_resilience.domain.resilience import CacheStats
from inventory_resilience.infrastructure.background import PeriodicTask

from .keys import CATEGORIES_KEY, ITEMS_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 300_000  # 5 minutes
DEFAULT_MAX_ENTRIES = 1000
DEFAULT_SWEEP_INTERVAL = 60.0


class TTLCache:
    """Bounded key-value store with per-entry expiration.

    Args:
        max_entries: Hard cap. При переповненні видаляється oldest inserted key.
        default_ttl_ms: TTL для set() без явного ttl_ms.
        sweep_interval_seconds: Період background sweep.
        clock: Monotonic clock in seconds (inject a fake one in tests).

    Example:
        >>> cache = TTLCache(max_entries=2)
        >>> cache.set("a", 1)
        >>> cache.set("b", 2)
        >>> cache.set("c", 3)  # evicts "a"
        >>> cache.get("a")  # None
        >>> cache.get_stats().hit_rate  # 0.0
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self.max_entries = max_entries
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock

        # key → (value, expires_at); dict зберігає insertion order для FIFO
        self._entries: dict[str, tuple[Any, float]] = {}
        self._hit_count = 0
        self._miss_count = 0

        self._sweeper = PeriodicTask(
            "ttl_cache.sweep", self.purge_expired, sweep_interval_seconds
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Membership without touching hit/miss counters."""
        entry = self._entries.get(key)
        return entry is not None and self._clock() <= entry[1]

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store value until now + ttl_ms.

        Overwrite existing key не змінює його позицію в FIFO order.
        """
        if ttl_ms is None:
            ttl_ms = self.default_ttl_ms

        if key not in self._entries and len(self._entries) >= self.max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug(
                "ttl_cache.evicted",
                extra={"key": oldest_key, "max_entries": self.max_entries},
            )

        self._entries[key] = (value, self._clock() + ttl_ms / 1000)

    def get(self, key: str, default: Any = None) -> Any:
        """Return cached value or `default` if absent/expired."""
        entry = self._entries.get(key)

        if entry is None:
            self._miss_count += 1
            return default

        value, expires_at = entry
        if self._clock() > expires_at:
            del self._entries[key]
            self._miss_count += 1
            return default

        self._hit_count += 1
        return value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries. Counters are untouched."""
        self._entries.clear()

    def reset_stats(self) -> None:
        self._hit_count = 0
        self._miss_count = 0

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl_ms: int | None = None,
    ) -> Any:
        """Read-through helper: cached value, або результат loader() (cached).

        Loader exceptions propagate; nothing is stored in that case.
        """
        sentinel = object()
        value = self.get(key, sentinel)
        if value is not sentinel:
            return value

        value = await loader()
        self.set(key, value, ttl_ms)
        return value

    # ------------------------------------------------------------------
    # Expiration / invalidation
    # ------------------------------------------------------------------

    def purge_expired(self) -> int:
        """Remove every entry whose expiration has passed.

        Returns:
            Number of removed entries.
        """
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at < now]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(
                "ttl_cache.swept",
                extra={"removed": len(expired), "size": len(self._entries)},
            )
        return len(expired)

    def invalidate_prefix(self, prefix: str) -> int:
        """Delete all keys sharing a namespace prefix.

        Returns:
            Number of removed entries.
        """
        matching = [key for key in self._entries if key.startswith(prefix)]
        for key in matching:
            del self._entries[key]

        logger.debug(
            "ttl_cache.invalidated",
            extra={"prefix": prefix, "removed": len(matching)},
        )
        return len(matching)

    def invalidate_items(self) -> int:
        """Drop all cached items listings (call after any item write)."""
        return self.invalidate_prefix(ITEMS_PREFIX)

    def invalidate_categories(self) -> None:
        self.delete(CATEGORIES_KEY)

    # ------------------------------------------------------------------
    # Stats / lifecycle
    # ------------------------------------------------------------------

    def get_stats(self) -> CacheStats:
        return CacheStats(
            hit_count=self._hit_count,
            miss_count=self._miss_count,
            size=len(self._entries),
            max_entries=self.max_entries,
        )

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper.is_running

    def start(self) -> None:
        """Start the periodic expired-entry sweep (needs a running loop)."""
        self._sweeper.start()

    async def stop(self) -> None:
        await self._sweeper.stop()

    async def close(self) -> None:
        """Stop the sweep and drop all entries."""
        await self.stop()
        self.clear()
