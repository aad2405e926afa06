"""Two-level lookup cache: private in-process layer over a shared layer.

L1 is a plain dict owned by this process with a short TTL. L2 is a
SharedCacheLayer reachable by every process. Both hold derived copies of
data whose source of truth lives elsewhere, so the only write discipline is
invalidate-then-read-through.

Every L1 entry is tagged with the shared version it was loaded under. A read
first fetches the current shared version and only trusts L1 or L2 data
tagged with it. invalidate() bumps that version, so after it returns no
process can serve the pre-invalidation value, including values produced by
loads that were still in flight when the invalidation happened.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from hybrid_semantic_cache.config import settings
from hybrid_semantic_cache.protocols import SharedCacheLayer

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class _LocalItem(Generic[V]):
    version: int
    value: V
    expires_at: float


@dataclass
class LookupCacheStats:
    """Counters for where get_or_load found its value."""

    local_hits: int = 0
    shared_hits: int = 0
    loads: int = 0
    invalidations: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "local_hits": self.local_hits,
            "shared_hits": self.shared_hits,
            "loads": self.loads,
            "invalidations": self.invalidations,
        }


class TwoLevelCache(Generic[V]):
    """Read-through cache with a private L1 and a shared, versioned L2.

    Example:
        ```python
        cache = TwoLevelCache(
            shared=RedisSharedLayer.create(),
            encode=encode_snapshot,
            decode=decode_snapshot,
        )
        entries = await cache.get_or_load("all-entries", repository.list_all)
        await cache.invalidate("all-entries")
        ```
    """

    def __init__(
        self,
        shared: SharedCacheLayer,
        encode: Callable[[V], bytes],
        decode: Callable[[bytes], V],
        local_ttl: int | None = None,
        shared_ttl: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the two-level cache.

        Args:
            shared: The shared (L2) layer.
            encode: Serializer for values written to L2.
            decode: Deserializer for values read from L2.
            local_ttl: L1 time-to-live in seconds. Defaults to settings.
            shared_ttl: L2 time-to-live in seconds. Defaults to settings.
            clock: Monotonic clock used for L1 expiry.
        """
        self._shared = shared
        self._encode = encode
        self._decode = decode
        self._local_ttl = settings.cache_local_ttl if local_ttl is None else local_ttl
        self._shared_ttl = settings.cache_shared_ttl if shared_ttl is None else shared_ttl
        self._clock = clock
        self._local: dict[str, _LocalItem[V]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._stats = LookupCacheStats()

    def _local_get(self, key: str, version: int) -> _LocalItem[V] | None:
        item = self._local.get(key)
        if item is None:
            return None
        if item.version != version or self._clock() >= item.expires_at:
            del self._local[key]
            return None
        return item

    def _local_set(self, key: str, version: int, value: V) -> None:
        self._local[key] = _LocalItem(
            version=version,
            value=value,
            expires_at=self._clock() + self._local_ttl,
        )

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[V]]) -> V:
        """Return the cached value for key, loading it on a miss in both layers.

        Concurrent calls for the same key within this process share a single
        loader run.

        Args:
            key: Cache key
            loader: Coroutine function reading the authoritative source

        Returns:
            The cached or freshly loaded value

        Raises:
            SharedCacheUnavailableError: If the shared layer cannot be reached
        """
        version = await self._shared.get_version(key)
        item = self._local_get(key, version)
        if item is not None:
            self._stats.local_hits += 1
            return item.value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another coroutine may have loaded or invalidated while we waited
            version = await self._shared.get_version(key)
            item = self._local_get(key, version)
            if item is not None:
                self._stats.local_hits += 1
                return item.value

            payload = await self._shared.get(key, version)
            if payload is not None:
                value = self._decode(payload)
                self._local_set(key, version, value)
                self._stats.shared_hits += 1
                logger.debug("Shared cache hit for %s (v%d)", key, version)
                return value

            value = await loader()
            self._stats.loads += 1
            await self._shared.set(key, version, self._encode(value), self._shared_ttl)
            self._local_set(key, version, value)
            logger.debug("Loaded %s from source (v%d)", key, version)
            return value

    async def invalidate(self, key: str) -> None:
        """Drop key from both layers.

        After this returns, the next get_or_load for key re-runs the loader.

        Raises:
            SharedCacheUnavailableError: If the shared layer cannot be reached
        """
        self._local.pop(key, None)
        await self._shared.invalidate(key)
        self._stats.invalidations += 1
        logger.debug("Invalidated %s", key)

    @property
    def stats(self) -> LookupCacheStats:
        """Get lookup counters."""
        return self._stats

    @property
    def local_ttl(self) -> int:
        return self._local_ttl

    @property
    def shared_ttl(self) -> int:
        return self._shared_ttl
