"""In-process implementation of SharedCacheLayer.

Follows the same versioned invalidate-then-reload contract as the Redis
layer. Used by tests and by single-process deployments that have no Redis.
"""

import time


class MemorySharedLayer:
    """Dict-backed shared layer with per-entry expiry.

    This class satisfies the SharedCacheLayer protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self) -> None:
        self._versions: dict[str, int] = {}
        self._payloads: dict[tuple[str, int], tuple[bytes, float]] = {}

    async def get_version(self, key: str) -> int:
        return self._versions.get(key, 0)

    async def get(self, key: str, version: int) -> bytes | None:
        item = self._payloads.get((key, version))
        if item is None:
            return None
        value, expires_at = item
        if time.monotonic() >= expires_at:
            del self._payloads[(key, version)]
            return None
        return value

    async def set(self, key: str, version: int, value: bytes, ttl: int) -> None:
        self._payloads[(key, version)] = (value, time.monotonic() + ttl)

    async def invalidate(self, key: str) -> int:
        version = self._versions.get(key, 0) + 1
        self._versions[key] = version
        # Also drops payloads a racing load wrote under a dead version
        for stale in [k for k in self._payloads if k[0] == key and k[1] < version]:
            del self._payloads[stale]
        return version

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._payloads.clear()

    @property
    def payload_count(self) -> int:
        """Number of payloads currently held, expired ones included."""
        return len(self._payloads)
