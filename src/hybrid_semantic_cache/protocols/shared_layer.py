"""Shared snapshot layer protocol.

The second level of the two-level lookup cache: a network-accessible store
shared by every process serving the same cache. Payloads are opaque bytes
stored under a per-key version so that a load racing an invalidation can
never be served after the invalidation.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SharedCacheLayer(Protocol):
    """Protocol for the shared (L2) layer of the lookup cache."""

    async def get_version(self, key: str) -> int:
        """Return the current version of a key (0 if never invalidated)."""
        ...

    async def get(self, key: str, version: int) -> bytes | None:
        """Return the payload stored for key at version, or None."""
        ...

    async def set(self, key: str, version: int, value: bytes, ttl: int) -> None:
        """Store a payload for key at version with a TTL in seconds."""
        ...

    async def invalidate(self, key: str) -> int:
        """Atomically bump the key's version and drop the old payload.

        Returns:
            The new version
        """
        ...

    async def health_check(self) -> bool:
        """Check if the shared layer is reachable."""
        ...
