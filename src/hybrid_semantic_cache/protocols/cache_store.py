"""Cache storage protocol.

Defines the interface for the authoritative store of cache entries.
The semantic cache only needs four operations from it: insert, list all,
record a hit and clear all. Everything else is housekeeping.

Implementations can include:
- SQLAlchemy over SQLite or PostgreSQL (default)
- Any other relational store with atomic single-row updates
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from hybrid_semantic_cache.entities import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Every write must be committed before the coroutine returns: the
    snapshot cache is invalidated right after these calls and the next
    reload must observe the write.
    """

    async def insert(self, entry: CacheEntryEntity) -> None:
        """Insert a new cache entry.

        Args:
            entry: The entry to insert. Its id must be unique.

        Raises:
            DuplicateEntryError: If an entry with the same id exists
        """
        ...

    async def list_all(self) -> list[CacheEntryEntity]:
        """Return every cache entry.

        Returns:
            All entries. Order is not significant to matching.
        """
        ...

    async def record_hit(self, entry_id: str, accessed_at: datetime) -> bool:
        """Atomically increment hit_count and set last_accessed_at.

        Args:
            entry_id: The entry that was hit
            accessed_at: New last_accessed_at value

        Returns:
            True if the entry was updated, False if it no longer exists
        """
        ...

    async def clear_all(self) -> int:
        """Remove every cache entry.

        Returns:
            Number of entries deleted
        """
        ...

    async def count_all(self) -> int:
        """Count total entries in the store."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
