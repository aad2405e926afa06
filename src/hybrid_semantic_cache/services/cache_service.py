"""Semantic cache service for core business logic.

This service orchestrates the cache protocol by coordinating the
authoritative store (CacheStore), the two-level snapshot cache and the
similarity engine. It owns no state of its own.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from hybrid_semantic_cache.config import settings
from hybrid_semantic_cache.entities import CacheEntryEntity, CacheHit, CacheMiss, LookupResult
from hybrid_semantic_cache.errors import DimensionMismatchError
from hybrid_semantic_cache.protocols import CacheStore, SharedCacheLayer
from hybrid_semantic_cache.repositories import decode_snapshot, encode_snapshot
from hybrid_semantic_cache.similarity import find_best_match

from .two_level_cache import TwoLevelCache

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "all-entries"


class SemanticCacheService:
    """Core semantic cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: SQLite, PostgreSQL, or a test fake
    - SharedCacheLayer: Redis, or the in-memory layer

    Protocol:
        lookup() on a miss returns CacheMiss; the caller produces a fresh
        response and hands it back through store().

    Example:
        ```python
        cache = SemanticCacheService.create(
            repository=SqlCacheRepository.create(),
            shared_layer=RedisSharedLayer.create(),
        )

        result = await cache.lookup(embedding)
        if isinstance(result, CacheHit):
            return result.response

        response = await llm.complete(query)
        await cache.store(query, response, embedding)
        ```
    """

    def __init__(
        self,
        repository: CacheStore,
        snapshot_cache: TwoLevelCache[list[CacheEntryEntity]],
        similarity_threshold: float | None = None,
        embedding_dimension: int | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            repository: Authoritative cache store (required).
            snapshot_cache: Two-level cache holding the "all entries" snapshot (required).
            similarity_threshold: Minimum cosine similarity for a hit (0-1). Defaults to settings.
            embedding_dimension: Expected embedding length; 0 disables the check. Defaults to settings.
        """
        self._repository = repository
        self._cache = snapshot_cache
        self._threshold = (
            settings.cache_similarity_threshold
            if similarity_threshold is None
            else similarity_threshold
        )
        self._dimension = (
            settings.embedding_dimension if embedding_dimension is None else embedding_dimension
        )

    @classmethod
    def create(
        cls,
        repository: CacheStore,
        shared_layer: SharedCacheLayer,
        similarity_threshold: float | None = None,
        embedding_dimension: int | None = None,
        local_ttl: int | None = None,
        shared_ttl: int | None = None,
    ) -> "SemanticCacheService":
        """Factory method wiring the snapshot cache with the JSON snapshot codec.

        Args:
            repository: Cache storage backend (required).
            shared_layer: Shared layer of the snapshot cache (required).
            similarity_threshold: Minimum similarity for a hit. If None, uses settings.
            embedding_dimension: Expected embedding length. If None, uses settings.
            local_ttl: In-process snapshot TTL in seconds. If None, uses settings.
            shared_ttl: Shared snapshot TTL in seconds. If None, uses settings.

        Returns:
            Configured SemanticCacheService
        """
        snapshot_cache: TwoLevelCache[list[CacheEntryEntity]] = TwoLevelCache(
            shared=shared_layer,
            encode=encode_snapshot,
            decode=decode_snapshot,
            local_ttl=local_ttl,
            shared_ttl=shared_ttl,
        )
        return cls(
            repository=repository,
            snapshot_cache=snapshot_cache,
            similarity_threshold=similarity_threshold,
            embedding_dimension=embedding_dimension,
        )

    async def _snapshot(self) -> list[CacheEntryEntity]:
        return await self._cache.get_or_load(SNAPSHOT_KEY, self._repository.list_all)

    async def _invalidate_snapshot(self) -> None:
        # The write before this is already committed; finish invalidating
        # even if the caller is cancelled meanwhile.
        await asyncio.shield(self._cache.invalidate(SNAPSHOT_KEY))

    async def lookup(
        self,
        query_embedding: Sequence[float],
        threshold: float | None = None,
    ) -> LookupResult:
        """Look up a cached response for a query embedding.

        Business logic:
        1. Load the "all entries" snapshot (L1 → L2 → store)
        2. Scan it for the best match at or above the threshold
        3. On a match, record the hit in the store and invalidate the snapshot

        Args:
            query_embedding: Embedding of the incoming query
            threshold: Override default similarity threshold

        Returns:
            CacheHit with response and similarity, or CacheMiss

        Raises:
            DimensionMismatchError: If the query and a cached embedding differ in length
        """
        threshold = self._threshold if threshold is None else threshold

        entries = await self._snapshot()
        if not entries:
            logger.debug("Cache miss: no entries")
            return CacheMiss()

        match = find_best_match(query_embedding, (e.embedding for e in entries), threshold)
        if match is None:
            logger.debug("Cache miss: nothing at or above %.3f", threshold)
            return CacheMiss()

        entry = entries[match.index]
        await self._repository.record_hit(entry.id, datetime.now(timezone.utc))
        await self._invalidate_snapshot()

        logger.debug("Cache hit: entry %s (similarity %.4f)", entry.id, match.similarity)
        return CacheHit(
            entry_id=entry.id,
            response=entry.response,
            similarity=match.similarity,
        )

    async def store(
        self,
        query: str,
        response: str,
        embedding: Sequence[float],
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Store a query-response pair in the cache.

        Args:
            query: The original query text
            response: The fresh LLM response to cache
            embedding: Embedding of the query
            metadata: Optional metadata (model, tokens, etc.)

        Returns:
            The id of the new entry

        Raises:
            DimensionMismatchError: If an embedding dimension is configured and differs
        """
        if self._dimension and len(embedding) != self._dimension:
            raise DimensionMismatchError(expected=self._dimension, actual=len(embedding))

        now = datetime.now(timezone.utc)
        entry = CacheEntryEntity(
            id=uuid.uuid4().hex,
            query=query,
            response=response,
            embedding=[float(x) for x in embedding],
            hit_count=0,
            created_at=now,
            last_accessed_at=now,
            metadata=metadata,
        )

        await self._repository.insert(entry)
        await self._invalidate_snapshot()

        logger.debug("Stored cache entry %s", entry.id)
        return entry.id

    async def list_all(self) -> list[CacheEntryEntity]:
        """Get every cache entry straight from the store."""
        return await self._repository.list_all()

    async def clear_all(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of entries deleted
        """
        count = await self._repository.clear_all()
        await self._invalidate_snapshot()
        return count

    async def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "total_entries": await self._repository.count_all(),
            "similarity_threshold": self._threshold,
            "embedding_dimension": self._dimension,
            "local_ttl": self._cache.local_ttl,
            "shared_ttl": self._cache.shared_ttl,
            "snapshot": self._cache.stats.to_dict(),
        }

    async def is_healthy(self) -> bool:
        """Check if the store is reachable."""
        return await self._repository.health_check()

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (0-1, higher = more strict)
        """
        if not 0 <= threshold <= 1:
            raise ValueError("Threshold must be between 0 and 1")
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._threshold

    @property
    def repository(self) -> CacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def snapshot_cache(self) -> TwoLevelCache[list[CacheEntryEntity]]:
        """Get the underlying snapshot cache (for testing)."""
        return self._cache
