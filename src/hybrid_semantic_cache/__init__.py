"""Hybrid Semantic Cache - similarity-matched LLM response cache.

Incoming queries are embedded, compared against cached query/response pairs
by cosine similarity and answered from cache when a close-enough match
exists. The set of cached entries is held in a two-level snapshot cache
(in-process + Redis) in front of a relational store.

Layers:
    - similarity: Cosine similarity and best-match selection
    - protocols: Interface contracts (CacheStore, SharedCacheLayer, providers)
    - repositories: Data access implementations
    - services: Business logic (TwoLevelCache, SemanticCacheService, ChatService)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from hybrid_semantic_cache.repositories import RedisSharedLayer, SqlCacheRepository
    from hybrid_semantic_cache.services import SemanticCacheService

    cache = SemanticCacheService.create(
        repository=SqlCacheRepository.create(),
        shared_layer=RedisSharedLayer.create(),
    )
    result = await cache.lookup(embedding, threshold=0.85)
    ```

For HTTP API:
    ```python
    from hybrid_semantic_cache.api.app import app
    ```
"""

from hybrid_semantic_cache.config import get_redis_client, settings
from hybrid_semantic_cache.entities import CacheEntryEntity, CacheHit, CacheMiss, LookupResult
from hybrid_semantic_cache.errors import (
    DimensionMismatchError,
    DuplicateEntryError,
    SemanticCacheError,
    SharedCacheUnavailableError,
    StoreUnavailableError,
)
from hybrid_semantic_cache.protocols import (
    CacheStore,
    CompletionProvider,
    EmbeddingProvider,
    SharedCacheLayer,
)
from hybrid_semantic_cache.repositories import (
    MemorySharedLayer,
    OllamaProvider,
    RedisSharedLayer,
    SqlCacheRepository,
)
from hybrid_semantic_cache.services import ChatService, SemanticCacheService, TwoLevelCache
from hybrid_semantic_cache.similarity import BestMatch, cosine_similarity, find_best_match

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Similarity engine
    "BestMatch",
    "cosine_similarity",
    "find_best_match",
    # Protocols (interfaces)
    "CacheStore",
    "CompletionProvider",
    "EmbeddingProvider",
    "SharedCacheLayer",
    # Services (business logic)
    "ChatService",
    "SemanticCacheService",
    "TwoLevelCache",
    # Repositories (data access)
    "MemorySharedLayer",
    "OllamaProvider",
    "RedisSharedLayer",
    "SqlCacheRepository",
    # Entities (domain models)
    "CacheEntryEntity",
    "CacheHit",
    "CacheMiss",
    "LookupResult",
    # Errors
    "SemanticCacheError",
    "DimensionMismatchError",
    "DuplicateEntryError",
    "StoreUnavailableError",
    "SharedCacheUnavailableError",
]
