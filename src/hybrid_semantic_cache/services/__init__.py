"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from hybrid_semantic_cache.services import SemanticCacheService

    cache = SemanticCacheService.create(
        repository=SqlCacheRepository.create(),
        shared_layer=RedisSharedLayer.create(),
    )
    ```
"""

from .cache_service import SNAPSHOT_KEY, SemanticCacheService
from .chat_service import ChatResult, ChatService
from .two_level_cache import LookupCacheStats, TwoLevelCache

__all__ = [
    "SNAPSHOT_KEY",
    "ChatResult",
    "ChatService",
    "LookupCacheStats",
    "SemanticCacheService",
    "TwoLevelCache",
]
