"""Repository layer for data access.

This layer abstracts external dependencies (relational store, Redis,
model APIs) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (SQLite → PostgreSQL, Redis → in-memory)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from hybrid_semantic_cache.protocols import (
    CacheStore,
    CompletionProvider,
    EmbeddingProvider,
    SharedCacheLayer,
)

from .memory_shared_layer import MemorySharedLayer
from .ollama_provider import OllamaProvider
from .redis_shared_layer import RedisSharedLayer
from .snapshot_codec import decode_snapshot, encode_snapshot
from .sql_cache_repository import SqlCacheRepository

__all__ = [
    "CacheStore",
    "CompletionProvider",
    "EmbeddingProvider",
    "SharedCacheLayer",
    "MemorySharedLayer",
    "OllamaProvider",
    "RedisSharedLayer",
    "SqlCacheRepository",
    "decode_snapshot",
    "encode_snapshot",
]
