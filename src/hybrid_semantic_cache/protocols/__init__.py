"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (SQLite → PostgreSQL, Redis → in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from hybrid_semantic_cache.protocols import CacheStore, SharedCacheLayer

    store: CacheStore = SqlCacheRepository(engine)
    shared: SharedCacheLayer = RedisSharedLayer(client)
    shared: SharedCacheLayer = MemorySharedLayer()  # tests, single process
    ```
"""

from .cache_store import CacheStore
from .completion_provider import CompletionProvider
from .embedding_provider import EmbeddingProvider
from .shared_layer import SharedCacheLayer

__all__ = [
    "CacheStore",
    "CompletionProvider",
    "EmbeddingProvider",
    "SharedCacheLayer",
]
