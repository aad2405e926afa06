"""Chat service: answer a query from the semantic cache or the model.

Embeds the query, asks the cache, and on a miss calls the completion
provider and stores the fresh response for next time.
"""

import logging
import time
from dataclasses import dataclass

from hybrid_semantic_cache.entities import CacheHit
from hybrid_semantic_cache.models import PerformanceMetrics
from hybrid_semantic_cache.protocols import CompletionProvider, EmbeddingProvider

from .cache_service import SemanticCacheService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatResult:
    """Answer to a chat query.

    Attributes:
        response: The response text
        from_cache: Whether the response came from the semantic cache
        similarity: Similarity of the matched entry (0.0 on a miss)
        lookup_time_ms: Time spent embedding and looking up the query
    """

    response: str
    from_cache: bool
    similarity: float
    lookup_time_ms: float


class ChatService:
    """Cache-fronted chat completion."""

    def __init__(
        self,
        cache_service: SemanticCacheService,
        embedding_provider: EmbeddingProvider,
        completion_provider: CompletionProvider,
        metrics: PerformanceMetrics | None = None,
    ) -> None:
        self._cache = cache_service
        self._embeddings = embedding_provider
        self._completions = completion_provider
        self._metrics = metrics or PerformanceMetrics()

    async def get_raw_response(self, query: str) -> str:
        """Chat completion without caching."""
        start_time = time.time()
        response = await self._completions.complete(query)
        self._metrics.record_llm_call((time.time() - start_time) * 1000)
        return response

    async def get_cached_response(
        self,
        query: str,
        threshold: float | None = None,
    ) -> ChatResult:
        """Answer a query, serving from the semantic cache when possible.

        Args:
            query: The user query
            threshold: Override default similarity threshold

        Returns:
            ChatResult with the response and where it came from
        """
        start_time = time.time()
        embedding = await self._embeddings.encode(query)
        result = await self._cache.lookup(embedding, threshold)
        lookup_time_ms = (time.time() - start_time) * 1000

        if isinstance(result, CacheHit):
            self._metrics.record_hit(lookup_time_ms)
            return ChatResult(
                response=result.response,
                from_cache=True,
                similarity=result.similarity,
                lookup_time_ms=lookup_time_ms,
            )

        self._metrics.record_miss(lookup_time_ms)
        response = await self.get_raw_response(query)
        await self._cache.store(
            query,
            response,
            embedding,
            metadata={
                "chat_model": self._completions.chat_model,
                "embedding_model": self._embeddings.model_name,
            },
        )
        logger.info("Cached fresh response for query (%d chars)", len(query))

        return ChatResult(
            response=response,
            from_cache=False,
            similarity=0.0,
            lookup_time_ms=lookup_time_ms,
        )

    @property
    def metrics(self) -> PerformanceMetrics:
        """Get the in-process performance metrics."""
        return self._metrics
