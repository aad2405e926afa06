"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging
import time

from fastapi import HTTPException, status

from hybrid_semantic_cache.dto import (
    CacheEntryItem,
    ChatRequest,
    ChatResponse,
    ClearCacheResponse,
    HealthCheckResponse,
    MetricsStatsResponse,
    RawChatRequest,
    RawChatResponse,
)
from hybrid_semantic_cache.errors import (
    DimensionMismatchError,
    SharedCacheUnavailableError,
    StoreUnavailableError,
)
from hybrid_semantic_cache.protocols import SharedCacheLayer
from hybrid_semantic_cache.services import ChatService, SemanticCacheService

logger = logging.getLogger(__name__)


def _to_http_error(action: str, e: Exception) -> HTTPException:
    if isinstance(e, DimensionMismatchError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Failed to {action}: {e}",
        )
    if isinstance(e, (StoreUnavailableError, SharedCacheUnavailableError)):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to {action}: {e}",
        )
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {e}",
    )


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to the services
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Presentation ordering (entries by hit count)
    - Mapping errors to status codes
    """

    def __init__(
        self,
        cache_service: SemanticCacheService,
        chat_service: ChatService,
        shared_layer: SharedCacheLayer,
    ) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The semantic cache service (required).
            chat_service: The cache-fronted chat service (required).
            shared_layer: Shared snapshot layer, for health checks (required).
        """
        self._cache = cache_service
        self._chat = chat_service
        self._shared = shared_layer

    async def list_entries(self) -> list[CacheEntryItem]:
        """Handle GET /api/cache requests.

        Returns:
            Every cache entry, most hit first
        """
        try:
            entries = await self._cache.list_all()
        except Exception as e:
            raise _to_http_error("list cache entries", e) from e

        entries.sort(key=lambda e: e.hit_count, reverse=True)
        return [
            CacheEntryItem(
                id=e.id,
                query=e.query,
                response=e.response,
                hit_count=e.hit_count,
                created_at=e.created_at,
                last_accessed_at=e.last_accessed_at,
            )
            for e in entries
        ]

    async def clear_cache(self) -> ClearCacheResponse:
        """Handle DELETE /api/cache requests."""
        try:
            count = await self._cache.clear_all()
        except Exception as e:
            raise _to_http_error("clear cache", e) from e

        return ClearCacheResponse(
            message="Cache cleared successfully",
            deleted_count=count,
        )

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Handle POST /api/chat requests.

        Args:
            request: The chat request DTO

        Returns:
            ChatResponse with the answer and cache details
        """
        try:
            result = await self._chat.get_cached_response(
                query=request.query,
                threshold=request.similarity_threshold,
            )
        except Exception as e:
            raise _to_http_error("answer query", e) from e

        return ChatResponse(
            response=result.response,
            from_cache=result.from_cache,
            similarity=result.similarity,
            lookup_time_ms=result.lookup_time_ms,
        )

    async def raw_chat(self, request: RawChatRequest) -> RawChatResponse:
        """Handle POST /api/chat/raw requests.

        Goes straight to the model. Nothing is looked up or stored.
        """
        start_time = time.time()
        try:
            response = await self._chat.get_raw_response(request.query)
        except Exception as e:
            raise _to_http_error("answer query", e) from e

        return RawChatResponse(
            response=response,
            response_time_ms=(time.time() - start_time) * 1000,
        )

    async def metrics_stats(self) -> MetricsStatsResponse:
        """Handle GET /api/metrics/stats requests."""
        try:
            total_entries = (await self._cache.get_stats())["total_entries"]
        except Exception as e:
            raise _to_http_error("get metrics", e) from e

        metrics = self._chat.metrics
        return MetricsStatsResponse(
            total_requests=metrics.total_queries,
            cache_hits=metrics.cache_hits,
            cache_misses=metrics.cache_misses,
            cache_hit_rate=metrics.hit_rate,
            avg_lookup_time_ms=metrics.avg_lookup_time_ms,
            avg_llm_time_ms=metrics.avg_llm_time_ms,
            total_entries=total_entries,
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy = await self._cache.is_healthy()
        shared_healthy = await self._shared.health_check()

        return HealthCheckResponse(
            status="healthy" if store_healthy and shared_healthy else "unhealthy",
            store_healthy=store_healthy,
            shared_cache_healthy=shared_healthy,
        )
