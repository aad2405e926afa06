"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class CacheEntryItem(BaseModel):
    """Single cache entry in the listing."""

    id: str = Field(..., description="Entry id")
    query: str = Field(..., description="The original query")
    response: str = Field(..., description="The cached response")
    hit_count: int = Field(..., description="Number of lookups served by this entry", ge=0)
    created_at: datetime = Field(..., description="When the entry was created (UTC)")
    last_accessed_at: datetime = Field(..., description="When the entry was last hit (UTC)")


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear operation."""

    message: str = Field(..., description="Human-readable status message")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)


class ChatResponse(BaseModel):
    """Response DTO for a chat request."""

    response: str = Field(..., description="The response text")
    from_cache: bool = Field(..., description="Whether the response was served from cache")
    similarity: float = Field(..., description="Similarity of the matched entry (0 on a miss)")
    lookup_time_ms: float = Field(..., description="Time taken for embedding + lookup in milliseconds")


class MetricsStatsResponse(BaseModel):
    """Response DTO for aggregated request metrics."""

    total_requests: int = Field(..., ge=0)
    cache_hits: int = Field(..., ge=0)
    cache_misses: int = Field(..., ge=0)
    cache_hit_rate: float = Field(..., ge=0.0, le=1.0)
    avg_lookup_time_ms: float = Field(..., ge=0.0)
    avg_llm_time_ms: float = Field(..., ge=0.0)
    total_entries: int = Field(..., description="Entries currently in the store", ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the cache store is reachable")
    shared_cache_healthy: bool = Field(..., description="Whether the shared snapshot layer is reachable")


class RawChatResponse(BaseModel):
    """Response DTO for an uncached chat request."""

    response: str = Field(..., description="The response text")
    response_time_ms: float = Field(..., description="Time taken by the model in milliseconds", ge=0.0)
