"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import ChatRequest, RawChatRequest
from .responses import (
    CacheEntryItem,
    ChatResponse,
    ClearCacheResponse,
    HealthCheckResponse,
    MetricsStatsResponse,
    RawChatResponse,
)

__all__ = [
    "ChatRequest",
    "CacheEntryItem",
    "ChatResponse",
    "ClearCacheResponse",
    "HealthCheckResponse",
    "MetricsStatsResponse",
    "RawChatRequest",
    "RawChatResponse",
]
