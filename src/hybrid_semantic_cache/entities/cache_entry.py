"""Cache entry domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached query-response pair.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        id: Unique entry id
        query: The original query text (informational, never re-read for matching)
        response: The cached LLM response
        embedding: The embedding vector for the query
        hit_count: Number of lookups served by this entry
        created_at: When this entry was created (UTC)
        last_accessed_at: When this entry was last created or hit (UTC)
        metadata: Optional additional data (e.g., model used)
    """

    id: str
    query: str
    response: str
    embedding: list[float]
    created_at: datetime
    last_accessed_at: datetime
    hit_count: int = 0
    metadata: dict[str, Any] | None = field(default=None)
