"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request DTO for a cache-fronted chat completion."""

    query: str = Field(..., description="The user query", min_length=1)
    similarity_threshold: float | None = Field(
        None,
        description="Override the default similarity threshold (0-1, higher = more strict)",
        ge=0.0,
        le=1.0,
    )


class RawChatRequest(BaseModel):
    """Request DTO for an uncached chat completion."""

    query: str = Field(..., description="The user query", min_length=1)
