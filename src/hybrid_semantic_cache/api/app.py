from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from hybrid_semantic_cache.api.dependencies import AppComponents, HandlerDep, lifespan
from hybrid_semantic_cache.config import settings
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


def create_app(components: AppComponents | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        components: Prebuilt components (tests, embedding in another app).
            If None, they are built from settings at startup.

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="Semantic Cache API",
        description="Semantic response cache in front of an LLM chat backend",
        version="0.1.0",
        lifespan=lifespan,
    )
    if components is not None:
        app.state.components = components

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Semantic Cache API",
            "version": "0.1.0",
            "endpoints": {
                "cache": "/api/cache",
                "chat": "/api/chat",
                "raw_chat": "/api/chat/raw",
                "metrics": "/api/metrics/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        result = await handler.health_check()
        if result.status != "healthy":
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=result.model_dump(),
            )
        return result

    @app.get("/api/cache", response_model=list[CacheEntryItem])
    async def list_cache_entries(handler: HandlerDep) -> list[CacheEntryItem]:
        """Get all cache entries with statistics, most hit first."""
        return await handler.list_entries()

    @app.delete("/api/cache", response_model=ClearCacheResponse)
    async def clear_cache(handler: HandlerDep) -> ClearCacheResponse:
        """Clear all cache entries."""
        return await handler.clear_cache()

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest, handler: HandlerDep) -> ChatResponse:
        """Answer a query, from the semantic cache when a similar one was seen."""
        return await handler.chat(request)

    @app.post("/api/chat/raw", response_model=RawChatResponse)
    async def raw_chat(request: RawChatRequest, handler: HandlerDep) -> RawChatResponse:
        """Answer a query from the model, bypassing the cache."""
        return await handler.raw_chat(request)

    @app.get("/api/metrics/stats", response_model=MetricsStatsResponse)
    async def metrics_stats(handler: HandlerDep) -> MetricsStatsResponse:
        """Get cache hit/miss and latency statistics."""
        return await handler.metrics_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hybrid_semantic_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
