"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Components built during lifespan (or injected by create_app)
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from hybrid_semantic_cache.config import settings, setup_logging
from hybrid_semantic_cache.handlers import CacheHandler
from hybrid_semantic_cache.protocols import SharedCacheLayer
from hybrid_semantic_cache.repositories import (
    MemorySharedLayer,
    OllamaProvider,
    RedisSharedLayer,
    SqlCacheRepository,
)
from hybrid_semantic_cache.services import ChatService, SemanticCacheService

logger = logging.getLogger(__name__)


@dataclass
class AppComponents:
    """Everything the HTTP layer needs, wired together."""

    repository: SqlCacheRepository
    shared_layer: SharedCacheLayer
    cache_service: SemanticCacheService
    chat_service: ChatService
    cache_handler: CacheHandler
    provider: OllamaProvider | None = None


async def build_components() -> AppComponents:
    """Build the default component graph from settings."""
    repository = SqlCacheRepository.create()

    if settings.shared_cache_backend == "memory":
        shared_layer: SharedCacheLayer = MemorySharedLayer()
    else:
        shared_layer = RedisSharedLayer.create()

    provider = OllamaProvider.create()
    cache_service = SemanticCacheService.create(
        repository=repository,
        shared_layer=shared_layer,
    )
    chat_service = ChatService(
        cache_service=cache_service,
        embedding_provider=provider,
        completion_provider=provider,
    )
    cache_handler = CacheHandler(
        cache_service=cache_service,
        chat_service=chat_service,
        shared_layer=shared_layer,
    )
    return AppComponents(
        repository=repository,
        shared_layer=shared_layer,
        cache_service=cache_service,
        chat_service=chat_service,
        cache_handler=cache_handler,
        provider=provider,
    )


async def close_components(components: AppComponents) -> None:
    """Release connections held by the components."""
    if components.provider is not None:
        await components.provider.close()
    close = getattr(components.shared_layer, "close", None)
    if close is not None:
        await close()
    await components.repository.close()


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Uses components injected through create_app() when present, otherwise
    builds them from settings. Either way the app owns them from here on
    and closes them on shutdown.

    Args:
        app: The FastAPI application instance

    Yields:
        None
    """
    setup_logging()

    components: AppComponents | None = getattr(app.state, "components", None)
    if components is None:
        components = await build_components()
    await components.repository.create_schema()

    app.state.cache_handler = components.cache_handler
    app.state.cache_service = components.cache_service
    logger.info(
        "Semantic cache ready (threshold=%.2f, shared=%s)",
        components.cache_service.threshold,
        type(components.shared_layer).__name__,
    )

    yield

    del app.state.cache_handler
    del app.state.cache_service
    await close_components(components)
    logger.info("Semantic cache shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
