#!/usr/bin/env python3
"""
Demo script for the semantic cache.

Runs a handful of queries through the cache-fronted chat flow against a
local Ollama and shows which ones are answered from cache.

Requires `ollama serve` with the configured embedding and chat models.
Set SHARED_CACHE_BACKEND=memory to run without Redis.
"""

import asyncio
import time

from hybrid_semantic_cache.config import settings
from hybrid_semantic_cache.repositories import (
    MemorySharedLayer,
    OllamaProvider,
    RedisSharedLayer,
    SqlCacheRepository,
)
from hybrid_semantic_cache.services import ChatService, SemanticCacheService


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_chat_flow() -> None:
    """Ask related and unrelated questions and report cache behaviour."""
    print_section("Cache-fronted chat")

    repository = SqlCacheRepository.create()
    await repository.create_schema()
    if settings.shared_cache_backend == "memory":
        shared_layer = MemorySharedLayer()
    else:
        shared_layer = RedisSharedLayer.create()

    provider = OllamaProvider.create()
    if not await provider.is_available():
        print("Ollama is not available. Run: ollama serve")
        return

    cache = SemanticCacheService.create(repository=repository, shared_layer=shared_layer)
    chat = ChatService(
        cache_service=cache,
        embedding_provider=provider,
        completion_provider=provider,
    )

    queries = [
        "What is a semantic cache?",
        "Explain what semantic caching is",
        "How does cosine similarity work?",
        "How is cosine similarity calculated?",
        "What is the capital of France?",
    ]

    for query in queries:
        start = time.time()
        result = await chat.get_cached_response(query)
        elapsed_ms = (time.time() - start) * 1000
        source = f"CACHE ({result.similarity:.3f})" if result.from_cache else "MODEL"
        print(f"\n[{source}] {query}  ({elapsed_ms:.0f} ms)")
        print(f"  → {result.response[:100]}")

    print_section("Cache entries")
    entries = sorted(await cache.list_all(), key=lambda e: e.hit_count, reverse=True)
    for entry in entries:
        print(f"  {entry.hit_count:3d} hits  {entry.query}")

    print_section("Metrics")
    for name, value in chat.metrics.to_dict().items():
        print(f"  {name}: {value}")

    await provider.close()
    await shared_layer.close()
    await repository.close()


if __name__ == "__main__":
    asyncio.run(demo_chat_flow())
