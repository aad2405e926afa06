"""
Tests for the semantic cache API.
"""

import pytest
from fastapi.testclient import TestClient

from hybrid_semantic_cache.api.app import create_app
from hybrid_semantic_cache.api.dependencies import AppComponents
from hybrid_semantic_cache.handlers import CacheHandler
from hybrid_semantic_cache.repositories import MemorySharedLayer, RedisSharedLayer, SqlCacheRepository
from hybrid_semantic_cache.services import ChatService, SemanticCacheService
from tests.conftest import DownRedis, FakeCompletionProvider, FakeEmbeddingProvider

VECTORS = {
    "What is a semantic cache?": [1.0, 0.0, 0.0],
    "Explain semantic caching": [0.95, 0.31, 0.0],
    "Tell me a joke": [0.0, 1.0, 0.0],
    "Wrong model": [1.0, 0.0],
}


def build_components(repository, shared_layer, completion_provider) -> AppComponents:
    cache_service = SemanticCacheService.create(
        repository=repository,
        shared_layer=shared_layer,
        similarity_threshold=0.85,
        embedding_dimension=0,
    )
    chat_service = ChatService(
        cache_service=cache_service,
        embedding_provider=FakeEmbeddingProvider(VECTORS),
        completion_provider=completion_provider,
    )
    return AppComponents(
        repository=repository,
        shared_layer=shared_layer,
        cache_service=cache_service,
        chat_service=chat_service,
        cache_handler=CacheHandler(
            cache_service=cache_service,
            chat_service=chat_service,
            shared_layer=shared_layer,
        ),
    )


@pytest.fixture
def completion_provider() -> FakeCompletionProvider:
    return FakeCompletionProvider()


@pytest.fixture
def client(database_url, completion_provider):
    """Create a test client over SQLite and the in-memory shared layer."""
    components = build_components(
        SqlCacheRepository.create(database_url),
        MemorySharedLayer(),
        completion_provider,
    )
    with TestClient(create_app(components)) as test_client:
        yield test_client


@pytest.fixture
def client_without_redis(database_url, completion_provider):
    """Create a test client whose shared layer points at an unreachable Redis."""
    components = build_components(
        SqlCacheRepository.create(database_url),
        RedisSharedLayer(redis_client=DownRedis(), key_prefix="test"),
        completion_provider,
    )
    with TestClient(create_app(components)) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Semantic Cache API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["store_healthy"] is True
    assert data["shared_cache_healthy"] is True


def test_chat_miss_then_hit(client):
    """A similar second query is served from cache."""
    first = client.post("/api/chat", json={"query": "What is a semantic cache?"})
    assert first.status_code == 200
    assert first.json()["from_cache"] is False

    second = client.post("/api/chat", json={"query": "Explain semantic caching"})
    assert second.status_code == 200
    data = second.json()
    assert data["from_cache"] is True
    assert data["response"] == "answer to: What is a semantic cache?"
    assert data["similarity"] > 0.85


def test_chat_validates_request(client):
    """Empty queries and out-of-range thresholds are rejected."""
    assert client.post("/api/chat", json={"query": ""}).status_code == 422
    response = client.post(
        "/api/chat",
        json={"query": "Tell me a joke", "similarity_threshold": 1.5},
    )
    assert response.status_code == 422


def test_chat_dimension_mismatch(client):
    """A query embedded by the wrong model surfaces as an error."""
    client.post("/api/chat", json={"query": "What is a semantic cache?"})

    response = client.post("/api/chat", json={"query": "Wrong model"})

    assert response.status_code == 422
    assert "dimension" in response.json()["detail"].lower()


def test_list_cache_sorted_by_hits(client):
    """Entries are listed most hit first."""
    client.post("/api/chat", json={"query": "Tell me a joke"})
    client.post("/api/chat", json={"query": "What is a semantic cache?"})
    client.post("/api/chat", json={"query": "Explain semantic caching"})

    response = client.get("/api/cache")

    assert response.status_code == 200
    entries = response.json()
    assert [e["query"] for e in entries] == ["What is a semantic cache?", "Tell me a joke"]
    assert [e["hit_count"] for e in entries] == [1, 0]


def test_clear_cache(client):
    """Clearing removes every entry and the next chat misses."""
    client.post("/api/chat", json={"query": "What is a semantic cache?"})

    response = client.delete("/api/cache")
    assert response.status_code == 200
    assert response.json() == {"message": "Cache cleared successfully", "deleted_count": 1}

    assert client.get("/api/cache").json() == []
    again = client.post("/api/chat", json={"query": "What is a semantic cache?"})
    assert again.json()["from_cache"] is False


def test_metrics_stats(client):
    """Metrics reflect the chat traffic so far."""
    client.post("/api/chat", json={"query": "What is a semantic cache?"})
    client.post("/api/chat", json={"query": "Explain semantic caching"})

    response = client.get("/api/metrics/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_requests"] == 2
    assert data["cache_hits"] == 1
    assert data["cache_misses"] == 1
    assert data["cache_hit_rate"] == pytest.approx(0.5)
    assert data["total_entries"] == 1


def test_raw_chat_bypasses_cache(client, completion_provider):
    """The raw route answers from the model and writes nothing to the cache."""
    response = client.post("/api/chat/raw", json={"query": "Tell me a joke"})

    assert response.status_code == 200
    data = response.json()
    assert data["response"] == "answer to: Tell me a joke"
    assert data["response_time_ms"] >= 0
    assert completion_provider.calls == ["Tell me a joke"]
    assert client.get("/api/cache").json() == []


def test_raw_chat_validates_request(client):
    assert client.post("/api/chat/raw", json={"query": ""}).status_code == 422


def test_chat_shared_cache_down(client_without_redis, completion_provider):
    """An unreachable shared cache is a 503, not a silent miss."""
    response = client_without_redis.post("/api/chat", json={"query": "Tell me a joke"})

    assert response.status_code == 503
    assert "redis unavailable" in response.json()["detail"].lower()
    assert completion_provider.calls == []


def test_health_shared_cache_down(client_without_redis):
    response = client_without_redis.get("/health")

    assert response.status_code == 503
    assert response.json()["detail"]["shared_cache_healthy"] is False
