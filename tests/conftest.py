"""Shared fixtures for the semantic cache tests."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hybrid_semantic_cache.repositories import MemorySharedLayer, SqlCacheRepository
from hybrid_semantic_cache.services import SemanticCacheService


class FakeEmbeddingProvider:
    """Embedding provider returning preset vectors per text."""

    def __init__(self, vectors: dict[str, list[float]], dimension: int = 3) -> None:
        self._vectors = vectors
        self._dimension = dimension
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return "fake-embed"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        return self._vectors[text]

    async def is_available(self) -> bool:
        return True


class FakeCompletionProvider:
    """Completion provider that answers with a canned prefix."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    @property
    def chat_model(self) -> str:
        return "fake-chat"

    async def complete(self, query: str) -> str:
        self.calls.append(query)
        return f"answer to: {query}"


class FakeRedis:
    """Just enough of redis.asyncio.Redis for RedisSharedLayer."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def incr(self, key: str) -> int:
        value = int(self.data.get(key, b"0")) + 1
        self.data[key] = str(value).encode()
        return value

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass


class DownRedis(FakeRedis):
    """Redis client whose server is unreachable."""

    async def get(self, key: str) -> bytes | None:
        raise RedisConnectionError("Connection refused")

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        raise RedisConnectionError("Connection refused")

    async def incr(self, key: str) -> int:
        raise RedisConnectionError("Connection refused")

    async def ping(self) -> bool:
        raise RedisConnectionError("Connection refused")


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a fresh SQLite file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}"


@pytest.fixture
async def repository(database_url):
    """SQL cache repository with its schema created."""
    repo = SqlCacheRepository.create(database_url)
    await repo.create_schema()
    yield repo
    await repo.close()


@pytest.fixture
def shared_layer() -> MemorySharedLayer:
    return MemorySharedLayer()


@pytest.fixture
def cache_service(repository, shared_layer) -> SemanticCacheService:
    return SemanticCacheService.create(
        repository=repository,
        shared_layer=shared_layer,
        similarity_threshold=0.85,
        embedding_dimension=0,
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
