import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Relational store
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./semantic_cache.db")
    database_echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    # Redis (shared snapshot layer)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    shared_cache_backend: str = os.getenv("SHARED_CACHE_BACKEND", "redis")

    # Cache
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.85"))
    cache_local_ttl: int = int(os.getenv("CACHE_LOCAL_TTL", "300"))  # 5 minutes
    cache_shared_ttl: int = int(os.getenv("CACHE_SHARED_TTL", "1800"))  # 30 minutes
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "semantic_cache")

    # Embedding / completion
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "nomic-embed-text")
    # 0 disables the dimension check on store
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "0"))
    chat_model: str = os.getenv("CHAT_MODEL", "llama3.2")
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.cache_similarity_threshold <= 1:
            raise ValueError("CACHE_SIMILARITY_THRESHOLD must be between 0 and 1 for cosine similarity")

        if self.cache_local_ttl <= 0 or self.cache_shared_ttl <= 0:
            raise ValueError("CACHE_LOCAL_TTL and CACHE_SHARED_TTL must be positive")

        if self.cache_local_ttl > self.cache_shared_ttl:
            raise ValueError(
                f"CACHE_LOCAL_TTL ({self.cache_local_ttl}) must not exceed "
                f"CACHE_SHARED_TTL ({self.cache_shared_ttl})"
            )

        if self.shared_cache_backend not in ("redis", "memory"):
            raise ValueError(
                f"SHARED_CACHE_BACKEND must be one of ['redis', 'memory'], "
                f"got {self.shared_cache_backend}"
            )

        if self.embedding_dimension < 0:
            raise ValueError("EMBEDDING_DIMENSION must be >= 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an async Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the cache store.

    In-memory SQLite gets a StaticPool so every session sees the same database.
    """
    url = database_url or settings.database_url
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(
            url,
            echo=settings.database_echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.database_echo)
    return create_async_engine(
        url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


def setup_logging(level: str | None = None) -> None:
    """Configure root logging with a single stdout handler."""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = [handler]
