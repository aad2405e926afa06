"""Redis implementation of SharedCacheLayer.

Layout per cache key (with the configured prefix):

    {prefix}:{key}:version      integer, INCR'd on every invalidation, no TTL
    {prefix}:{key}:v{version}   encoded snapshot for that version, with TTL

Readers only ever fetch the payload of the current version, so a snapshot
written by a load that started before an invalidation is unreachable.

The version counter must never be evicted: if it disappears the version
falls back to 0 and an in-process copy loaded at v0 passes the version check
again. Run Redis with `maxmemory-policy noeviction` or one of the
`volatile-*` policies. Those only evict keys with a TTL, so they can reach
the payloads but never the counter.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from hybrid_semantic_cache.config import get_redis_client, settings
from hybrid_semantic_cache.errors import SharedCacheUnavailableError

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


class RedisSharedLayer:
    """Redis-backed shared layer of the two-level lookup cache.

    This class satisfies the SharedCacheLayer protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis shared layer.

        Args:
            redis_client: Async Redis client instance. If None, creates default.
            key_prefix: Prefix for every key written. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisSharedLayer":
        """Factory method to create RedisSharedLayer with defaults."""
        return cls(key_prefix=key_prefix)

    def _version_key(self, key: str) -> str:
        return f"{self._prefix}:{key}:version"

    def _payload_key(self, key: str, version: int) -> str:
        return f"{self._prefix}:{key}:v{version}"

    async def get_version(self, key: str) -> int:
        """Return the current version of a key (0 if never invalidated)."""
        try:
            raw = await self._client.get(self._version_key(key))
        except _CONNECTION_ERRORS as e:
            raise SharedCacheUnavailableError(f"Redis unavailable: {e}") from e
        return int(raw) if raw is not None else 0

    async def get(self, key: str, version: int) -> bytes | None:
        """Return the payload stored for key at version, or None."""
        try:
            return await self._client.get(self._payload_key(key, version))
        except _CONNECTION_ERRORS as e:
            raise SharedCacheUnavailableError(f"Redis unavailable: {e}") from e

    async def set(self, key: str, version: int, value: bytes, ttl: int) -> None:
        """Store a payload for key at version with a TTL in seconds."""
        try:
            await self._client.set(self._payload_key(key, version), value, ex=ttl)
        except _CONNECTION_ERRORS as e:
            raise SharedCacheUnavailableError(f"Redis unavailable: {e}") from e

    async def invalidate(self, key: str) -> int:
        """Bump the key's version and delete the previous payload.

        Returns:
            The new version
        """
        try:
            version = int(await self._client.incr(self._version_key(key)))
            await self._client.delete(self._payload_key(key, version - 1))
        except _CONNECTION_ERRORS as e:
            raise SharedCacheUnavailableError(f"Redis unavailable: {e}") from e

        logger.debug("Invalidated shared key %s (now v%d)", key, version)
        return version

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except _CONNECTION_ERRORS:
            logger.warning("Redis health check failed", exc_info=True)
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
