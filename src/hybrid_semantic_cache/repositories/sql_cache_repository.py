"""SQLAlchemy implementation of CacheStore.

Works against any database SQLAlchemy's asyncio extension supports. SQLite
via aiosqlite is the default; PostgreSQL via asyncpg in production.
Hit counting is a single UPDATE statement so concurrent hits on the same
entry never lose an increment.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from hybrid_semantic_cache.config import get_engine
from hybrid_semantic_cache.entities import CacheEntryEntity
from hybrid_semantic_cache.errors import DuplicateEntryError, StoreUnavailableError

from .tables import Base, CacheEntryRow

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (OperationalError, InterfaceError, ConnectionError, OSError)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_entity(row: CacheEntryRow) -> CacheEntryEntity:
    return CacheEntryEntity(
        id=row.id,
        query=row.query,
        response=row.response,
        embedding=[float(x) for x in row.embedding],
        hit_count=row.hit_count,
        created_at=_as_utc(row.created_at),
        last_accessed_at=_as_utc(row.last_accessed_at),
        metadata=row.extra_metadata,
    )


class SqlCacheRepository:
    """Relational implementation of the CacheStore protocol.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Each operation runs in its own session and commits before returning.
    """

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        """Initialize the SQL cache repository.

        Args:
            engine: Async SQLAlchemy engine. If None, creates one from settings.
        """
        self._engine = engine or get_engine()
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)

    @classmethod
    def create(cls, database_url: str | None = None) -> "SqlCacheRepository":
        """Factory method to create SqlCacheRepository with defaults.

        Args:
            database_url: SQLAlchemy URL. If None, uses settings.

        Returns:
            Configured SqlCacheRepository
        """
        return cls(engine=get_engine(database_url))

    async def create_schema(self) -> None:
        """Create the cache_entries table if it does not exist."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e
        logger.info("Cache store schema ready")

    async def insert(self, entry: CacheEntryEntity) -> None:
        """Insert a new cache entry.

        Args:
            entry: The entry to insert

        Raises:
            DuplicateEntryError: If the id already exists
            StoreUnavailableError: If the database cannot be reached
        """
        row = CacheEntryRow(
            id=entry.id,
            query=entry.query,
            response=entry.response,
            embedding=list(entry.embedding),
            extra_metadata=entry.metadata,
            hit_count=entry.hit_count,
            created_at=entry.created_at,
            last_accessed_at=entry.last_accessed_at,
        )
        try:
            async with self._sessionmaker() as session, session.begin():
                session.add(row)
        except IntegrityError as e:
            raise DuplicateEntryError(entry.id) from e
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e

    async def list_all(self) -> list[CacheEntryEntity]:
        """Return every cache entry, oldest first."""
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(
                    select(CacheEntryRow).order_by(CacheEntryRow.created_at, CacheEntryRow.id)
                )
                rows = result.scalars().all()
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e

        return [_to_entity(row) for row in rows]

    async def record_hit(self, entry_id: str, accessed_at: datetime) -> bool:
        """Increment hit_count and set last_accessed_at in one statement.

        Args:
            entry_id: The entry that was hit
            accessed_at: New last_accessed_at value

        Returns:
            True if a row was updated, False if the entry no longer exists
        """
        statement = (
            update(CacheEntryRow)
            .where(CacheEntryRow.id == entry_id)
            .values(
                hit_count=CacheEntryRow.hit_count + 1,
                last_accessed_at=accessed_at,
            )
        )
        try:
            async with self._sessionmaker() as session, session.begin():
                result = await session.execute(statement)
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e

        if result.rowcount == 0:
            logger.debug("Hit recorded for missing cache entry %s (already cleared)", entry_id)
            return False
        return True

    async def clear_all(self) -> int:
        """Remove every cache entry.

        Returns:
            Number of entries deleted
        """
        try:
            async with self._sessionmaker() as session, session.begin():
                result = await session.execute(delete(CacheEntryRow))
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e

        count = max(result.rowcount, 0)
        logger.info("Cleared %d cache entries", count)
        return count

    async def count_all(self) -> int:
        """Count total entries in the store."""
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(select(func.count()).select_from(CacheEntryRow))
                return int(result.scalar_one())
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f"Cache store unavailable: {e}") from e

    async def health_check(self) -> bool:
        """Check if the database is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except _CONNECTION_ERRORS:
            logger.warning("Cache store health check failed", exc_info=True)
            return False

    async def get_stats(self) -> dict:
        """Get repository statistics."""
        return {
            "backend": self._engine.dialect.name,
            "total_entries": await self.count_all(),
        }

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self._engine.dispose()

    @property
    def engine(self) -> AsyncEngine:
        """Get the SQLAlchemy engine."""
        return self._engine
