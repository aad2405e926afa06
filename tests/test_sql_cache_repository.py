"""
Tests for the SQL cache store.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from hybrid_semantic_cache.entities import CacheEntryEntity
from hybrid_semantic_cache.errors import DuplicateEntryError, StoreUnavailableError
from hybrid_semantic_cache.repositories import SqlCacheRepository


def make_entry(entry_id: str, created_at: datetime | None = None, **kwargs) -> CacheEntryEntity:
    now = created_at or datetime.now(timezone.utc)
    return CacheEntryEntity(
        id=entry_id,
        query=kwargs.get("query", f"query {entry_id}"),
        response=kwargs.get("response", f"response {entry_id}"),
        embedding=kwargs.get("embedding", [0.1, 0.2, 0.3]),
        created_at=now,
        last_accessed_at=now,
        metadata=kwargs.get("metadata"),
    )


@pytest.mark.asyncio
async def test_insert_and_list(repository):
    """Inserted entries come back with all their fields."""
    entry = make_entry("a", metadata={"chat_model": "llama3.2"})
    await repository.insert(entry)

    entries = await repository.list_all()

    assert len(entries) == 1
    stored = entries[0]
    assert stored.id == "a"
    assert stored.query == entry.query
    assert stored.response == entry.response
    assert stored.embedding == pytest.approx([0.1, 0.2, 0.3])
    assert stored.hit_count == 0
    assert stored.metadata == {"chat_model": "llama3.2"}
    assert stored.created_at.tzinfo is not None
    assert abs(stored.created_at - entry.created_at) < timedelta(seconds=1)


@pytest.mark.asyncio
async def test_list_all_empty(repository):
    assert await repository.list_all() == []


@pytest.mark.asyncio
async def test_list_all_oldest_first(repository):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await repository.insert(make_entry("late", created_at=base + timedelta(hours=1)))
    await repository.insert(make_entry("early", created_at=base))

    entries = await repository.list_all()

    assert [e.id for e in entries] == ["early", "late"]


@pytest.mark.asyncio
async def test_duplicate_id_rejected(repository):
    await repository.insert(make_entry("dup"))

    with pytest.raises(DuplicateEntryError):
        await repository.insert(make_entry("dup"))

    assert await repository.count_all() == 1


@pytest.mark.asyncio
async def test_record_hit_increments_once(repository):
    """A hit adds exactly one and moves last_accessed_at forward."""
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await repository.insert(make_entry("a", created_at=created))
    accessed = created + timedelta(minutes=5)

    updated = await repository.record_hit("a", accessed)

    assert updated is True
    (entry,) = await repository.list_all()
    assert entry.hit_count == 1
    assert entry.last_accessed_at == accessed
    assert entry.created_at == created


@pytest.mark.asyncio
async def test_record_hit_missing_entry_is_noop(repository):
    """Hits on an entry that was cleared meanwhile are ignored."""
    assert await repository.record_hit("gone", datetime.now(timezone.utc)) is False


@pytest.mark.asyncio
async def test_concurrent_hits_are_not_lost(repository):
    """Parallel increments on the same entry all land."""
    await repository.insert(make_entry("hot"))
    now = datetime.now(timezone.utc)

    results = await asyncio.gather(*(repository.record_hit("hot", now) for _ in range(10)))

    assert all(results)
    (entry,) = await repository.list_all()
    assert entry.hit_count == 10


@pytest.mark.asyncio
async def test_clear_all(repository):
    for i in range(3):
        await repository.insert(make_entry(str(i)))

    deleted = await repository.clear_all()

    assert deleted == 3
    assert await repository.list_all() == []
    assert await repository.count_all() == 0


@pytest.mark.asyncio
async def test_health_check(repository):
    assert await repository.health_check() is True


@pytest.mark.asyncio
async def test_get_stats(repository):
    await repository.insert(make_entry("a"))

    stats = await repository.get_stats()

    assert stats == {"backend": "sqlite", "total_entries": 1}


@pytest.mark.asyncio
async def test_unreachable_database_raises_store_unavailable(tmp_path):
    """Connection failures surface as a retryable store error."""
    repo = SqlCacheRepository.create(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'cache.db'}")

    with pytest.raises(StoreUnavailableError):
        await repo.list_all()

    assert await repo.health_check() is False
    await repo.close()


@pytest.mark.asyncio
async def test_in_memory_database_shared_across_sessions():
    """In-memory SQLite keeps one database for every session of the engine."""
    repo = SqlCacheRepository.create("sqlite+aiosqlite:///:memory:")
    try:
        await repo.create_schema()
        await repo.insert(make_entry("a"))

        assert await repo.count_all() == 1
        assert [e.id for e in await repo.list_all()] == ["a"]
    finally:
        await repo.close()
