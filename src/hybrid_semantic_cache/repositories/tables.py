"""SQLAlchemy table definitions for the cache store."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class CacheEntryRow(Base):
    """One cached query/response pair."""

    __tablename__ = "cache_entries"

    id = Column(String(64), primary_key=True)
    query = Column(String(1000), nullable=False)
    response = Column(Text, nullable=False)
    embedding = Column(JSON, nullable=False)
    extra_metadata = Column("metadata", JSON, nullable=True)  # "metadata" is reserved on Base
    hit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_accessed_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_cache_entries_query", "query"),
        Index("idx_cache_entries_created_at", "created_at"),
    )
