"""JSON codec for the "all entries" snapshot stored in the shared layer."""

import json
from datetime import datetime

from hybrid_semantic_cache.entities import CacheEntryEntity


def encode_snapshot(entries: list[CacheEntryEntity]) -> bytes:
    """Serialize a snapshot of cache entries to JSON bytes."""
    return json.dumps(
        [
            {
                "id": e.id,
                "query": e.query,
                "response": e.response,
                "embedding": e.embedding,
                "hit_count": e.hit_count,
                "created_at": e.created_at.isoformat(),
                "last_accessed_at": e.last_accessed_at.isoformat(),
                "metadata": e.metadata,
            }
            for e in entries
        ]
    ).encode()


def decode_snapshot(payload: bytes) -> list[CacheEntryEntity]:
    """Deserialize JSON bytes produced by encode_snapshot."""
    return [
        CacheEntryEntity(
            id=item["id"],
            query=item["query"],
            response=item["response"],
            embedding=item["embedding"],
            hit_count=item["hit_count"],
            created_at=datetime.fromisoformat(item["created_at"]),
            last_accessed_at=datetime.fromisoformat(item["last_accessed_at"]),
            metadata=item.get("metadata"),
        )
        for item in json.loads(payload)
    ]
