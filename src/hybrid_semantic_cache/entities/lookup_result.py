"""Outcome of a semantic cache lookup."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheHit:
    """A cached response whose query embedding met the similarity threshold.

    Attributes:
        entry_id: Id of the matched cache entry
        response: The cached response
        similarity: Cosine similarity between the query and the matched entry
    """

    entry_id: str
    response: str
    similarity: float

    @property
    def is_hit(self) -> bool:
        return True


@dataclass(frozen=True)
class CacheMiss:
    """No cached entry met the similarity threshold."""

    @property
    def is_hit(self) -> bool:
        return False


LookupResult = CacheHit | CacheMiss
