"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .lookup_result import CacheHit, CacheMiss, LookupResult

__all__ = ["CacheEntryEntity", "CacheHit", "CacheMiss", "LookupResult"]
