"""Exception taxonomy for the semantic cache.

- DimensionMismatchError: vector lengths disagree. Signals a configuration
  defect (wrong embedding model) and is never retried.
- DuplicateEntryError: an insert reused an existing entry id.
- StoreUnavailableError / SharedCacheUnavailableError: the relational store
  or the shared snapshot layer could not be reached. Retryable; the cache
  itself performs no retry.
"""


class SemanticCacheError(Exception):
    """Base class for all semantic cache errors."""


class DimensionMismatchError(SemanticCacheError, ValueError):
    """Raised when two embedding vectors have different lengths."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}"
        )


class DuplicateEntryError(SemanticCacheError):
    """Raised when inserting an entry whose id already exists."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Cache entry already exists: {entry_id}")


class StoreUnavailableError(SemanticCacheError):
    """Raised when the cache store cannot be reached. Retryable."""

    retryable = True


class SharedCacheUnavailableError(SemanticCacheError):
    """Raised when the shared snapshot layer cannot be reached. Retryable."""

    retryable = True
