"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings. The cache core never calls it; the chat
flow embeds the query and hands the vector to the cache.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services."""

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        ...
