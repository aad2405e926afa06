"""Chat completion provider protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for chat completion backends used on a cache miss."""

    @property
    def chat_model(self) -> str:
        """Return the name of the chat model."""
        ...

    async def complete(self, query: str) -> str:
        """Produce a fresh response for a user query.

        Args:
            query: The user query

        Returns:
            The model's response text
        """
        ...
