"""Ollama-based embedding and chat completion provider.

Uses Ollama's local API for both halves of the chat flow:
- /api/embed turns the user query into the vector the cache matches on
- /api/chat produces a fresh response on a cache miss

Requirements:
    - Ollama installed: https://ollama.com
    - Models pulled: `ollama pull nomic-embed-text` and `ollama pull llama3.2`
    - Ollama running: `ollama serve`
"""

import logging

import httpx

from hybrid_semantic_cache.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful AI assistant."


class OllamaProvider:
    """Ollama implementation of the EmbeddingProvider and CompletionProvider protocols.

    This class satisfies both protocols through structural typing - no
    explicit inheritance needed.

    Example:
        ```python
        provider = OllamaProvider.create(
            model_name="nomic-embed-text",
            chat_model="llama3.2",
        )

        embedding = await provider.encode("Hello, world!")
        answer = await provider.complete("What is a semantic cache?")
        ```
    """

    # Known model dimensions (for common models)
    MODEL_DIMENSIONS = {
        "embeddinggemma": 768,
        "nomic-embed-text": 768,
        "mxbai-embed-large": 1024,
        "all-minilm": 384,
    }

    def __init__(
        self,
        model_name: str | None = None,
        chat_model: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama provider.

        Args:
            model_name: Name of the Ollama embedding model. Defaults to settings.
            chat_model: Name of the Ollama chat model. Defaults to settings.
            base_url: Ollama API base URL. Defaults to settings.
            timeout: Request timeout in seconds.
            client: Preconfigured httpx client (mainly for tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._chat_model = chat_model or settings.chat_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout
        self._dimension: int | None = settings.embedding_dimension or None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        chat_model: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaProvider":
        """Factory method to create OllamaProvider with defaults."""
        return cls(model_name=model_name, chat_model=chat_model, base_url=base_url)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension.

        Known models report their documented size until the first encode
        reveals the real one. Unknown models default to 768.
        """
        if self._dimension is None:
            self._dimension = self.MODEL_DIMENSIONS.get(self._model_name, 768)
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the embedding model name."""
        return self._model_name

    @property
    def chat_model(self) -> str:
        """Get the chat model name."""
        return self._chat_model

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            RuntimeError: If the Ollama API request fails
            ValueError: If the response format is invalid
        """
        data = await self._post("/api/embed", {"model": self._model_name, "input": text})

        # Ollama returns {"embeddings": [[...]]} for single input
        if data.get("embeddings"):
            vector = data["embeddings"][0]
        elif "embedding" in data:
            vector = data["embedding"]
        else:
            raise ValueError(f"Unexpected response format: {data}")

        self._dimension = len(vector)
        return [float(x) for x in vector]

    async def complete(self, query: str) -> str:
        """Get a fresh chat completion for a query.

        Args:
            query: The user query

        Returns:
            The assistant's response text
        """
        payload = {
            "model": self._chat_model,
            "stream": False,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
        }
        data = await self._post("/api/chat", payload)

        try:
            return data["message"]["content"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Unexpected response format: {data}") from e

    async def _post(self, path: str, payload: dict) -> dict:
        url = f"{self._base_url}{path}"
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower():
                error_msg += "\n  → Is Ollama running? Try: ollama serve"
            elif "not found" in str(e).lower():
                error_msg += f"\n  → Model not found. Try: ollama pull {payload.get('model')}"
            raise RuntimeError(error_msg) from e

    async def is_available(self) -> bool:
        """Check if Ollama answers on its tags endpoint.

        Returns:
            True if Ollama is running, False otherwise
        """
        try:
            response = await self.client.get(f"{self._base_url}/api/tags")
            response.raise_for_status()
            return True
        except httpx.HTTPError:
            logger.warning("Ollama is not available at %s", self._base_url)
            return False

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
