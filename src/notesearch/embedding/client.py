"""LiteLLM-based embedding client."""

import logging
from typing import Any

from litellm import aembedding

from notesearch.llm.client import PROVIDER_ERRORS, extract_error_details, get_model_string

logger = logging.getLogger(__name__)


class EmbeddingError(Exception):
    """Raised when the embedding provider fails or returns a malformed response."""

    pass


def _extract_vectors(response: Any) -> list[list[float]]:
    """Pull embedding vectors out of a LiteLLM response, in input order."""
    data = getattr(response, "data", None)
    if data is None and isinstance(response, dict):
        data = response.get("data")
    if not data:
        raise EmbeddingError("Embedding response contains no data")

    items = []
    for position, item in enumerate(data):
        if isinstance(item, dict):
            index, vector = item.get("index", position), item.get("embedding")
        else:
            index, vector = getattr(item, "index", position), getattr(item, "embedding", None)
        if not vector:
            raise EmbeddingError(f"Embedding response item {position} has no embedding")
        try:
            items.append((index, [float(x) for x in vector]))
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"Embedding response item {position} is not numeric") from e

    items.sort(key=lambda pair: pair[0])
    return [vector for _, vector in items]


class EmbeddingClient:
    """Turns text into fixed-dimension vectors via a remote embedding API."""

    def __init__(
        self,
        provider: str,
        model: str,
        dimension: int,
        api_key: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize embedding client.

        Args:
            provider: Embedding provider (dashscope, openai, google, ollama).
            model: Embedding model name.
            dimension: Expected vector length; responses are checked against it.
            api_key: Optional API key (uses env var if not provided).
            endpoint: Optional custom endpoint (Ollama, DashScope).
        """
        self.provider = provider
        self.model = model
        self.dimension = dimension
        self.api_key = api_key
        self.endpoint = endpoint

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingError: On provider failure or malformed response.
        """
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts in one request, preserving input order.

        Raises:
            EmbeddingError: On provider failure or malformed response.
        """
        if not texts:
            return []

        kwargs: dict[str, Any] = {
            "model": get_model_string(self.provider, self.model),
            "input": texts,
        }
        if self.provider == "dashscope":
            kwargs["encoding_format"] = "float"
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.endpoint and self.provider in ("ollama", "dashscope"):
            kwargs["api_base"] = self.endpoint

        try:
            response = await aembedding(**kwargs)
        except PROVIDER_ERRORS as e:
            logger.error(f"Embedding request failed: {e} ({extract_error_details(e)})")
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        vectors = _extract_vectors(response)
        if len(vectors) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
        for vector in vectors:
            if len(vector) != self.dimension:
                raise EmbeddingError(
                    f"Embedding dimension {len(vector)} does not match expected {self.dimension}"
                )
        return vectors
