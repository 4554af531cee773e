"""Text embedding client."""

from notesearch.embedding.client import EmbeddingClient, EmbeddingError

__all__ = ["EmbeddingClient", "EmbeddingError"]
