"""Vector store module for semantic search."""

from notesearch.vectorstore.store import VectorStore, VectorStoreError

__all__ = ["VectorStore", "VectorStoreError"]
