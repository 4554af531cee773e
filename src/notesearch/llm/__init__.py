# src/notesearch/llm/__init__.py
"""Text generation client abstraction."""

from notesearch.llm.client import (
    GenerationAuthenticationError,
    GenerationConnectionError,
    GenerationError,
    GenerationRateLimitError,
    LLMClient,
)

__all__ = [
    "GenerationAuthenticationError",
    "GenerationConnectionError",
    "GenerationError",
    "GenerationRateLimitError",
    "LLMClient",
]
