# src/notesearch/llm/client.py
"""LiteLLM-based text generation client."""

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    APIResponseValidationError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
    UnprocessableEntityError,
)

from notesearch.config import ConfigError, load_settings
from notesearch.constants.llm import DEFAULT_TEMPERATURE, MAX_TOKENS

logger = logging.getLogger(__name__)

# Provider failures raised by litellm. Several of these do not share a
# litellm base class, so they are listed explicitly.
PROVIDER_ERRORS: tuple[type[Exception], ...] = (
    APIConnectionError,
    APIError,
    APIResponseValidationError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
    UnprocessableEntityError,
)


class GenerationError(Exception):
    """Base exception for text generation errors."""

    pass


class GenerationConnectionError(GenerationError):
    """Raised when unable to connect to the LLM provider."""

    pass


class GenerationAuthenticationError(GenerationError):
    """Raised when authentication with the LLM provider fails."""

    pass


class GenerationRateLimitError(GenerationError):
    """Raised when rate limited by the LLM provider."""

    pass


# Checked in order; anything else becomes a plain GenerationError
_ERROR_MAP: tuple[tuple[type[Exception], type[GenerationError], str], ...] = (
    (AuthenticationError, GenerationAuthenticationError, "Authentication failed"),
    (RateLimitError, GenerationRateLimitError, "Rate limit exceeded"),
    (Timeout, GenerationConnectionError, "Request timed out"),
    (APIConnectionError, GenerationConnectionError, "Connection failed"),
)


def get_model_string(provider: str, model: str) -> str:
    """Get the LiteLLM model string for a provider.

    DashScope is reached through its OpenAI-compatible endpoint, so its
    models are addressed with the ``openai/`` prefix and an api_base.
    """
    if provider == "openai":
        return model  # OpenAI is default
    elif provider == "dashscope":
        return f"openai/{model}"
    elif provider == "ollama":
        return f"ollama/{model}"
    else:
        return f"{provider}/{model}"


def _completion_text(response) -> str:
    """Text of the first choice in a completion response."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise GenerationError(f"Malformed completion response: {e}") from e
    return str(content or "")


# Rate-limit and tracing headers worth keeping in the query log
_LOGGED_HEADERS = frozenset(
    {
        "retry-after",
        "x-request-id",
        "x-ratelimit-limit-requests",
        "x-ratelimit-remaining-requests",
        "x-ratelimit-reset-requests",
    }
)


def extract_error_details(e: Exception) -> dict | None:
    """Collect status, provider and rate-limit headers from a LiteLLM exception."""
    details: dict = {}
    response = getattr(e, "response", None)

    status_code = getattr(response, "status_code", None) or getattr(e, "status_code", None)
    if status_code is not None:
        details["status_code"] = status_code

    headers = getattr(response, "headers", None)
    if headers:
        kept = {k: v for k, v in dict(headers).items() if k.lower() in _LOGGED_HEADERS}
        if kept:
            details["response_headers"] = kept

    for attr in ("llm_provider", "message"):
        value = getattr(e, attr, None)
        if value is not None:
            details[attr] = str(value)

    return details or None


class LLMClient:
    """Unified text generation client supporting multiple providers via LiteLLM."""

    def __init__(
        self,
        provider: str,
        model: str,
        api_key: str | None = None,
        endpoint: str | None = None,
        log_path: Path | None = None,
    ):
        """Initialize LLM client.

        Args:
            provider: LLM provider (dashscope, openai, anthropic, google, ollama).
            model: Model name.
            api_key: Optional API key (uses env var if not provided).
            endpoint: Optional custom endpoint (Ollama, DashScope).
            log_path: Optional path to JSONL log file for query logging.
        """
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.endpoint = endpoint
        self.log_path = log_path

    def _log_query(
        self,
        model: str,
        system_prompt: str | None,
        prompt: str,
        temperature: float,
        max_tokens: int,
        response: str | None,
        duration_ms: int,
        error: str | None,
        error_details: dict | None = None,
    ) -> None:
        """Append a query record to the JSONL log file."""
        if not self.log_path:
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": self.provider,
            "model": model,
            "request": {
                "system_prompt": system_prompt,
                "prompt": prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            "response": response,
            "duration_ms": duration_ms,
            "error": error,
        }

        if error_details:
            entry["error_details"] = error_details

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            # Don't let logging failures break the application
            logger.debug(f"Failed to write LLM query log: {e}")

    def _resolve_defaults(
        self, temperature: float | None, max_tokens: int | None
    ) -> tuple[float, int]:
        if temperature is not None and max_tokens is not None:
            return temperature, max_tokens
        try:
            settings = load_settings()
            default_temperature = settings.llm.default_temperature
            default_max_tokens = settings.llm.max_tokens
        except (ConfigError, ValueError, OSError):
            default_temperature = DEFAULT_TEMPERATURE
            default_max_tokens = MAX_TOKENS
        return (
            temperature if temperature is not None else default_temperature,
            max_tokens if max_tokens is not None else default_max_tokens,
        )

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        """Generate completion from prompt.

        Args:
            prompt: User prompt.
            system_prompt: Optional system prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum response tokens.
            model: Optional model override for this call (same provider).

        Returns:
            Generated text response.

        Raises:
            GenerationError: If the provider call fails.
        """
        temperature, max_tokens = self._resolve_defaults(temperature, max_tokens)
        model_name = model or self.model

        messages = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": get_model_string(self.provider, model_name),
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if self.api_key:
            kwargs["api_key"] = self.api_key

        if self.endpoint and self.provider in ("ollama", "dashscope"):
            kwargs["api_base"] = self.endpoint

        start_time = time.perf_counter()
        try:
            response = await acompletion(**kwargs)
            result: str = _completion_text(response)
        except (*PROVIDER_ERRORS, GenerationError) as e:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            self._log_query(
                model_name,
                system_prompt,
                prompt,
                temperature,
                max_tokens,
                response=None,
                duration_ms=duration_ms,
                error=str(e),
                error_details=extract_error_details(e),
            )
            if isinstance(e, GenerationError):
                raise
            for litellm_error, error_class, label in _ERROR_MAP:
                if isinstance(e, litellm_error):
                    raise error_class(f"{label}: {e}") from e
            raise GenerationError(f"LLM API error: {e}") from e

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        self._log_query(
            model_name,
            system_prompt,
            prompt,
            temperature,
            max_tokens,
            response=result,
            duration_ms=duration_ms,
            error=None,
        )
        return result
