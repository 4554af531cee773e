# src/notesearch/config.py
"""Configuration system for notesearch.

This module handles loading settings from environment variables and an INI
file, providing sensible defaults, and computing derived paths inside the
data directory.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "search": {
        "default_top_k": (int, 5, 1, 100, "Results returned when top_k is omitted"),
        "max_top_k": (int, 100, 1, 500, "Largest accepted top_k"),
        "over_fetch_factor": (int, 3, 1, 10, "Candidate pool multiplier over top_k"),
        "min_candidates": (int, 20, 1, 500, "Minimum candidate pool size"),
        "title_boost": (float, 0.3, 0.0, 5.0, "Hybrid boost per term found in title"),
        "content_boost": (float, 0.1, 0.0, 5.0, "Hybrid boost per term found in content"),
        "max_query_length": (int, 500, 1, 5000, "Max characters in a query"),
        "max_custom_prompt_length": (int, 2000, 1, 20000, "Max characters in custom prompt"),
    },
    "summary": {
        "relevance_threshold": (float, 2.0, 0.0, 100.0, "Min relevance to enter the prompt"),
        "fallback_count": (int, 3, 1, 20, "Results kept when none pass threshold"),
        "content_max_chars": (int, 500, 50, 5000, "Per-result content cap in the prompt"),
        "max_tokens": (int, 2000, 256, 32768, "Max summary tokens"),
        "temperature": (float, 0.3, 0.0, 2.0, "Summary temperature"),
    },
    "embedding": {
        "dimension": (int, 1536, 8, 8192, "Embedding vector dimension"),
        "batch_size": (int, 10, 1, 100, "Notes embedded per batch when indexing"),
    },
    "vectorstore": {
        "collection_name": (str, "xiaohongshu_notes", None, None, "Collection holding notes"),
        "metric": (str, "cosine", None, None, "Distance metric: cosine, ip or l2"),
    },
    "llm": {
        "max_tokens": (int, 8192, 256, 32768, "Max response tokens"),
        "default_temperature": (float, 0.7, 0.0, 2.0, "Default LLM temperature"),
    },
}

VALID_METRICS = ("cosine", "ip", "l2")


@dataclass(frozen=True)
class SearchConfig:
    """Hybrid search configuration."""

    default_top_k: int
    max_top_k: int
    over_fetch_factor: int
    min_candidates: int
    title_boost: float
    content_boost: float
    max_query_length: int
    max_custom_prompt_length: int


@dataclass(frozen=True)
class SummaryConfig:
    """Result summarization configuration."""

    relevance_threshold: float
    fallback_count: int
    content_max_chars: int
    max_tokens: int
    temperature: float


@dataclass(frozen=True)
class EmbeddingConfig:
    """Embedding configuration."""

    dimension: int
    batch_size: int


@dataclass(frozen=True)
class VectorStoreConfig:
    """Vector store configuration."""

    collection_name: str
    metric: str


@dataclass(frozen=True)
class LLMConfig:
    """LLM client configuration."""

    max_tokens: int
    default_temperature: float


_SECTION_CLASSES: dict[str, type] = {
    "search": SearchConfig,
    "summary": SummaryConfig,
    "embedding": EmbeddingConfig,
    "vectorstore": VectorStoreConfig,
    "llm": LLMConfig,
}


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: bool | int | float | str
            try:
                if typ is bool:
                    value = raw_value.lower() in ("true", "1", "yes", "on")
                elif typ is int:
                    value = int(raw_value)
                elif typ is float:
                    value = float(raw_value)
                else:
                    value = raw_value
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = default

        if typ in (int, float) and value is not None:
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    if section == "vectorstore" and result["metric"] not in VALID_METRICS:
        raise ConfigError(
            f"Value for [vectorstore].metric is {result['metric']!r}, "
            f"expected one of {', '.join(VALID_METRICS)}"
        )

    return result


def _default_section(section: str) -> Any:
    """Build a section dataclass from schema defaults."""
    values = {key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA[section].items()}
    return _SECTION_CLASSES[section](**values)


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Returns a Config whose provider fields are placeholders; load_settings()
    fills them in from the environment.

    Args:
        config_path: Path to config file. If None, uses defaults from schema.

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path, encoding="utf-8")

    sections = {
        name: _SECTION_CLASSES[name](**_load_section(parser, name, schema))
        for name, schema in CONFIG_SCHEMA.items()
    }

    return Config(data_dir=Path("."), **sections)


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    data_dir: Path
    active_provider: str = "ollama"
    active_model: str = "llama2"
    embedding_provider: str = "ollama"
    embedding_model: str = "nomic-embed-text"
    dashscope_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    ollama_endpoint: str = "http://localhost:11434"
    dashscope_endpoint: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    chroma_host: Optional[str] = None
    chroma_port: int = 8000
    keywords_file: Optional[Path] = None

    # Section configs default to schema values in __post_init__
    search: SearchConfig = None  # type: ignore[assignment]
    summary: SummaryConfig = None  # type: ignore[assignment]
    embedding: EmbeddingConfig = None  # type: ignore[assignment]
    vectorstore: VectorStoreConfig = None  # type: ignore[assignment]
    llm: LLMConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        for section in CONFIG_SCHEMA:
            if getattr(self, section) is None:
                object.__setattr__(self, section, _default_section(section))

    @property
    def db_path(self) -> Path:
        """Path to the notes SQLite database."""
        return self.data_dir / "notes.db"

    @property
    def chroma_path(self) -> Path:
        """Path to the local ChromaDB persistence directory."""
        return self.data_dir / "chroma"

    @property
    def llm_log_path(self) -> Path:
        """Path to the LLM query log file."""
        return self.data_dir / "logs" / "llm-queries.jsonl"

    def _api_key_for(self, provider: str) -> Optional[str]:
        provider_keys = {
            "dashscope": self.dashscope_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
        }
        return provider_keys.get(provider)

    def _endpoint_for(self, provider: str) -> Optional[str]:
        if provider == "ollama":
            return self.ollama_endpoint
        if provider == "dashscope":
            return self.dashscope_endpoint
        return None

    @property
    def llm_api_key(self) -> Optional[str]:
        """API key for the active LLM provider."""
        return self._api_key_for(self.active_provider)

    @property
    def llm_endpoint(self) -> Optional[str]:
        """Endpoint for the active LLM provider (Ollama and DashScope only)."""
        return self._endpoint_for(self.active_provider)

    @property
    def embedding_api_key(self) -> Optional[str]:
        """API key for the embedding provider."""
        return self._api_key_for(self.embedding_provider)

    @property
    def embedding_endpoint(self) -> Optional[str]:
        """Endpoint for the embedding provider (Ollama and DashScope only)."""
        return self._endpoint_for(self.embedding_provider)


PROVIDER_DEFAULT_MODELS = {
    "dashscope": "qwen-plus",
    "openai": "gpt-4o",
    "anthropic": "claude-3-5-sonnet-20241022",
    "google": "gemini-1.5-pro",
    "ollama": "llama2",
}

EMBEDDING_DEFAULT_MODELS = {
    "dashscope": "text-embedding-v2",
    "openai": "text-embedding-3-small",
    "google": "text-embedding-004",
    "ollama": "nomic-embed-text",
}


def _detect_provider_from_keys() -> str:
    """Auto-detect provider from available API keys.

    Falls back to ollama if no keys are found.
    """
    for provider, env_var in (
        ("dashscope", "DASHSCOPE_API_KEY"),
        ("openai", "OPENAI_API_KEY"),
        ("anthropic", "ANTHROPIC_API_KEY"),
        ("google", "GOOGLE_API_KEY"),
    ):
        if os.getenv(env_var):
            return provider
    return "ollama"


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the application.
    Use load_settings.cache_clear() to reload settings.

    Raises:
        ConfigError: If config.ini holds invalid values.
    """
    data_dir_str = os.getenv("NOTESEARCH_DATA_DIR")
    data_dir = Path(data_dir_str) if data_dir_str else Path.home() / ".notesearch"

    config_file = data_dir / "config.ini"
    try:
        config_exists = config_file.exists()
    except PermissionError:
        config_exists = False
    base_config = _load_config(config_file if config_exists else None)

    active_provider = os.getenv("ACTIVE_PROVIDER") or _detect_provider_from_keys()
    active_model = os.getenv("ACTIVE_MODEL") or PROVIDER_DEFAULT_MODELS.get(
        active_provider, "llama2"
    )

    # Anthropic has no embedding endpoint, so embeddings fall back to detection
    embedding_provider = os.getenv("EMBEDDING_PROVIDER")
    if not embedding_provider:
        embedding_provider = active_provider
        if embedding_provider not in EMBEDDING_DEFAULT_MODELS:
            embedding_provider = "openai" if os.getenv("OPENAI_API_KEY") else "ollama"
    embedding_model = os.getenv("EMBEDDING_MODEL") or EMBEDDING_DEFAULT_MODELS.get(
        embedding_provider, "nomic-embed-text"
    )

    keywords_file = os.getenv("KEYWORDS_FILE")

    return Config(
        data_dir=data_dir,
        active_provider=active_provider,
        active_model=active_model,
        embedding_provider=embedding_provider,
        embedding_model=embedding_model,
        dashscope_api_key=os.getenv("DASHSCOPE_API_KEY"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        ollama_endpoint=os.getenv("OLLAMA_ENDPOINT", "http://localhost:11434"),
        dashscope_endpoint=os.getenv(
            "DASHSCOPE_ENDPOINT", "https://dashscope.aliyuncs.com/compatible-mode/v1"
        ),
        chroma_host=os.getenv("CHROMA_HOST") or None,
        chroma_port=int(os.getenv("CHROMA_PORT", "8000")),
        keywords_file=Path(keywords_file) if keywords_file else None,
        search=base_config.search,
        summary=base_config.summary,
        embedding=base_config.embedding,
        vectorstore=base_config.vectorstore,
        llm=base_config.llm,
    )


# Alias matching the name used by the API layer
Settings = Config
