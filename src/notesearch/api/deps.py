"""FastAPI dependency injection functions."""

from functools import lru_cache

from fastapi import Depends

from notesearch.config import Settings, load_settings
from notesearch.db.connection import Database
from notesearch.db.migrations import run_migrations
from notesearch.embedding.client import EmbeddingClient
from notesearch.keywords.catalog import KeywordCatalog
from notesearch.keywords.expander import KeywordExpander
from notesearch.keywords.themes import ThemeConflictDetector
from notesearch.llm.client import LLMClient
from notesearch.notes.indexer import NoteIndexer
from notesearch.notes.service import NotesService
from notesearch.search.ranking import HybridRanker
from notesearch.search.relevance import RelevanceScorer
from notesearch.search.service import SearchService
from notesearch.search.summarizer import ResultSummarizer
from notesearch.vectorstore.store import VectorStore


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return load_settings()


# =============================================================================
# Process-wide instances
# =============================================================================

_db_instance: Database | None = None


def get_db() -> Database:
    """Get database connection with migrations applied."""
    global _db_instance
    settings = get_settings()

    # Check if cached connection is stale (db file was deleted)
    if _db_instance is not None and not settings.db_path.exists():
        _db_instance.close()
        _db_instance = None

    if _db_instance is None:
        _db_instance = Database(settings.db_path)
        run_migrations(_db_instance)
    return _db_instance


def _reset_db_instance() -> None:
    """Reset database instance (for testing only)."""
    global _db_instance
    if _db_instance is not None:
        _db_instance.close()
        _db_instance = None


_vectorstore_instance: VectorStore | None = None


def get_vectorstore() -> VectorStore:
    """Get the notes vector store."""
    global _vectorstore_instance
    if _vectorstore_instance is None:
        settings = get_settings()
        if not settings.chroma_host:
            settings.chroma_path.mkdir(parents=True, exist_ok=True)
        _vectorstore_instance = VectorStore(
            persist_path=settings.chroma_path,
            collection_name=settings.vectorstore.collection_name,
            dimension=settings.embedding.dimension,
            metric=settings.vectorstore.metric,
            host=settings.chroma_host,
            port=settings.chroma_port,
        )
    return _vectorstore_instance


def _reset_vectorstore_instance() -> None:
    """Reset vector store instance (for testing only)."""
    global _vectorstore_instance
    if _vectorstore_instance is not None:
        _vectorstore_instance.close()
        _vectorstore_instance = None


_embedder_instance: EmbeddingClient | None = None


def get_embedder() -> EmbeddingClient:
    """Get embedding client instance."""
    global _embedder_instance
    if _embedder_instance is None:
        settings = get_settings()
        _embedder_instance = EmbeddingClient(
            provider=settings.embedding_provider,
            model=settings.embedding_model,
            dimension=settings.embedding.dimension,
            api_key=settings.embedding_api_key,
            endpoint=settings.embedding_endpoint,
        )
    return _embedder_instance


def _reset_embedder_instance() -> None:
    """Reset embedding client instance (for testing only)."""
    global _embedder_instance
    _embedder_instance = None


_llm_instance: LLMClient | None = None


def get_llm() -> LLMClient:
    """Get LLM client instance."""
    global _llm_instance
    if _llm_instance is None:
        settings = get_settings()
        _llm_instance = LLMClient(
            provider=settings.active_provider,
            model=settings.active_model,
            api_key=settings.llm_api_key,
            endpoint=settings.llm_endpoint,
            log_path=settings.llm_log_path,
        )
    return _llm_instance


def _reset_llm_instance() -> None:
    """Reset LLM client instance (for testing only)."""
    global _llm_instance
    _llm_instance = None


_catalog_instance: KeywordCatalog | None = None


def get_catalog() -> KeywordCatalog:
    """Get the keyword catalog shared by search and keyword administration.

    Loaded from KEYWORDS_FILE when set, otherwise from the bundled catalog.
    """
    global _catalog_instance
    if _catalog_instance is None:
        settings = get_settings()
        if settings.keywords_file is not None:
            _catalog_instance = KeywordCatalog.from_yaml(settings.keywords_file)
        else:
            _catalog_instance = KeywordCatalog.default()
    return _catalog_instance


def _reset_catalog_instance() -> None:
    """Reset keyword catalog instance (for testing only)."""
    global _catalog_instance
    _catalog_instance = None


# =============================================================================
# Per-request services
# =============================================================================


def get_search_service(
    settings: Settings = Depends(get_settings),
    embedder: EmbeddingClient = Depends(get_embedder),
    vectorstore: VectorStore = Depends(get_vectorstore),
    llm: LLMClient = Depends(get_llm),
    catalog: KeywordCatalog = Depends(get_catalog),
) -> SearchService:
    """Get search service wired to the shared catalog."""
    expander = KeywordExpander(catalog)
    scorer = RelevanceScorer(expander, ThemeConflictDetector(catalog))
    ranker = HybridRanker(
        expander,
        title_boost=settings.search.title_boost,
        content_boost=settings.search.content_boost,
    )
    summarizer = ResultSummarizer(
        scorer,
        llm,
        threshold=settings.summary.relevance_threshold,
        fallback_count=settings.summary.fallback_count,
        content_max_chars=settings.summary.content_max_chars,
        max_tokens=settings.summary.max_tokens,
        temperature=settings.summary.temperature,
    )
    return SearchService(
        embedder,
        vectorstore,
        ranker,
        summarizer,
        default_top_k=settings.search.default_top_k,
        max_top_k=settings.search.max_top_k,
        over_fetch_factor=settings.search.over_fetch_factor,
        min_candidates=settings.search.min_candidates,
        max_query_length=settings.search.max_query_length,
        max_custom_prompt_length=settings.search.max_custom_prompt_length,
    )


def get_notes_service(db: Database = Depends(get_db)) -> NotesService:
    """Get NotesService instance."""
    return NotesService(db)


def get_indexer(
    settings: Settings = Depends(get_settings),
    notes: NotesService = Depends(get_notes_service),
    embedder: EmbeddingClient = Depends(get_embedder),
    vectorstore: VectorStore = Depends(get_vectorstore),
) -> NoteIndexer:
    """Get note indexer instance."""
    return NoteIndexer(notes, embedder, vectorstore, batch_size=settings.embedding.batch_size)
