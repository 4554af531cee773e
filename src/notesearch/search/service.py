"""Hybrid search over imported notes."""

import logging

from notesearch.constants.search import DEFAULT_TOP_K, MIN_CANDIDATES, OVER_FETCH_FACTOR
from notesearch.constants.summary import SUMMARY_UNAVAILABLE_MESSAGE
from notesearch.embedding.client import EmbeddingClient, EmbeddingError
from notesearch.llm.client import GenerationError
from notesearch.search.ranking import HybridRanker, candidate_pool_size
from notesearch.search.schemas import SearchHealth, SearchResponse, SearchResult
from notesearch.search.summarizer import ResultSummarizer, SummaryOptions
from notesearch.vectorstore.store import VectorStore, VectorStoreError

logger = logging.getLogger(__name__)

# Query sent by the embedding health probe
HEALTH_PROBE_TEXT = "health check"


class QueryValidationError(ValueError):
    """Raised when a search request is malformed (empty or over-long input)."""

    pass


class SearchUnavailableError(Exception):
    """Raised when retrieval fails because a collaborator is unreachable."""

    pass


class SearchService:
    """Embeds a query, retrieves candidates and ranks them.

    Retrieval failures are fatal to a request. Summary failures are not:
    ranked results are still returned with a placeholder summary.
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        vectorstore: VectorStore,
        ranker: HybridRanker,
        summarizer: ResultSummarizer,
        default_top_k: int = DEFAULT_TOP_K,
        max_top_k: int = 100,
        over_fetch_factor: int = OVER_FETCH_FACTOR,
        min_candidates: int = MIN_CANDIDATES,
        max_query_length: int = 500,
        max_custom_prompt_length: int = 2000,
    ) -> None:
        self._embedder = embedder
        self._vectorstore = vectorstore
        self._ranker = ranker
        self._summarizer = summarizer
        self._default_top_k = default_top_k
        self._max_top_k = max_top_k
        self._over_fetch_factor = over_fetch_factor
        self._min_candidates = min_candidates
        self._max_query_length = max_query_length
        self._max_custom_prompt_length = max_custom_prompt_length

    def _validate(self, query: str, top_k: int, custom_prompt: str | None) -> None:
        if not query or not query.strip():
            raise QueryValidationError("Query must not be empty")
        if len(query) > self._max_query_length:
            raise QueryValidationError(
                f"Query is {len(query)} characters; the limit is {self._max_query_length}"
            )
        if top_k < 0 or top_k > self._max_top_k:
            raise QueryValidationError(f"top_k must be between 0 and {self._max_top_k}")
        if custom_prompt is not None and len(custom_prompt) > self._max_custom_prompt_length:
            raise QueryValidationError(
                f"Custom prompt is {len(custom_prompt)} characters; "
                f"the limit is {self._max_custom_prompt_length}"
            )

    async def search(
        self,
        query: str,
        top_k: int | None = None,
        with_summary: bool = False,
        custom_prompt: str | None = None,
        summary_options: SummaryOptions | None = None,
    ) -> SearchResponse:
        """Run a hybrid search and optionally summarize the results.

        Args:
            query: Free-text query.
            top_k: Results to return; defaults to the configured page size.
            with_summary: Also generate an AI summary of the results.
            custom_prompt: Replaces the default summary instructions.
            summary_options: Per-request generation overrides.

        Raises:
            QueryValidationError: If the query or custom prompt is empty or too long.
            SearchUnavailableError: If embedding or vector retrieval fails.
        """
        top_k = self._default_top_k if top_k is None else top_k
        self._validate(query, top_k, custom_prompt)
        query = query.strip()

        try:
            vector = await self._embedder.embed(query)
        except EmbeddingError as e:
            logger.error(f"Embedding failed for {query!r}: {e}")
            raise SearchUnavailableError(f"Embedding service unavailable: {e}") from e

        pool_size = candidate_pool_size(top_k, self._over_fetch_factor, self._min_candidates)
        try:
            candidates = self._vectorstore.query(
                vector, top_k=pool_size, include_vector=False, include_fields=True
            )
        except VectorStoreError as e:
            logger.error(f"Vector query failed for {query!r}: {e}")
            raise SearchUnavailableError(f"Vector store unavailable: {e}") from e

        results = self._ranker.rank(query, candidates, top_k)
        logger.info(
            f"Search {query!r}: {len(candidates)} candidates, returning {len(results)}"
        )

        summary = None
        summary_available = False
        if with_summary:
            try:
                summary = await self._summarizer.summarize(
                    results, query, custom_prompt=custom_prompt, options=summary_options
                )
                summary_available = True
            except GenerationError as e:
                logger.warning(f"Summary generation failed for {query!r}: {e}")
                summary = SUMMARY_UNAVAILABLE_MESSAGE

        return SearchResponse(
            query=query,
            total=len(results),
            results=[SearchResult(**r) for r in results],
            summary=summary,
            summary_available=summary_available,
        )

    async def health(self) -> SearchHealth:
        """Probe the embedding provider and the vector store."""
        try:
            await self._embedder.embed(HEALTH_PROBE_TEXT)
            embedding_ok = True
        except EmbeddingError as e:
            logger.warning(f"Embedding health check failed: {e}")
            embedding_ok = False
        return SearchHealth(embedding=embedding_ok, vectorstore=self._vectorstore.health_check())
