"""Hybrid search, relevance filtering and result summarization."""

from notesearch.search.ranking import HybridRanker, candidate_pool_size
from notesearch.search.relevance import RelevanceScorer
from notesearch.search.service import QueryValidationError, SearchService, SearchUnavailableError
from notesearch.search.summarizer import PreparedSummary, ResultSummarizer, SummaryOptions

__all__ = [
    "HybridRanker",
    "PreparedSummary",
    "QueryValidationError",
    "RelevanceScorer",
    "ResultSummarizer",
    "SearchService",
    "SearchUnavailableError",
    "SummaryOptions",
    "candidate_pool_size",
]
