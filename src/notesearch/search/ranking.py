"""Hybrid ranking: vector similarity plus keyword presence boosts."""

import logging
from typing import Any

from notesearch.constants.search import (
    CONTENT_BOOST,
    DEFAULT_TITLE,
    MIN_CANDIDATES,
    OVER_FETCH_FACTOR,
    TITLE_BOOST,
)
from notesearch.keywords.expander import KeywordExpander

logger = logging.getLogger(__name__)


def candidate_pool_size(
    top_k: int,
    factor: int = OVER_FETCH_FACTOR,
    minimum: int = MIN_CANDIDATES,
) -> int:
    """Number of nearest neighbours to fetch before hybrid re-ranking."""
    return max(top_k * factor, minimum)


def _vector_score(candidate: Any) -> float:
    try:
        return float(candidate.get("score") or 0.0)
    except (AttributeError, TypeError, ValueError):
        return 0.0


def _flatten(candidate: Any, score: float, vector_score: float) -> dict[str, Any]:
    """Build a result dict from a raw hit, tolerating malformed fields."""
    fields = candidate.get("fields") if isinstance(candidate, dict) else None
    if not isinstance(fields, dict):
        fields = {}

    def text(key: str) -> str:
        value = fields.get(key)
        return "" if value is None else str(value)

    return {
        "id": str(candidate.get("id", "")) if isinstance(candidate, dict) else "",
        "title": text("title") or DEFAULT_TITLE,
        "content": text("content"),
        "note_id": text("noteId"),
        "url": text("url"),
        "score": score,
        "vector_score": vector_score,
    }


class HybridRanker:
    """Re-ranks vector search candidates with keyword boosts.

    hybrid_score = vector_score
                   + title_boost   for each expanded term in the title
                   + content_boost for each expanded term in the content

    Matching is a case-insensitive substring test. The candidate pool must
    already be over-fetched (see candidate_pool_size); ranking never issues
    its own retrieval.
    """

    def __init__(
        self,
        expander: KeywordExpander,
        title_boost: float = TITLE_BOOST,
        content_boost: float = CONTENT_BOOST,
    ) -> None:
        """Initialize hybrid ranker.

        Args:
            expander: Expands the query into the terms to boost on.
            title_boost: Added per expanded term found in a title.
            content_boost: Added per expanded term found in content.
        """
        self._expander = expander
        self._title_boost = title_boost
        self._content_boost = content_boost

    def rank(
        self,
        query: str,
        candidates: list[dict[str, Any]],
        top_k: int,
    ) -> list[dict[str, Any]]:
        """Rank candidates by hybrid score and keep the best top_k.

        Args:
            query: The user's query.
            candidates: Raw vector hits, each ``{id, score, fields}``.
            top_k: Maximum results to return.

        Returns:
            Flattened results sorted by ``score`` (the hybrid score, highest
            first), each also carrying its raw ``vector_score``. Ties keep
            candidate order. If boosting fails on malformed input, the same
            pool is returned ordered by vector score alone.
        """
        limit = max(top_k, 0)
        try:
            return self._hybrid_rank(query, candidates)[:limit]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Hybrid ranking failed, falling back to vector order: {e}")
            return self._vector_rank(candidates)[:limit]

    def _hybrid_rank(self, query: str, candidates: list[dict[str, Any]]) -> list[dict[str, Any]]:
        terms = [term.lower() for term in self._expander.expand(query)]
        logger.debug(f"Expanded terms for {query!r}: {', '.join(terms)}")

        scored: list[dict[str, Any]] = []
        for candidate in candidates:
            vector_score = float(candidate["score"] or 0.0)
            fields = candidate.get("fields") or {}
            title = (fields.get("title") or "").lower()
            content = (fields.get("content") or "").lower()

            hybrid_score = vector_score
            for term in terms:
                if term in title:
                    hybrid_score += self._title_boost
                if term in content:
                    hybrid_score += self._content_boost

            scored.append(_flatten(candidate, hybrid_score, vector_score))

        # sorted() is stable, so equal scores keep candidate order
        return sorted(scored, key=lambda r: -r["score"])

    def _vector_rank(self, candidates: list[dict[str, Any]]) -> list[dict[str, Any]]:
        results = []
        for candidate in candidates:
            vector_score = _vector_score(candidate)
            results.append(_flatten(candidate, vector_score, vector_score))
        return sorted(results, key=lambda r: -r["score"])
