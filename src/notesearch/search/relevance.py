"""Relevance scoring used to filter results before summarization."""

from notesearch.constants.relevance import (
    DENSITY_BONUS,
    EXPANSION_HIT_SCORE,
    LONG_KEYWORD_MIN_LENGTH,
    LONG_KEYWORD_SCORE,
    NEUTRAL_SCORE,
    NO_MATCH_PENALTY,
    PARTIAL_MATCH_PENALTY,
    PARTIAL_MATCH_RATIO,
    SHORT_CONTENT_LENGTH,
    SHORT_CONTENT_PENALTY,
    SHORT_KEYWORD_SCORE,
    THEME_CONFLICT_PENALTY,
    VERY_SHORT_CONTENT_LENGTH,
    VERY_SHORT_CONTENT_PENALTY,
)
from notesearch.keywords.expander import KeywordExpander
from notesearch.keywords.themes import ThemeConflictDetector, split_content, tokenize_query


class RelevanceScorer:
    """Scores how well a piece of content answers a query.

    This is separate from the hybrid ranking score: ranking orders results
    for display and must stay gentle, while this score decides whether a
    result is worth putting in front of the LLM at all.

    Score composition:
        +4 / +3    per query keyword found (longer / two-character keywords)
        x0.2       if the content belongs to a conflicting theme
        +1.5       per expansion term found
        +0.3       per content token containing a query keyword
        x quality  length and match-coverage penalties
    """

    def __init__(self, expander: KeywordExpander, detector: ThemeConflictDetector) -> None:
        self._expander = expander
        self._detector = detector

    def score(self, content: str, query: str) -> float:
        """Return a non-negative relevance score for content against query."""
        if not query.strip():
            return NEUTRAL_SCORE

        content_lower = content.lower()
        keywords = tokenize_query(query)

        score = 0.0
        match_count = 0
        for keyword in keywords:
            if keyword in content_lower:
                match_count += 1
                if len(keyword) >= LONG_KEYWORD_MIN_LENGTH:
                    score += LONG_KEYWORD_SCORE
                else:
                    score += SHORT_KEYWORD_SCORE

        if self._detector.detect(query, content).has_conflict:
            score *= THEME_CONFLICT_PENALTY

        for term in self._expander.expand(query):
            if term.lower() in content_lower:
                score += EXPANSION_HIT_SCORE

        dense_tokens = sum(
            1 for token in split_content(content) if any(k in token for k in keywords)
        )
        score += DENSITY_BONUS * dense_tokens

        return score * self._quality_multiplier(content, match_count, len(keywords))

    def _quality_multiplier(self, content: str, match_count: int, keyword_count: int) -> float:
        multiplier = 1.0
        if len(content) < VERY_SHORT_CONTENT_LENGTH:
            multiplier *= VERY_SHORT_CONTENT_PENALTY
        elif len(content) < SHORT_CONTENT_LENGTH:
            multiplier *= SHORT_CONTENT_PENALTY

        if match_count == 0:
            multiplier *= NO_MATCH_PENALTY
        if match_count < PARTIAL_MATCH_RATIO * keyword_count:
            multiplier *= PARTIAL_MATCH_PENALTY
        return multiplier
