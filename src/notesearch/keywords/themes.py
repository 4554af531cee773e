"""Theme conflict detection between a query and candidate content."""

import re
from dataclasses import dataclass, field

from notesearch.keywords.catalog import KeywordCatalog

# Whitespace plus ASCII and full-width commas
_TOKEN_SPLIT = re.compile(r"[\s,，]+")


def tokenize_query(query: str) -> list[str]:
    """Lowercase a query and split it into words longer than one character."""
    return [word for word in _TOKEN_SPLIT.split(query.lower()) if len(word) > 1]


def split_content(content: str) -> list[str]:
    """Lowercase content and split it on whitespace and commas."""
    return [token for token in _TOKEN_SPLIT.split(content.lower()) if token]


@dataclass(frozen=True)
class ThemeConflictResult:
    """Outcome of comparing a query's theme against content vocabulary."""

    has_conflict: bool
    query_theme: str | None = None
    conflicting_themes: list[str] = field(default_factory=list)


class ThemeConflictDetector:
    """Flags content that carries vocabulary of a theme other than the query's.

    Only the first query word naming a registered theme is considered. A
    document is flagged when it contains defining terms of a *different*
    theme, not merely when it lacks the query theme's vocabulary.
    """

    def __init__(self, catalog: KeywordCatalog) -> None:
        self._catalog = catalog

    def detect(self, query: str, content: str) -> ThemeConflictResult:
        themes = self._catalog.theme_items()
        by_lower_name = {}
        for name, _ in themes:
            by_lower_name.setdefault(name.lower(), name)

        query_theme = next(
            (by_lower_name[word] for word in tokenize_query(query) if word in by_lower_name),
            None,
        )
        if query_theme is None:
            return ThemeConflictResult(has_conflict=False)

        content_lower = content.lower()
        conflicting = [
            name
            for name, terms in themes
            if name != query_theme and any(term.lower() in content_lower for term in terms)
        ]
        return ThemeConflictResult(
            has_conflict=bool(conflicting),
            query_theme=query_theme,
            conflicting_themes=conflicting,
        )
