"""Keyword catalog, query expansion and theme conflict detection."""

from notesearch.keywords.catalog import CatalogError, KeywordCatalog
from notesearch.keywords.expander import KeywordExpander
from notesearch.keywords.themes import ThemeConflictDetector, ThemeConflictResult

__all__ = [
    "CatalogError",
    "KeywordCatalog",
    "KeywordExpander",
    "ThemeConflictDetector",
    "ThemeConflictResult",
]
