"""Keyword catalog: seed-term expansions and theme vocabularies."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS_PATH = Path(__file__).parent / "default_keywords.yaml"


class CatalogError(Exception):
    """Raised when a keyword catalog file cannot be loaded."""

    pass


def _dedupe(terms: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicate and empty terms, keeping first-seen order."""
    return tuple(dict.fromkeys(t for t in terms if t))


def _freeze(mapping: Mapping[str, Iterable[str]] | None) -> dict[str, tuple[str, ...]]:
    return {str(key): _dedupe(str(t) for t in values) for key, values in (mapping or {}).items()}


class KeywordCatalog:
    """Two independent keyword mappings used by expansion and theme detection.

    ``expansions`` maps a seed term to the terms added when a query contains
    that seed word. ``themes`` maps a theme name to the vocabulary that marks
    content as belonging to that theme. The two share key-space only by
    coincidence and are never consulted for each other.

    Mutations are copy-on-write: a writer builds a new dict and swaps the
    reference under a lock, so readers always see a complete mapping.
    """

    def __init__(
        self,
        expansions: Mapping[str, Iterable[str]] | None = None,
        themes: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._expansions = _freeze(expansions)
        self._themes = _freeze(themes)
        self._lock = threading.Lock()

    @classmethod
    def from_yaml(cls, path: Path) -> KeywordCatalog:
        """Load a catalog from a YAML file with ``expansions`` and ``themes`` keys.

        Raises:
            CatalogError: If the file is missing or malformed.
        """
        try:
            data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise CatalogError(f"Failed to load keyword catalog {path}: {e}") from e

        if not isinstance(data, dict):
            raise CatalogError(f"Keyword catalog {path} must be a mapping")

        expansions = data.get("expansions") or {}
        themes = data.get("themes") or {}
        for name, section in (("expansions", expansions), ("themes", themes)):
            if not isinstance(section, dict) or not all(
                isinstance(v, list) for v in section.values()
            ):
                raise CatalogError(f"[{name}] in {path} must map terms to lists")

        catalog = cls(expansions, themes)
        logger.info(
            f"Loaded keyword catalog from {path}: "
            f"{len(catalog._expansions)} seed terms, {len(catalog._themes)} themes"
        )
        return catalog

    @classmethod
    def default(cls) -> KeywordCatalog:
        """Load the catalog bundled with the package."""
        return cls.from_yaml(DEFAULT_KEYWORDS_PATH)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_expansions(self, term: str) -> list[str]:
        """Expansion terms for a seed term (empty if unknown)."""
        return list(self._expansions.get(term, ()))

    def get_theme_terms(self, theme: str) -> list[str]:
        """Defining terms of a theme (empty if unknown)."""
        return list(self._themes.get(theme, ()))

    def list_seed_terms(self) -> list[str]:
        return list(self._expansions)

    def list_themes(self) -> list[str]:
        return list(self._themes)

    def has_seed(self, term: str) -> bool:
        return term in self._expansions

    def theme_items(self) -> list[tuple[str, tuple[str, ...]]]:
        """Snapshot of (theme, terms) pairs in catalog order."""
        return list(self._themes.items())

    # -------------------------------------------------------------------------
    # Administrative mutations
    # -------------------------------------------------------------------------

    def add_expansion(self, term: str, terms: Iterable[str]) -> None:
        """Set the expansion terms of a seed term, replacing any existing entry."""
        with self._lock:
            updated = dict(self._expansions)
            updated[term] = _dedupe(terms)
            self._expansions = updated

    def add_theme_terms(self, theme: str, terms: Iterable[str]) -> None:
        """Set the defining terms of a theme, replacing any existing entry."""
        with self._lock:
            updated = dict(self._themes)
            updated[theme] = _dedupe(terms)
            self._themes = updated

    def remove_expansion(self, term: str) -> None:
        """Remove a seed term. Unknown terms are ignored."""
        with self._lock:
            if term not in self._expansions:
                return
            updated = dict(self._expansions)
            del updated[term]
            self._expansions = updated

    def remove_theme_terms(self, theme: str) -> None:
        """Remove a theme. Unknown themes are ignored."""
        with self._lock:
            if theme not in self._themes:
                return
            updated = dict(self._themes)
            del updated[theme]
            self._themes = updated

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        """Export both mappings as plain lists (YAML/JSON friendly)."""
        return {
            "expansions": {k: list(v) for k, v in self._expansions.items()},
            "themes": {k: list(v) for k, v in self._themes.items()},
        }
