"""Query expansion from catalog seed terms."""

from notesearch.keywords.catalog import KeywordCatalog


class KeywordExpander:
    """Expands a query into the set of terms searched for in candidates."""

    def __init__(self, catalog: KeywordCatalog) -> None:
        self._catalog = catalog

    def expand(self, query: str) -> list[str]:
        """Return the query plus expansions of every seed word it contains.

        The original query is always the first element. Words are split on
        whitespace and matched against seed terms exactly; unknown words are
        ignored. Duplicates are dropped with first-seen order kept.
        """
        expanded: dict[str, None] = {query: None}
        for word in query.split():
            for term in self._catalog.get_expansions(word):
                expanded.setdefault(term, None)
        return list(expanded)
