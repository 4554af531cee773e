"""Query expansion tests."""

from notesearch.keywords.catalog import KeywordCatalog
from notesearch.keywords.expander import KeywordExpander


def test_expand_includes_query_first(catalog):
    terms = KeywordExpander(catalog).expand("悉尼 买手店")
    assert terms[0] == "悉尼 买手店"


def test_expand_adds_seed_expansions(catalog):
    terms = KeywordExpander(catalog).expand("买手店")
    assert "精品店" in terms
    assert "购物" in terms


def test_expand_unknown_query_returns_only_query(catalog):
    assert KeywordExpander(catalog).expand("火锅 推荐") == ["火锅 推荐"]


def test_expand_collects_every_seed_word(catalog):
    terms = KeywordExpander(catalog).expand("悉尼 咖啡")
    assert terms == ["悉尼 咖啡", "sydney", "咖啡馆", "手冲"]


def test_expand_drops_duplicates():
    catalog = KeywordCatalog(expansions={"a": ["x", "y"], "b": ["y", "z"]})
    assert KeywordExpander(catalog).expand("a b") == ["a b", "x", "y", "z"]


def test_expand_does_not_repeat_query_when_it_is_an_expansion():
    catalog = KeywordCatalog(expansions={"咖啡": ["咖啡", "手冲"]})
    assert KeywordExpander(catalog).expand("咖啡") == ["咖啡", "手冲"]


def test_expand_is_stable_across_calls(catalog):
    expander = KeywordExpander(catalog)
    assert expander.expand("悉尼 买手店") == expander.expand("悉尼 买手店")


def test_expand_sees_catalog_mutations(catalog):
    expander = KeywordExpander(catalog)
    catalog.add_expansion("火锅", ["麻辣"])
    assert "麻辣" in expander.expand("火锅")
    catalog.remove_expansion("火锅")
    assert expander.expand("火锅") == ["火锅"]


def test_seed_match_is_exact_word(catalog):
    """A seed embedded in a longer word is not expanded."""
    assert KeywordExpander(catalog).expand("悉尼买手店") == ["悉尼买手店"]
