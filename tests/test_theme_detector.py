"""Theme conflict detection tests."""

from notesearch.keywords.catalog import KeywordCatalog
from notesearch.keywords.themes import ThemeConflictDetector, split_content, tokenize_query


def test_tokenize_query_drops_single_characters():
    assert tokenize_query("悉尼 的 买手店") == ["悉尼", "买手店"]


def test_tokenize_query_splits_on_commas():
    assert tokenize_query("Coffee,拍照，咖啡") == ["coffee", "拍照", "咖啡"]


def test_split_content_lowercases():
    assert split_content("Spago餐厅，意面 Pasta") == ["spago餐厅", "意面", "pasta"]


def test_conflicting_content_is_flagged(catalog):
    result = ThemeConflictDetector(catalog).detect("买手店", "Spago餐厅，意面美食，咖啡馆推荐")

    assert result.has_conflict
    assert result.query_theme == "买手店"
    assert "美食" in result.conflicting_themes
    assert "咖啡" in result.conflicting_themes


def test_on_theme_content_is_not_flagged(catalog):
    result = ThemeConflictDetector(catalog).detect("买手店", "悉尼精品店选品，时尚集合")

    assert not result.has_conflict
    assert result.query_theme == "买手店"
    assert result.conflicting_themes == []


def test_query_without_theme_never_conflicts(catalog):
    result = ThemeConflictDetector(catalog).detect("悉尼 攻略", "餐厅 咖啡馆 意面")

    assert not result.has_conflict
    assert result.query_theme is None


def test_first_theme_word_wins(catalog):
    """Only the first theme named in the query is compared against content."""
    detector = ThemeConflictDetector(catalog)

    result = detector.detect("咖啡 买手店", "精品店 时尚")
    assert result.query_theme == "咖啡"
    assert result.conflicting_themes == ["买手店"]


def test_content_matching_is_case_insensitive():
    catalog = KeywordCatalog(themes={"coffee": ["latte"], "shopping": ["Boutique"]})
    result = ThemeConflictDetector(catalog).detect("Coffee", "BOUTIQUE in town")

    assert result.query_theme == "coffee"
    assert result.conflicting_themes == ["shopping"]


def test_conflicting_themes_follow_catalog_order(catalog):
    result = ThemeConflictDetector(catalog).detect("买手店", "手冲咖啡馆旁的意面餐厅")
    assert result.conflicting_themes == ["美食", "咖啡"]
