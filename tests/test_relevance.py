"""Relevance scorer tests."""

import pytest

from notesearch.keywords.catalog import KeywordCatalog
from notesearch.keywords.expander import KeywordExpander
from notesearch.keywords.themes import ThemeConflictDetector
from notesearch.search.relevance import RelevanceScorer

PADDING = " " + "z" * 120


def make_scorer(catalog: KeywordCatalog) -> RelevanceScorer:
    return RelevanceScorer(KeywordExpander(catalog), ThemeConflictDetector(catalog))


@pytest.fixture
def english_scorer():
    return make_scorer(
        KeywordCatalog(
            expansions={"coffee": ["latte"], "tea": ["matcha"]},
            themes={"coffee": ["espresso"], "food": ["pasta"]},
        )
    )


def test_on_theme_content_beats_conflicting_content():
    scorer = make_scorer(KeywordCatalog.default())

    on_theme = scorer.score("悉尼买手店推荐，精品店选品，时尚品牌集合", "买手店")
    off_theme = scorer.score("Spago意面餐厅美食推荐", "买手店")

    assert on_theme > off_theme


def test_keyword_expansion_and_density_add_up(english_scorer):
    # +4 keyword, +1.5 query term, +1.5 "latte", +0.3 one dense token
    score = english_scorer.score("coffee and latte" + PADDING, "coffee")
    assert score == pytest.approx(7.3)


def test_two_character_keyword_scores_lower():
    scorer = make_scorer(KeywordCatalog())
    short = scorer.score("ab" + PADDING, "ab")
    long = scorer.score("abc" + PADDING, "abc")
    # keyword +3 or +4, query term +1.5, dense token +0.3
    assert short == pytest.approx(4.8)
    assert long == pytest.approx(5.8)


def test_theme_conflict_penalizes_keyword_score(english_scorer):
    clean = english_scorer.score("coffee salad" + PADDING, "coffee")
    conflicting = english_scorer.score("coffee pasta" + PADDING, "coffee")

    assert clean == pytest.approx(5.8)
    # keyword score 4 * 0.2, expansions and density unaffected
    assert conflicting == pytest.approx(2.6)


def test_very_short_content_is_penalized(english_scorer):
    assert english_scorer.score("coffee", "coffee") == pytest.approx(5.8 * 0.3)


def test_short_content_is_penalized(english_scorer):
    content = "coffee " + "z" * 70
    assert english_scorer.score(content, "coffee") == pytest.approx(5.8 * 0.7)


def test_no_keyword_match_is_penalized(english_scorer):
    # only the "matcha" expansion hits; no-match and partial-match penalties both apply
    score = english_scorer.score("matcha" + PADDING, "tea")
    assert score == pytest.approx(1.5 * 0.1 * 0.8)


def test_partial_keyword_match_is_penalized(english_scorer):
    score = english_scorer.score("coffee" + PADDING, "coffee tea milk")
    assert score == pytest.approx(4.3 * 0.8)


def test_empty_query_is_neutral(english_scorer):
    assert english_scorer.score("anything at all", "   ") == 1.0


def test_score_is_never_negative(english_scorer):
    for content in ["", "pasta", "coffee pasta espresso", "z" * 500]:
        assert english_scorer.score(content, "coffee") >= 0.0


def test_single_character_words_are_not_keywords():
    scorer = make_scorer(KeywordCatalog())
    # "a" is dropped; only the full query string can still match as a term
    assert scorer.score("b" + PADDING, "a b") == 0.0
