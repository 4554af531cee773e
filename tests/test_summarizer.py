"""Result summarizer and summary prompt tests."""

from unittest.mock import AsyncMock

import pytest

from notesearch.constants.summary import NO_RESULTS_MESSAGE
from notesearch.keywords.expander import KeywordExpander
from notesearch.keywords.themes import ThemeConflictDetector
from notesearch.llm.client import GenerationError
from notesearch.search.prompts import (
    SUMMARY_SYSTEM_PROMPT,
    format_results_for_summary,
    get_summary_prompt,
)
from notesearch.search.relevance import RelevanceScorer
from notesearch.search.summarizer import ResultSummarizer, SummaryOptions

ON_TOPIC = "悉尼买手店推荐，精品店选品，时尚品牌集合。" * 5
OFF_TOPIC = "Spago意面餐厅美食推荐，菜品丰富。" * 5


def result(title, content, url="https://example.com/n"):
    return {"id": title, "title": title, "content": content, "url": url, "score": 1.0}


@pytest.fixture
def mock_llm():
    llm = AsyncMock()
    llm.generate.return_value = "### 🔍 实用建议总结\n- 去精品店"
    return llm


@pytest.fixture
def summarizer(catalog, mock_llm):
    expander = KeywordExpander(catalog)
    scorer = RelevanceScorer(expander, ThemeConflictDetector(catalog))
    return ResultSummarizer(scorer, mock_llm)


class TestPrepare:
    """Tests for relevance filtering before summarization."""

    def test_keeps_only_results_above_threshold(self, summarizer):
        prepared = summarizer.prepare(
            [result("餐厅", OFF_TOPIC), result("买手店", ON_TOPIC)], "买手店"
        )

        assert [r["title"] for r in prepared.included] == ["买手店"]
        assert prepared.included[0]["relevance_score"] >= 2.0
        assert not prepared.short_circuited

    def test_falls_back_to_top_results_when_none_pass(self, summarizer):
        results = [result(f"餐厅{i}", OFF_TOPIC) for i in range(5)]

        prepared = summarizer.prepare(results, "买手店")

        assert len(prepared.included) == 3
        assert prepared.prompt is not None

    def test_fallback_never_empty_for_non_empty_input(self, summarizer):
        prepared = summarizer.prepare([result("x", "")], "完全无关")

        assert len(prepared.included) == 1

    def test_empty_input_short_circuits(self, summarizer):
        prepared = summarizer.prepare([], "买手店")

        assert prepared.short_circuited
        assert prepared.message == NO_RESULTS_MESSAGE

    def test_included_results_sorted_by_relevance(self, summarizer):
        prepared = summarizer.prepare(
            [result("短", "买手店"), result("长", ON_TOPIC)], "买手店"
        )

        scores = [r["relevance_score"] for r in prepared.included]
        assert scores == sorted(scores, reverse=True)

    def test_title_does_not_count_toward_relevance(self, summarizer):
        body = "今天的行程记录，" * 10
        with_title = summarizer.prepare([result("买手店 精品店 时尚", body)], "买手店")
        without = summarizer.prepare([result("随笔", body)], "买手店")

        assert with_title.included[0]["relevance_score"] == pytest.approx(
            without.included[0]["relevance_score"]
        )

    def test_short_content_penalty_boundary(self, summarizer):
        # 4.0 keyword + 1.5 expansion + 0.3 density, before the length multiplier
        just_short = summarizer.prepare([result("t", "买手店" + "a" * 46)], "买手店")
        long_enough = summarizer.prepare([result("t", "买手店" + "a" * 47)], "买手店")

        assert just_short.included[0]["relevance_score"] == pytest.approx(5.8 * 0.3)
        assert long_enough.included[0]["relevance_score"] == pytest.approx(5.8 * 0.7)


class TestSummarize:
    """Tests for LLM summary generation."""

    async def test_returns_llm_output_unmodified(self, summarizer, mock_llm):
        summary = await summarizer.summarize([result("买手店", ON_TOPIC)], "买手店")

        assert summary == "### 🔍 实用建议总结\n- 去精品店"
        mock_llm.generate.assert_awaited_once()

    async def test_sends_system_prompt_and_defaults(self, summarizer, mock_llm):
        await summarizer.summarize([result("买手店", ON_TOPIC)], "买手店")

        kwargs = mock_llm.generate.call_args.kwargs
        assert kwargs["system_prompt"] == SUMMARY_SYSTEM_PROMPT
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 2000
        assert kwargs["model"] is None

    async def test_options_override_defaults(self, summarizer, mock_llm):
        options = SummaryOptions(max_tokens=500, temperature=0.9, model="qwen-max")

        await summarizer.summarize([result("买手店", ON_TOPIC)], "买手店", options=options)

        kwargs = mock_llm.generate.call_args.kwargs
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.9
        assert kwargs["model"] == "qwen-max"

    async def test_no_results_skips_llm(self, summarizer, mock_llm):
        summary = await summarizer.summarize([], "买手店")

        assert summary == NO_RESULTS_MESSAGE
        mock_llm.generate.assert_not_called()

    async def test_generation_error_propagates(self, summarizer, mock_llm):
        mock_llm.generate.side_effect = GenerationError("boom")

        with pytest.raises(GenerationError):
            await summarizer.summarize([result("买手店", ON_TOPIC)], "买手店")


class TestPrompts:
    """Tests for summary prompt construction."""

    def test_prompt_enumerates_results(self):
        results = [
            {"title": "A", "content": "内容A", "url": "u1", "relevance_score": 3.14159},
            {"title": "B", "content": "内容B", "url": "", "relevance_score": 2.0},
        ]

        text = format_results_for_summary(results, content_max_chars=500)

        assert "【1】A" in text
        assert "【2】B" in text
        assert "来源：u1" in text
        assert "相关性评分：3.14" in text

    def test_long_content_is_truncated(self):
        text = format_results_for_summary(
            [{"title": "A", "content": "字" * 600, "url": "u"}], content_max_chars=500
        )

        assert "字" * 500 + "..." in text
        assert "字" * 501 not in text

    def test_default_prompt_has_section_headers(self):
        prompt = get_summary_prompt("买手店", [result("A", "x")], 500)

        assert "买手店" in prompt
        assert "### 🔍 实用建议总结" in prompt
        assert "### 📝 核心攻略内容" in prompt
        assert "### 💡 经验分享" in prompt

    def test_custom_prompt_replaces_instructions(self):
        prompt = get_summary_prompt(
            "买手店", [result("A", "x")], 500, custom_prompt="只列出店名"
        )

        assert "只列出店名" in prompt
        assert "### 💡 经验分享" not in prompt
        assert "【1】A" in prompt
        assert "买手店" in prompt
