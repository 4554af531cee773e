"""Summarization of ranked search results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from notesearch.constants.summary import (
    CONTENT_MAX_CHARS,
    FALLBACK_COUNT,
    NO_RESULTS_MESSAGE,
    RELEVANCE_THRESHOLD,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)
from notesearch.search.prompts import SUMMARY_SYSTEM_PROMPT, get_summary_prompt
from notesearch.search.relevance import RelevanceScorer

if TYPE_CHECKING:
    from notesearch.llm.client import LLMClient

logger = logging.getLogger(__name__)


@dataclass
class PreparedSummary:
    """Filtered results and prompt, or a canned message when nothing to summarize."""

    included: list[dict[str, Any]] = field(default_factory=list)
    prompt: str | None = None
    message: str | None = None

    @property
    def short_circuited(self) -> bool:
        return self.prompt is None


@dataclass
class SummaryOptions:
    """Per-request overrides for summary generation."""

    max_tokens: int | None = None
    temperature: float | None = None
    model: str | None = None


class ResultSummarizer:
    """Filters results by relevance and asks the LLM to summarize the rest."""

    def __init__(
        self,
        scorer: RelevanceScorer,
        llm: LLMClient,
        threshold: float = RELEVANCE_THRESHOLD,
        fallback_count: int = FALLBACK_COUNT,
        content_max_chars: int = CONTENT_MAX_CHARS,
        max_tokens: int = SUMMARY_MAX_TOKENS,
        temperature: float = SUMMARY_TEMPERATURE,
    ) -> None:
        """Initialize summarizer.

        Args:
            scorer: Relevance scorer used for pre-filtering.
            llm: Text generation client.
            threshold: Minimum relevance score for a result to be included.
            fallback_count: Results kept when none reach the threshold.
            content_max_chars: Per-result content cap in the prompt.
            max_tokens: Default summary length cap.
            temperature: Default summary temperature.
        """
        self._scorer = scorer
        self._llm = llm
        self._threshold = threshold
        self._fallback_count = fallback_count
        self._content_max_chars = content_max_chars
        self._max_tokens = max_tokens
        self._temperature = temperature

    def prepare(
        self,
        results: list[dict[str, Any]],
        query: str,
        custom_prompt: str | None = None,
    ) -> PreparedSummary:
        """Score, filter and format results into a summary prompt.

        Results are scored on their content alone, sorted by relevance,
        and kept if they reach the threshold. If none do, the best
        ``fallback_count`` are kept. Only an empty input short-circuits.
        """
        scored = []
        for result in results:
            score = self._scorer.score(result.get("content", ""), query)
            scored.append({**result, "relevance_score": score})
        scored.sort(key=lambda r: -r["relevance_score"])

        included = [r for r in scored if r["relevance_score"] >= self._threshold]
        if not included and scored:
            logger.info(
                f"No result reached relevance {self._threshold} for {query!r}; "
                f"using top {self._fallback_count}"
            )
            included = scored[: self._fallback_count]

        if not included:
            return PreparedSummary(message=NO_RESULTS_MESSAGE)

        logger.debug(f"Summarizing {len(included)} of {len(results)} results for {query!r}")
        return PreparedSummary(
            included=included,
            prompt=get_summary_prompt(query, included, self._content_max_chars, custom_prompt),
        )

    async def summarize(
        self,
        results: list[dict[str, Any]],
        query: str,
        custom_prompt: str | None = None,
        options: SummaryOptions | None = None,
    ) -> str:
        """Generate a summary of results, or the canned message if there are none.

        The LLM output is returned unmodified.

        Raises:
            GenerationError: If the LLM call fails.
        """
        prepared = self.prepare(results, query, custom_prompt)
        if prepared.short_circuited:
            return prepared.message or NO_RESULTS_MESSAGE

        options = options or SummaryOptions()
        return await self._llm.generate(
            prepared.prompt or "",
            system_prompt=SUMMARY_SYSTEM_PROMPT,
            temperature=options.temperature
            if options.temperature is not None
            else self._temperature,
            max_tokens=options.max_tokens if options.max_tokens is not None else self._max_tokens,
            model=options.model,
        )
