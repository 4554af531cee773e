"""Result summarization configuration."""

# =============================================================================
# Prompt Filtering
# =============================================================================
# Only results scoring at least RELEVANCE_THRESHOLD are enumerated in the
# summary prompt. When nothing passes, the best FALLBACK_COUNT results are
# used instead so the model always has something to work from.

RELEVANCE_THRESHOLD = 2.0
FALLBACK_COUNT = 3
CONTENT_MAX_CHARS = 500

# =============================================================================
# Generation Defaults
# =============================================================================

SUMMARY_MAX_TOKENS = 2000
SUMMARY_TEMPERATURE = 0.3

# =============================================================================
# Canned Messages
# =============================================================================

NO_RESULTS_MESSAGE = "没有找到相关内容，暂时无法生成总结。请尝试换个关键词搜索。"
SUMMARY_UNAVAILABLE_MESSAGE = "AI 总结暂时不可用，以下为搜索结果。"
