"""Relevance scoring weights.

The relevance scorer decides which ranked results are good enough to be
handed to the LLM for summarization. It is intentionally harsher than the
hybrid ranking boosts: dropping a marginal note from a prompt costs little,
while an off-topic note pollutes the generated summary.
"""

# =============================================================================
# Keyword Hits
# =============================================================================
# Query keywords are whitespace/comma separated words longer than one
# character. Longer keywords are more specific and score higher.

LONG_KEYWORD_MIN_LENGTH = 3
LONG_KEYWORD_SCORE = 4.0
SHORT_KEYWORD_SCORE = 3.0
EXPANSION_HIT_SCORE = 1.5
DENSITY_BONUS = 0.3

# Score returned when there is no query to judge against
NEUTRAL_SCORE = 1.0

# =============================================================================
# Penalties
# =============================================================================
# THEME_CONFLICT_PENALTY applies when the content carries vocabulary of a
# theme other than the one the query names. The length penalties discount
# very short notes, which rarely hold usable advice.

THEME_CONFLICT_PENALTY = 0.2
VERY_SHORT_CONTENT_LENGTH = 50
VERY_SHORT_CONTENT_PENALTY = 0.3
SHORT_CONTENT_LENGTH = 100
SHORT_CONTENT_PENALTY = 0.7
NO_MATCH_PENALTY = 0.1
PARTIAL_MATCH_RATIO = 0.5
PARTIAL_MATCH_PENALTY = 0.8
