"""Hybrid search configuration.

These settings control how candidates returned by the vector store are
re-ranked with keyword signals before being shown to the user.
"""

# =============================================================================
# Candidate Pool
# =============================================================================
# The vector store truncates results by similarity alone. Keyword boosts can
# promote a candidate that similarity ranked lower, so the pool handed to the
# ranker is larger than the page requested: max(top_k * factor, minimum).

OVER_FETCH_FACTOR = 3
MIN_CANDIDATES = 20
DEFAULT_TOP_K = 5

# =============================================================================
# Keyword Boosts
# =============================================================================
# Every expanded query term found in a candidate adds a fixed amount to its
# vector similarity. Title hits weigh more than content hits. Boosts add up
# per term and are not capped.

TITLE_BOOST = 0.3
CONTENT_BOOST = 0.1

# =============================================================================
# Display Defaults
# =============================================================================

DEFAULT_TITLE = "无标题"
