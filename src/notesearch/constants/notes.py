"""Note storage and indexing constants."""

# =============================================================================
# Import Defaults
# =============================================================================
# Crawler exports sometimes omit the title or author. Missing titles use
# DEFAULT_TITLE from constants.search so search results and stored notes agree.

DEFAULT_AUTHOR = "匿名用户"

# Hashtags are "#" followed by CJK characters, ASCII letters or digits.
TAG_PATTERN = r"#([\u4e00-\u9fa5a-zA-Z0-9]+)"

# =============================================================================
# Indexing
# =============================================================================

# Notes embedded per request; a failed batch is skipped, not retried
INDEX_BATCH_SIZE = 10
