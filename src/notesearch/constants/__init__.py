"""Configuration constants.

Re-exports all constants for convenient importing:
    from notesearch.constants import TITLE_BOOST, RELEVANCE_THRESHOLD
"""

from notesearch.constants.search import *  # noqa: F403
from notesearch.constants.relevance import *  # noqa: F403
from notesearch.constants.summary import *  # noqa: F403
from notesearch.constants.notes import *  # noqa: F403
from notesearch.constants.llm import *  # noqa: F403
