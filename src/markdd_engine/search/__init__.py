"""Find and replace over a text buffer."""

from .query import SearchMatch, SearchPatternError, SearchQuery, find_matches
from .session import SearchSession

__all__ = [
    "SearchMatch",
    "SearchPatternError",
    "SearchQuery",
    "SearchSession",
    "find_matches",
]
