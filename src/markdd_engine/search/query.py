"""Find queries compiled to regular expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern


class SearchPatternError(ValueError):
    """Raised when a regex query does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid regular expression '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


@dataclass(frozen=True, slots=True)
class SearchMatch:
    start: int
    end: int
    text: str


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Find options; searches are case-insensitive unless asked otherwise."""

    pattern: str
    case_sensitive: bool = False
    whole_word: bool = False
    regex: bool = False

    def compile(self) -> Pattern[str]:
        source = self.pattern if self.regex else re.escape(self.pattern)
        if self.whole_word and not self.regex:
            source = rf"\b{source}\b"
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            return re.compile(source, flags)
        except re.error as exc:
            raise SearchPatternError(self.pattern, str(exc)) from exc

    def expand(self, match: re.Match[str], replacement: str) -> str:
        # Literal queries treat the replacement literally too.
        return match.expand(replacement) if self.regex else replacement


def find_matches(content: str, query: SearchQuery) -> list[SearchMatch]:
    if not query.pattern:
        return []
    return [
        SearchMatch(start=m.start(), end=m.end(), text=m.group(0))
        for m in query.compile().finditer(content)
        if m.end() > m.start()
    ]


__all__ = ["SearchMatch", "SearchPatternError", "SearchQuery", "find_matches"]
