"""Find/replace session bound to a text buffer."""

from __future__ import annotations

from typing import Optional

from markdd_engine.buffer import TextBuffer
from markdd_engine.runtime import telemetry
from markdd_engine.selection import SelectionRange

from .query import SearchMatch, SearchQuery, find_matches


class SearchSession:
    """Tracks matches for one query and walks them in the buffer.

    Navigation selects the current match in the buffer. Replacements go
    through the buffer's edit path so each one is a single undo step.
    """

    def __init__(self, buffer: TextBuffer, query: SearchQuery) -> None:
        self.buffer = buffer
        self.query = query
        self.matches: list[SearchMatch] = []
        self.current: int = -1
        self.refresh()

    @property
    def current_match(self) -> Optional[SearchMatch]:
        if 0 <= self.current < len(self.matches):
            return self.matches[self.current]
        return None

    def refresh(self) -> list[SearchMatch]:
        self.matches = find_matches(self.buffer.content, self.query)
        caret = self.buffer.selection.start
        self.current = next(
            (i for i, match in enumerate(self.matches) if match.start >= caret),
            0 if self.matches else -1,
        )
        return self.matches

    def find_next(self) -> Optional[SearchMatch]:
        if not self.matches:
            return None
        selected = self.current_match
        at_match = selected is not None and self.buffer.selection == SelectionRange(
            selected.start, selected.end
        )
        if at_match:
            self.current = (self.current + 1) % len(self.matches)
        return self._select_current()

    def find_previous(self) -> Optional[SearchMatch]:
        if not self.matches:
            return None
        self.current = (
            len(self.matches) - 1 if self.current <= 0 else self.current - 1
        )
        return self._select_current()

    def replace_current(self, replacement: str) -> Optional[SearchMatch]:
        """Replace the current match and return the next one, if any."""

        match = self.current_match
        if match is None:
            return None
        found = self.query.compile().match(self.buffer.content, match.start)
        text = self.query.expand(found, replacement) if found else replacement
        self.buffer.replace_range(match.start, match.end, text, label="replace_match")
        self.refresh()
        return self.current_match

    def replace_all(self, replacement: str) -> int:
        if not self.query.pattern:
            return 0
        pattern = self.query.compile()
        content, count = pattern.subn(
            lambda m: self.query.expand(m, replacement), self.buffer.content
        )
        if count:
            self.buffer.replace_range(
                0, len(self.buffer.content), content, label="replace_all"
            )
        telemetry.record_event(
            "search.replace_all",
            data={"buffer": self.buffer.name, "count": count},
        )
        self.refresh()
        return count

    def _select_current(self) -> Optional[SearchMatch]:
        match = self.current_match
        if match is not None:
            self.buffer.select(match.start, match.end)
        return match


__all__ = ["SearchSession"]
