"""Idempotent inline-markup toggles (bold, italic and friends)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from markdd_engine.selection import SelectionRange

from .edits import EditInstruction


@dataclass(frozen=True, slots=True)
class InlineMarker:
    """Delimiter wrapped around a selection.

    ``guard`` is a longer delimiter sharing this one's prefix; a selection
    wrapped in exactly the guard belongs to the other marker and is wrapped
    again rather than unwrapped.
    """

    name: str
    delimiter: str
    placeholder: str
    guard: Optional[str] = None

    def wrap(self, text: str) -> str:
        return f"{self.delimiter}{text}{self.delimiter}"

    def is_wrapped(self, text: str) -> bool:
        # Text made only of delimiter characters (``"**"``) is always wrapped,
        # never stripped down to nothing.
        if len(text) <= 2 * len(self.delimiter):
            return False
        if self._guarded(text):
            return False
        return text.startswith(self.delimiter) and text.endswith(self.delimiter)

    def _guarded(self, text: str) -> bool:
        guard = self.guard
        if not guard or not (text.startswith(guard) and text.endswith(guard)):
            return False
        # ``***x***`` is italic around bold, not bare bold.
        return not (
            text.startswith(guard + self.delimiter)
            and text.endswith(self.delimiter + guard)
        )

    def unwrap(self, text: str) -> str:
        size = len(self.delimiter)
        return text[size:-size]


BOLD = InlineMarker("bold", "**", "bold text")
ITALIC = InlineMarker("italic", "*", "italic text", guard="**")
HIGHLIGHT = InlineMarker("highlight", "==", "highlighted text")
STRIKETHROUGH = InlineMarker("strikethrough", "~~", "strikethrough text")
SUPERSCRIPT = InlineMarker("superscript", "^", "superscript")
SUBSCRIPT = InlineMarker("subscript", "~", "subscript", guard="~~")

MARKERS = {
    marker.name: marker
    for marker in (BOLD, ITALIC, HIGHLIGHT, STRIKETHROUGH, SUPERSCRIPT, SUBSCRIPT)
}


def toggle_instruction(
    content: str, selection: SelectionRange, marker: InlineMarker
) -> EditInstruction:
    selected = selection.text_in(content)
    if not selected:
        return EditInstruction.at_selection(selection, marker.wrap(marker.placeholder))
    if marker.is_wrapped(selected):
        replacement = marker.unwrap(selected)
    else:
        replacement = marker.wrap(selected)
    return EditInstruction.at_selection(selection, replacement, select_inserted=True)


__all__ = [
    "InlineMarker",
    "MARKERS",
    "BOLD",
    "ITALIC",
    "HIGHLIGHT",
    "STRIKETHROUGH",
    "SUPERSCRIPT",
    "SUBSCRIPT",
    "toggle_instruction",
]
