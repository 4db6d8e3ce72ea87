"""Pure formatting functions computing edits for Tab, Enter and markup actions."""

from . import templates
from .edits import EditInstruction
from .indent import INDENT_UNIT, tab_instruction
from .inline import (
    BOLD,
    HIGHLIGHT,
    ITALIC,
    MARKERS,
    STRIKETHROUGH,
    SUBSCRIPT,
    SUPERSCRIPT,
    InlineMarker,
    toggle_instruction,
)
from .lists import LIST_MARKER_RE, enter_instruction

__all__ = [
    "EditInstruction",
    "INDENT_UNIT",
    "InlineMarker",
    "LIST_MARKER_RE",
    "MARKERS",
    "BOLD",
    "ITALIC",
    "HIGHLIGHT",
    "STRIKETHROUGH",
    "SUPERSCRIPT",
    "SUBSCRIPT",
    "enter_instruction",
    "tab_instruction",
    "templates",
    "toggle_instruction",
]
