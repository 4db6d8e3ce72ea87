"""Enter handling: list continuation, list termination and indent carry-over."""

from __future__ import annotations

import re
from typing import Optional

from markdd_engine.selection import SelectionRange

from .edits import EditInstruction, line_end, line_start

LIST_MARKER_RE = re.compile(r"^([ \t]*)([*+-]|\d+\.) ")
INDENT_RE = re.compile(r"^[ \t]*")


def enter_instruction(
    content: str, selection: SelectionRange
) -> Optional[EditInstruction]:
    """Return the edit for Enter, or ``None`` when a plain newline will do."""

    start = line_start(content, selection.start)
    before_caret = content[start : selection.start]
    indent = INDENT_RE.match(before_caret).group(0)

    match = LIST_MARKER_RE.match(before_caret)
    if match is None:
        if indent:
            return EditInstruction.at_selection(selection, "\n" + indent)
        return None

    leading, marker = match.groups()
    end = max(line_end(content, selection.start), selection.end)
    if content[start:end].strip() == marker:
        # Empty item: drop the marker and stay on the now blank line.
        return EditInstruction.replace(start, end, "")

    if marker.endswith("."):
        continuation = f"{int(marker[:-1]) + 1}. "
    else:
        continuation = f"{marker} "
    return EditInstruction.at_selection(selection, "\n" + leading + continuation)


__all__ = ["enter_instruction", "LIST_MARKER_RE"]
