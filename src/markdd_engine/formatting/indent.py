"""Tab handling: caret indentation and block indentation."""

from __future__ import annotations

from markdd_engine.selection import SelectionRange

from .edits import EditInstruction, line_end, line_start

INDENT_UNIT = "    "


def tab_instruction(
    content: str, selection: SelectionRange, indent_unit: str = INDENT_UNIT
) -> EditInstruction:
    if selection.is_caret:
        return EditInstruction.at_selection(selection, indent_unit)

    block_start = line_start(content, selection.start)
    # A range ending right after a newline does not touch the following line.
    last = max(selection.start, selection.end - 1)
    block_end = line_end(content, last)

    lines = content[block_start:block_end].split("\n")
    indented = "\n".join(indent_unit + line for line in lines)
    return EditInstruction.replace(
        block_start, block_end, indented, select_inserted=True
    )


__all__ = ["tab_instruction", "INDENT_UNIT"]
