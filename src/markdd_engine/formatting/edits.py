"""Edit instructions produced by the formatting functions."""

from __future__ import annotations

from dataclasses import dataclass

from markdd_engine.selection import SelectionRange


@dataclass(frozen=True, slots=True)
class EditInstruction:
    """Replace ``content[start:end]`` with ``text`` and then select ``selection``.

    ``selection`` is expressed in offsets of the edited content.
    """

    start: int
    end: int
    text: str
    selection: SelectionRange

    @classmethod
    def replace(
        cls, start: int, end: int, text: str, *, select_inserted: bool = False
    ) -> "EditInstruction":
        tail = start + len(text)
        if select_inserted:
            return cls(start, end, text, SelectionRange(start, tail))
        return cls(start, end, text, SelectionRange.caret(tail))

    @classmethod
    def at_selection(
        cls, selection: SelectionRange, text: str, *, select_inserted: bool = False
    ) -> "EditInstruction":
        return cls.replace(
            selection.start, selection.end, text, select_inserted=select_inserted
        )

    def apply(self, content: str) -> str:
        return content[: self.start] + self.text + content[self.end :]


def line_start(content: str, offset: int) -> int:
    return content.rfind("\n", 0, offset) + 1


def line_end(content: str, offset: int) -> int:
    end = content.find("\n", offset)
    return len(content) if end == -1 else end


__all__ = ["EditInstruction", "line_start", "line_end"]
