"""Selection ranges expressed as flat offsets into buffer content."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SelectionRange:
    """Half-open ``[start, end)`` span; ``start == end`` is a caret.

    Direct construction only checks ordering. Use :meth:`clamp` whenever the
    offsets come from outside the buffer, so they can never dangle past the
    content.
    """

    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(
                f"invalid selection ({self.start}, {self.end}): "
                "expected 0 <= start <= end"
            )

    @classmethod
    def clamp(cls, start: int, end: int, length: int) -> "SelectionRange":
        limit = max(0, length)
        lo = min(max(0, start), limit)
        hi = min(max(0, end), limit)
        if lo > hi:
            lo, hi = hi, lo
        return cls(lo, hi)

    @classmethod
    def caret(cls, offset: int) -> "SelectionRange":
        return cls(offset, offset)

    @property
    def is_caret(self) -> bool:
        return self.start == self.end

    @property
    def length(self) -> int:
        return self.end - self.start

    def text_in(self, content: str) -> str:
        return content[self.start : self.end]


def clamp_selection(content: str, start: int, end: int) -> SelectionRange:
    return SelectionRange.clamp(start, end, len(content))


__all__ = ["SelectionRange", "clamp_selection"]
