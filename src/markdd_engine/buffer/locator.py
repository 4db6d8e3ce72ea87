"""Offset to line/column conversion and status-bar statistics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CursorPosition:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class DocumentStats:
    words: int
    characters: int
    lines: int
    position: CursorPosition


def _clamp(content: str, offset: int) -> int:
    return min(max(0, offset), len(content))


def locate(content: str, offset: int) -> CursorPosition:
    """Return the 1-based ``(line, column)`` of ``offset`` in ``content``."""

    offset = _clamp(content, offset)
    line = content.count("\n", 0, offset) + 1
    column = offset - content.rfind("\n", 0, offset)
    return CursorPosition(line=line, column=column)


def offset_for(content: str, line: int, column: int) -> int:
    """Inverse of :func:`locate`; positions past a line end clamp to it."""

    if line < 1:
        return 0
    start = 0
    for _ in range(line - 1):
        newline = content.find("\n", start)
        if newline == -1:
            return len(content)
        start = newline + 1
    line_end = content.find("\n", start)
    if line_end == -1:
        line_end = len(content)
    return min(start + max(0, column - 1), line_end)


def word_count(content: str) -> int:
    return len(content.split())


def document_stats(content: str, offset: int = 0) -> DocumentStats:
    return DocumentStats(
        words=word_count(content),
        characters=len(content),
        lines=content.count("\n") + 1,
        position=locate(content, offset),
    )


__all__ = [
    "CursorPosition",
    "DocumentStats",
    "document_stats",
    "locate",
    "offset_for",
    "word_count",
]
