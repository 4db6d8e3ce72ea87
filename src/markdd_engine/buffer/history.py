"""Bounded undo/redo history of full-content snapshots."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, Optional

from markdd_engine.selection import SelectionRange

DEFAULT_CAPACITY = 100


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    content: str
    selection_start: int
    selection_end: int
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def capture(cls, content: str, selection: SelectionRange) -> "HistorySnapshot":
        return cls(
            content=content,
            selection_start=selection.start,
            selection_end=selection.end,
        )

    @property
    def selection(self) -> SelectionRange:
        return SelectionRange.clamp(
            self.selection_start, self.selection_end, len(self.content)
        )


class HistoryStore:
    """Linear history with a cursor pointing at the materialized snapshot.

    Recording after an undo drops the redo branch. The backing deque is
    created with ``maxlen=capacity`` so appending past capacity evicts the
    oldest snapshot; the cursor always lands on the newest entry after a
    record.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[HistorySnapshot] = deque(maxlen=capacity)
        self._index: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistorySnapshot]:
        return iter(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[HistorySnapshot]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    def record(self, snapshot: HistorySnapshot) -> None:
        while len(self._entries) > self._index + 1:
            self._entries.pop()
        self._entries.append(snapshot)
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[HistorySnapshot]:
        if not self.can_undo():
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[HistorySnapshot]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1


__all__ = ["HistorySnapshot", "HistoryStore", "DEFAULT_CAPACITY"]
