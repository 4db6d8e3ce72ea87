"""Text buffer, bounded history and the types they exchange with hosts."""

from markdd_engine.selection import SelectionRange, clamp_selection

from .buffer import TextBuffer, Transaction
from .events import ChangeEvent, ChangeNotifier
from .history import HistorySnapshot, HistoryStore
from .locator import CursorPosition, DocumentStats, document_stats, locate, offset_for
from .sync import (
    BufferMirror,
    BufferReentrancyError,
    BufferValidationError,
    SaveCollaborator,
    SaveResult,
)

__all__ = [
    "TextBuffer",
    "Transaction",
    "SelectionRange",
    "clamp_selection",
    "HistorySnapshot",
    "HistoryStore",
    "ChangeEvent",
    "ChangeNotifier",
    "CursorPosition",
    "DocumentStats",
    "document_stats",
    "locate",
    "offset_for",
    "BufferMirror",
    "BufferReentrancyError",
    "BufferValidationError",
    "SaveCollaborator",
    "SaveResult",
]
