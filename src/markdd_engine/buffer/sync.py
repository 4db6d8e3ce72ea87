"""Boundary types exchanged with hosts and persistence collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Optional, Protocol

from markdd_engine.selection import SelectionRange


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    selection: SelectionRange
    current_file: Optional[str]
    is_modified: bool
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SaveResult:
    success: bool
    file_path: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, file_path: str) -> "SaveResult":
        return cls(success=True, file_path=file_path)

    @classmethod
    def failed(cls, error: str) -> "SaveResult":
        return cls(success=False, error=error)


class SaveCollaborator(Protocol):
    """Persists buffer content; implemented by the host application."""

    def save(
        self, current_file: Optional[str], content: str
    ) -> Awaitable[SaveResult]:
        """Write ``content`` and report where it landed."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer something that is not text."""

    def __init__(self, message: str, *, value: object | None = None) -> None:
        super().__init__(message)
        self.value = value


class BufferReentrancyError(RuntimeError):
    """Raised when a change observer tries to mutate the buffer it observes."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"'{operation}' called from inside a buffer notification handler"
        )
        self.operation = operation


__all__ = [
    "BufferMirror",
    "BufferReentrancyError",
    "BufferValidationError",
    "SaveCollaborator",
    "SaveResult",
]
