"""Typed key input, logical actions and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Tuple, get_args

from markdd_engine.buffer import ChangeEvent, TextBuffer

ActionKind = Literal[
    "tab",
    "enter",
    "save",
    "undo",
    "redo",
    "toggle_bold",
    "toggle_italic",
    "toggle_highlight",
    "toggle_strikethrough",
    "find",
    "replace",
    "insert",
    "backspace",
    "delete",
]

ACTION_KINDS: Tuple[str, ...] = get_args(ActionKind)


@dataclass(slots=True)
class KeyInput:
    """Normalized key event handed over by a host."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class KeyAction:
    """Logical editor action, independent of the key that produced it."""

    kind: ActionKind
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in ACTION_KINDS:
            raise ValueError(f"Unknown action kind '{self.kind}'")
        if self.kind == "insert" and not self.text:
            raise ValueError("insert actions require text")

    @classmethod
    def insert(cls, text: str) -> "KeyAction":
        return cls("insert", text)


@dataclass(slots=True)
class ActionResult:
    """Outcome of applying an action.

    ``status`` ends in ``_requested`` when the host must finish the work
    (awaiting a save, opening the find panel).
    """

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    event: Optional[ChangeEvent] = None


@dataclass(slots=True)
class EditorContext:
    """Services every action handler can access."""

    buffer: TextBuffer
    extras: Dict[str, object] = field(default_factory=dict)

    def flags(self) -> Mapping[str, bool]:
        flags: Dict[str, bool] = {
            "has_selection": not self.buffer.selection.is_caret,
            "has_file": self.buffer.current_file is not None,
        }
        extra = self.extras.get("keymap_flags")
        if isinstance(extra, dict):
            flags.update({str(k): bool(v) for k, v in extra.items()})
        return flags


__all__ = [
    "ACTION_KINDS",
    "ActionKind",
    "ActionResult",
    "EditorContext",
    "KeyAction",
    "KeyInput",
]
