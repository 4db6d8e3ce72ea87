"""Logical editor actions and the handlers that apply them to a buffer."""

from . import editing
from .models import (
    ACTION_KINDS,
    ActionKind,
    ActionResult,
    EditorContext,
    KeyAction,
    KeyInput,
)

__all__ = [
    "ACTION_KINDS",
    "ActionKind",
    "ActionResult",
    "EditorContext",
    "KeyAction",
    "KeyInput",
    "editing",
]
