"""Action handlers: each takes the editor context and the triggering action."""

from __future__ import annotations

from typing import Optional

from markdd_engine.buffer import ChangeEvent

from .models import ActionResult, EditorContext, KeyAction


def _edited(event: Optional[ChangeEvent], status: str = "edited") -> ActionResult:
    if event is None:
        return ActionResult(consumed=True, status="noop")
    return ActionResult(consumed=True, status=status, event=event)


def indent(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    return _edited(context.buffer.indent())


def newline(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    return _edited(context.buffer.newline())


def insert_text(context: EditorContext, action: KeyAction) -> ActionResult:
    return _edited(context.buffer.insert_text(action.text or ""))


def delete_backward(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    return _edited(context.buffer.delete_backward())


def delete_forward(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    return _edited(context.buffer.delete_forward())


def undo(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    if context.buffer.undo():
        return ActionResult(consumed=True, status="undo")
    return ActionResult(consumed=True, status="noop", message="nothing_to_undo")


def redo(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    if context.buffer.redo():
        return ActionResult(consumed=True, status="redo")
    return ActionResult(consumed=True, status="noop", message="nothing_to_redo")


def toggle_markup(context: EditorContext, action: KeyAction) -> ActionResult:
    marker = action.kind.removeprefix("toggle_")
    return _edited(context.buffer.toggle(marker), status=action.kind)


def request_save(context: EditorContext, action: KeyAction) -> ActionResult:
    del action
    return ActionResult(
        consumed=True,
        status="save_requested",
        message=context.buffer.current_file,
    )


def request_find(context: EditorContext, action: KeyAction) -> ActionResult:
    # The selected text seeds the host's search field.
    return ActionResult(
        consumed=True,
        status=f"{action.kind}_requested",
        message=context.buffer.get_selected_text() or None,
    )


__all__ = [
    "delete_backward",
    "delete_forward",
    "indent",
    "insert_text",
    "newline",
    "redo",
    "request_find",
    "request_save",
    "toggle_markup",
    "undo",
]
