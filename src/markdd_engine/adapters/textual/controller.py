"""Textual-facing controller that wires the input dispatcher into UI callbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from markdd_engine.actions import ActionResult, KeyInput
from markdd_engine.buffer import (
    BufferMirror,
    ChangeEvent,
    document_stats,
    locate,
    offset_for,
)
from markdd_engine.input import InputDispatcher

NAVIGATION_KEYS = frozenset({"left", "right", "up", "down", "home", "end"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


def split_textual_key(key: str) -> tuple[str, tuple[str, ...]]:
    """Split Textual's ``"ctrl+shift+z"`` key names into key and modifiers."""

    *modifiers, name = key.split("+")
    if not name:
        return "+", tuple(mod for mod in modifiers if mod)
    return name, tuple(modifiers)


def format_status(mirror: BufferMirror) -> str:
    """Status bar text: file name, modified marker, caret position and counts."""

    stats = document_stats(mirror.text, mirror.selection.start)
    name = os.path.basename(mirror.current_file) if mirror.current_file else "Untitled"
    marker = " (modified)" if mirror.is_modified else ""
    return (
        f"{name}{marker}  Ln {stats.position.line}, Col {stats.position.column}  "
        f"{stats.words} words  {stats.characters} characters"
    )


class TextualEditorAdapter:
    """Bridges an InputDispatcher and buffer notifications to Textual hooks."""

    def __init__(self, dispatcher: InputDispatcher, hooks: TextualUIHooks) -> None:
        self.dispatcher = dispatcher
        self.hooks = hooks
        buffer = dispatcher.buffer
        self._unsubscribers = [
            buffer.subscribe(self._on_change),
            buffer.subscribe(self._on_selection, event="selection"),
        ]
        self._refresh()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ActionResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        name, parsed = split_textual_key(key)
        normalized = tuple(
            dict.fromkeys(str(mod).lower() for mod in (*parsed, *modifiers))
        )
        self._log_state("key ->", key=key, text=text, mods=normalized)
        if name in NAVIGATION_KEYS and not ({"ctrl", "alt"} & set(normalized)):
            result = self._navigate(name, extend="shift" in normalized)
        else:
            result = self.dispatcher.handle_key(
                KeyInput(key=name, modifiers=normalized, text=text)
            )
        self._after_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def _navigate(self, key: str, *, extend: bool) -> ActionResult:
        buffer = self.dispatcher.buffer
        content = buffer.content
        selection = buffer.selection
        anchor, head = selection.start, selection.end
        if not extend and not selection.is_caret and key in {"left", "right"}:
            target = anchor if key == "left" else head
            buffer.select(target)
            return ActionResult(consumed=True, status="moved")

        position = locate(content, head)
        if key == "left":
            target = head - 1
        elif key == "right":
            target = head + 1
        elif key == "up":
            target = offset_for(content, position.line - 1, position.column)
        elif key == "down":
            if position.line > content.count("\n"):
                target = len(content)
            else:
                target = offset_for(content, position.line + 1, position.column)
        elif key == "home":
            target = offset_for(content, position.line, 1)
        else:
            target = offset_for(content, position.line, len(content) + 1)

        buffer.select(anchor if extend else target, target)
        return ActionResult(consumed=True, status="moved")

    def _after_result(self, result: ActionResult) -> None:
        if result.status.endswith("_requested"):
            self.hooks.handle_event(result.status, result.message)
        elif result.message:
            self.hooks.update_status(result.message)

    def _on_change(self, payload: object) -> None:
        if isinstance(payload, ChangeEvent):
            self._log_state("event ->", event=payload.reason)
            self.hooks.handle_event(payload.reason, payload)
        self._refresh()

    def _on_selection(self, payload: object) -> None:
        self._refresh()

    def _refresh(self) -> None:
        mirror = self.dispatcher.buffer.mirror()
        self.hooks.update_buffer(mirror)
        self.hooks.update_status(format_status(mirror))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.dispatcher.buffer
        return {
            "buffer": buffer.name,
            "selection": (buffer.selection.start, buffer.selection.end),
            "modified": buffer.is_modified,
            "history": buffer.history.index,
        }


__all__ = [
    "NAVIGATION_KEYS",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "format_status",
    "split_textual_key",
]
