"""Built-in actions and the shortcut bindings every editor starts with."""

from __future__ import annotations

from typing import Iterable, Sequence

from markdd_engine.actions import editing

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="tab", handler=editing.indent, description="Indent caret or block"),
    ActionRef(
        id="enter",
        handler=editing.newline,
        description="Newline with list continuation",
    ),
    ActionRef(id="insert", handler=editing.insert_text, description="Insert text"),
    ActionRef(
        id="backspace",
        handler=editing.delete_backward,
        description="Delete before the caret",
    ),
    ActionRef(
        id="delete",
        handler=editing.delete_forward,
        description="Delete after the caret",
    ),
    ActionRef(id="undo", handler=editing.undo, description="Undo"),
    ActionRef(id="redo", handler=editing.redo, description="Redo"),
    ActionRef(id="save", handler=editing.request_save, description="Save file"),
    ActionRef(id="find", handler=editing.request_find, description="Find"),
    ActionRef(id="replace", handler=editing.request_find, description="Replace"),
    ActionRef(
        id="toggle_bold", handler=editing.toggle_markup, description="Toggle bold"
    ),
    ActionRef(
        id="toggle_italic",
        handler=editing.toggle_markup,
        description="Toggle italic",
    ),
    ActionRef(
        id="toggle_highlight",
        handler=editing.toggle_markup,
        description="Toggle highlight",
    ),
    ActionRef(
        id="toggle_strikethrough",
        handler=editing.toggle_markup,
        description="Toggle strikethrough",
    ),
)

_CHORDS: tuple[tuple[str, str, str], ...] = (
    ("editor.save", "ctrl+s", "save"),
    ("editor.undo", "ctrl+z", "undo"),
    ("editor.redo", "ctrl+shift+z", "redo"),
    ("editor.redo_alt", "ctrl+y", "redo"),
    ("editor.bold", "ctrl+b", "toggle_bold"),
    ("editor.italic", "ctrl+i", "toggle_italic"),
    ("editor.highlight", "ctrl+u", "toggle_highlight"),
    ("editor.strikethrough", "alt+ctrl+s", "toggle_strikethrough"),
    ("editor.find", "ctrl+f", "find"),
    ("editor.replace", "ctrl+h", "replace"),
    ("editor.tab", "tab", "tab"),
    ("editor.enter", "enter", "enter"),
    ("editor.backspace", "backspace", "backspace"),
    ("editor.delete", "delete", "delete"),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(id=binding_id, stroke=KeyStroke.parse(chord), action_id=action_id)
    for binding_id, chord, action_id in _CHORDS
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions plus the selected default bindings."""

    include = set(include_bindings) if include_bindings else None
    exclude = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if include is not None and binding.id not in include:
            continue
        if binding.id in exclude:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS"]
