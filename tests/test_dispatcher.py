from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from markdd_engine.actions import ActionResult, EditorContext
from markdd_engine.buffer import SaveResult, TextBuffer
from markdd_engine.input import InputDispatcher, KeyAction, KeyInput
from markdd_engine.keymaps import ActionRef, Binding, WhenClause
from markdd_engine.selection import SelectionRange


class MemoryCollaborator:
    def __init__(self) -> None:
        self.saved: Optional[str] = None

    async def save(self, current_file: Optional[str], content: str) -> SaveResult:
        self.saved = content
        return SaveResult.ok(current_file or "memory.md")


def make_dispatcher(text: str = "", caret: Optional[int] = None) -> InputDispatcher:
    buffer = TextBuffer.from_text(text)
    buffer.select(len(text) if caret is None else caret)
    return InputDispatcher(buffer)


def test_printable_keys_insert_text() -> None:
    dispatcher = make_dispatcher()

    for char in "hi!":
        dispatcher.handle_key(KeyInput(key=char, text=char))

    assert dispatcher.buffer.content == "hi!"


def test_enter_key_continues_list() -> None:
    dispatcher = make_dispatcher("1. item")

    result = dispatcher.handle_key(KeyInput(key="enter"))

    assert result.consumed
    assert result.event is not None
    assert dispatcher.buffer.content == "1. item\n2. "


def test_tab_key_indents() -> None:
    dispatcher = make_dispatcher("x", caret=0)

    dispatcher.handle_key(KeyInput(key="tab", text="\t"))

    assert dispatcher.buffer.content == "    x"


def test_command_chord_is_not_inserted() -> None:
    dispatcher = make_dispatcher("abc")

    result = dispatcher.handle_key(KeyInput(key="k", modifiers=("ctrl",), text="k"))

    assert result == ActionResult(consumed=False, status="unbound", message="ctrl+k")
    assert dispatcher.buffer.content == "abc"


def test_meta_chord_maps_to_ctrl_binding() -> None:
    dispatcher = make_dispatcher("")
    dispatcher.handle_key(KeyInput(key="a", text="a"))

    result = dispatcher.handle_key(KeyInput(key="z", modifiers=("meta",)))

    assert result.status == "undo"
    assert dispatcher.buffer.content == ""


def test_redo_bindings() -> None:
    dispatcher = make_dispatcher("")
    dispatcher.handle_key(KeyInput(key="a", text="a"))
    dispatcher.apply(KeyAction("undo"))

    result = dispatcher.handle_key(KeyInput(key="y", modifiers=("ctrl",)))

    assert result.status == "redo"
    assert dispatcher.buffer.content == "a"


def test_undo_at_boundary_is_noop() -> None:
    dispatcher = make_dispatcher("text")

    result = dispatcher.apply(KeyAction("undo"))

    assert result.consumed
    assert result.status == "noop"
    assert result.message == "nothing_to_undo"


def test_bold_shortcut_toggles_selection() -> None:
    dispatcher = make_dispatcher("word")
    dispatcher.buffer.select(0, 4)

    result = dispatcher.handle_key(KeyInput(key="b", modifiers=("ctrl",)))

    assert result.status == "toggle_bold"
    assert dispatcher.buffer.content == "**word**"


def test_strikethrough_shortcut() -> None:
    dispatcher = make_dispatcher("gone")
    dispatcher.buffer.select(0, 4)

    dispatcher.handle_key(KeyInput(key="s", modifiers=("ctrl", "alt")))

    assert dispatcher.buffer.content == "~~gone~~"


def test_backspace_at_start_is_noop() -> None:
    dispatcher = make_dispatcher("abc", caret=0)

    result = dispatcher.handle_key(KeyInput(key="backspace"))

    assert result.status == "noop"
    assert dispatcher.buffer.content == "abc"


def test_save_shortcut_requests_save_from_host() -> None:
    dispatcher = make_dispatcher("draft")
    dispatcher.handle_key(KeyInput(key="!", text="!"))

    result = dispatcher.handle_key(KeyInput(key="s", modifiers=("ctrl",)))
    assert result.status == "save_requested"
    assert dispatcher.buffer.is_modified

    collaborator = MemoryCollaborator()
    saved = asyncio.run(dispatcher.save(collaborator))

    assert saved.success
    assert collaborator.saved == "draft!"
    assert not dispatcher.buffer.is_modified
    assert dispatcher.buffer.current_file == "memory.md"


def test_find_request_carries_selected_text() -> None:
    dispatcher = make_dispatcher("needle in hay")
    dispatcher.buffer.select(0, 6)

    find = dispatcher.handle_key(KeyInput(key="f", modifiers=("ctrl",)))
    replace = dispatcher.apply(KeyAction("replace"))

    assert (find.status, find.message) == ("find_requested", "needle")
    assert replace.status == "replace_requested"


def test_insert_action_requires_text() -> None:
    with pytest.raises(ValueError):
        KeyAction("insert")
    with pytest.raises(ValueError):
        KeyAction("explode")  # type: ignore[arg-type]


def test_flags_gate_custom_bindings() -> None:
    dispatcher = make_dispatcher("abc")
    calls: list[str] = []

    def shout(context: EditorContext, action: KeyAction) -> ActionResult:
        calls.append(context.buffer.get_selected_text())
        return ActionResult(consumed=True, status="shout")

    registry = dispatcher.keymap_registry
    registry.register_action(ActionRef(id="shout", handler=shout))
    registry.register_binding(
        Binding(
            id="custom.shout",
            stroke="ctrl+k",
            action_id="shout",
            when=(WhenClause("has_selection"),),
        )
    )

    missed = dispatcher.handle_key(KeyInput(key="k", modifiers=("ctrl",)))
    dispatcher.buffer.select(0, 2)
    hit = dispatcher.handle_key(KeyInput(key="k", modifiers=("ctrl",)))

    assert missed.status == "unbound"
    assert hit.status == "shout"
    assert calls == ["ab"]


def test_extra_flags_reach_when_clauses() -> None:
    dispatcher = make_dispatcher("abc")
    dispatcher.set_flag("preview_open", True)

    assert dispatcher.context.flags()["preview_open"] is True
    assert dispatcher.context.flags()["has_selection"] is False


def test_caret_stays_clamped_after_edits() -> None:
    dispatcher = make_dispatcher("abc")

    dispatcher.handle_key(KeyInput(key="backspace"))
    dispatcher.handle_key(KeyInput(key="delete"))

    assert dispatcher.buffer.selection == SelectionRange.caret(2)
    assert dispatcher.buffer.content == "ab"
