from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from markdd_engine.buffer import (
    BufferReentrancyError,
    BufferValidationError,
    ChangeEvent,
    SaveResult,
    TextBuffer,
)
from markdd_engine.runtime.settings import EditorSettings
from markdd_engine.selection import SelectionRange


class RecordingCollaborator:
    def __init__(self, result: Optional[SaveResult] = None) -> None:
        self.result = result
        self.calls: List[tuple[Optional[str], str]] = []

    async def save(self, current_file: Optional[str], content: str) -> SaveResult:
        self.calls.append((current_file, content))
        if self.result is not None:
            return self.result
        return SaveResult.ok(current_file or "untitled.md")


class GatedCollaborator(RecordingCollaborator):
    release: Optional[asyncio.Event] = None

    async def save(self, current_file: Optional[str], content: str) -> SaveResult:
        self.calls.append((current_file, content))
        assert self.release is not None
        await self.release.wait()
        return SaveResult.ok(current_file or "untitled.md")


def make_buffer(text: str = "", *, path: Optional[str] = None) -> TextBuffer:
    buffer = TextBuffer(name="test")
    buffer.open_file(path, text)
    return buffer


def collect(buffer: TextBuffer) -> List[ChangeEvent]:
    events: List[ChangeEvent] = []
    buffer.subscribe(events.append)
    return events


def test_insert_text_replaces_selection_and_moves_caret() -> None:
    buffer = make_buffer("hello world")
    buffer.select(6, 11)

    buffer.insert_text("there")

    assert buffer.content == "hello there"
    assert buffer.selection == SelectionRange.caret(11)
    assert buffer.is_modified


def test_replace_selection_selects_new_text() -> None:
    buffer = make_buffer("abc")
    buffer.select(1, 2)

    buffer.replace_selection("XYZ")

    assert buffer.content == "aXYZc"
    assert buffer.get_selected_text() == "XYZ"


def test_selected_text_is_empty_for_caret() -> None:
    buffer = make_buffer("abc")
    buffer.select(2)

    assert buffer.get_selected_text() == ""


def test_select_clamps_out_of_range_offsets() -> None:
    buffer = make_buffer("abc")

    selection = buffer.select(-4, 99)

    assert selection == SelectionRange(0, 3)


def test_replace_range_clamps_offsets() -> None:
    buffer = make_buffer("abc")

    buffer.replace_range(2, 50, "!")

    assert buffer.content == "ab!"


def test_change_notification_payload() -> None:
    buffer = make_buffer("", path="notes.md")
    events = collect(buffer)

    buffer.insert_text("x")

    assert events == [
        ChangeEvent(
            content="x", is_modified=True, current_file="notes.md", reason="insert_text"
        )
    ]


def test_subscribers_are_notified_in_order() -> None:
    buffer = make_buffer()
    calls: List[str] = []
    buffer.subscribe(lambda event: calls.append("first"))
    buffer.subscribe(lambda event: calls.append("second"))

    buffer.insert_text("a")

    assert calls == ["first", "second"]


def test_unsubscribe_stops_notifications() -> None:
    buffer = make_buffer()
    events: List[object] = []
    unsubscribe = buffer.subscribe(events.append)

    unsubscribe()
    buffer.insert_text("a")

    assert events == []
    assert buffer.unsubscribe(events.append) is False


def test_select_emits_selection_event_only() -> None:
    buffer = make_buffer("abc")
    changes = collect(buffer)
    selections: List[object] = []
    buffer.subscribe(selections.append, event="selection")

    buffer.select(1, 2)

    assert changes == []
    assert selections == [SelectionRange(1, 2)]
    assert len(buffer.history) == 1


def test_mutation_from_observer_is_rejected() -> None:
    buffer = make_buffer()
    buffer.subscribe(lambda event: buffer.insert_text("again"))

    with pytest.raises(BufferReentrancyError) as info:
        buffer.insert_text("a")

    assert info.value.operation == "insert_text"
    assert buffer.content == "a"


def test_buffer_recovers_after_reentrancy_error() -> None:
    buffer = make_buffer()

    def observer(event: object) -> None:
        buffer.undo()

    unsubscribe = buffer.subscribe(observer)
    with pytest.raises(BufferReentrancyError):
        buffer.insert_text("a")
    unsubscribe()

    buffer.insert_text("b")
    assert buffer.content == "ab"


def test_focus_from_observer_keeps_reentrancy_guard() -> None:
    buffer = make_buffer()

    def observer(event: object) -> None:
        buffer.focus()
        buffer.insert_text("again")

    buffer.subscribe(observer)
    with pytest.raises(BufferReentrancyError):
        buffer.insert_text("a")

    assert buffer.content == "a"


def test_empty_insert_at_caret_is_not_an_edit() -> None:
    buffer = make_buffer("abc", path="a.md")
    buffer.select(1)

    buffer.insert_text("")

    assert buffer.content == "abc"
    assert not buffer.is_modified
    assert len(buffer.history) == 1


def test_editing_back_to_saved_content_reads_clean() -> None:
    buffer = make_buffer("abc", path="a.md")
    buffer.select(3)

    buffer.insert_text("d")
    assert buffer.is_modified
    buffer.delete_backward()

    assert buffer.content == "abc"
    assert not buffer.is_modified


def test_non_string_content_is_rejected() -> None:
    buffer = make_buffer("keep")

    with pytest.raises(BufferValidationError) as info:
        buffer.set_content(42)  # type: ignore[arg-type]

    assert info.value.value == 42
    assert buffer.content == "keep"
    with pytest.raises(BufferValidationError):
        buffer.insert_text(None)  # type: ignore[arg-type]


def test_open_file_resets_state_and_history() -> None:
    buffer = make_buffer("old")
    buffer.insert_text("!")

    buffer.open_file("b.md", "new")

    assert buffer.content == "new"
    assert buffer.current_file == "b.md"
    assert buffer.selection == SelectionRange(0, 0)
    assert not buffer.is_modified
    assert buffer.undo() is False


def test_new_file_clears_identity() -> None:
    buffer = make_buffer("text", path="a.md")
    events = collect(buffer)

    buffer.new_file()

    assert buffer.get_content() == ""
    assert buffer.get_current_file() is None
    assert not buffer.is_file_modified()
    assert events[-1].reason == "new_file"


def test_set_content_drops_file_identity() -> None:
    buffer = make_buffer("text", path="a.md")

    buffer.set_content("other")

    assert buffer.current_file is None
    assert buffer.content == "other"


def test_undo_back_to_saved_content_clears_modified() -> None:
    buffer = make_buffer("a", path="a.md")
    buffer.select(1)
    buffer.insert_text("b")

    buffer.undo()
    assert not buffer.is_modified

    buffer.redo()
    assert buffer.is_modified


def test_undo_notifies_subscribers() -> None:
    buffer = make_buffer("a")
    buffer.insert_text("b")
    events = collect(buffer)

    buffer.undo()

    assert [event.reason for event in events] == ["undo"]


def test_delete_backward_and_forward() -> None:
    buffer = make_buffer("abc")
    buffer.select(1)

    buffer.delete_backward()
    assert buffer.content == "bc"
    assert buffer.delete_backward() is None

    buffer.select(2)
    assert buffer.delete_forward() is None
    buffer.select(0, 1)
    buffer.delete_forward()
    assert buffer.content == "c"


def test_save_success_clears_modified_and_adopts_path() -> None:
    buffer = make_buffer("draft")
    buffer.insert_text("# ")
    collaborator = RecordingCollaborator(SaveResult.ok("/tmp/draft.md"))
    events = collect(buffer)

    result = asyncio.run(buffer.save(collaborator))

    assert result.success
    assert collaborator.calls == [(None, "# draft")]
    assert buffer.current_file == "/tmp/draft.md"
    assert not buffer.is_modified
    assert events[-1].reason == "save"


def test_save_failure_keeps_state() -> None:
    buffer = make_buffer("draft", path="a.md")
    buffer.insert_text("x")
    collaborator = RecordingCollaborator(SaveResult.failed("disk full"))

    result = asyncio.run(buffer.save(collaborator))

    assert not result.success
    assert result.error == "disk full"
    assert buffer.is_modified
    assert buffer.current_file == "a.md"


def test_collaborator_exception_propagates() -> None:
    class Exploding:
        async def save(self, current_file: Optional[str], content: str) -> SaveResult:
            raise OSError("boom")

    buffer = make_buffer("x", path="a.md")

    with pytest.raises(OSError):
        asyncio.run(buffer.save(Exploding()))
    assert buffer.current_file == "a.md"


def test_edit_during_pending_save_persists_stale_snapshot() -> None:
    buffer = make_buffer("v1", path="a.md")
    buffer.select(2)
    buffer.insert_text("+")
    gate = GatedCollaborator()

    async def scenario() -> SaveResult:
        gate.release = asyncio.Event()
        task = asyncio.create_task(buffer.save(gate))
        await asyncio.sleep(0)
        buffer.insert_text("!")
        gate.release.set()
        return await task

    result = asyncio.run(scenario())

    assert result.success
    assert gate.calls == [("a.md", "v1+")]
    assert buffer.content == "v1+!"
    assert buffer.is_modified

    buffer.undo()
    assert not buffer.is_modified
    buffer.redo()
    assert buffer.is_modified


def test_settings_control_history_capacity_and_indent() -> None:
    settings = EditorSettings(history_capacity=3, indent_unit="\t")
    buffer = TextBuffer(settings=settings)

    for _ in range(5):
        buffer.indent()

    assert buffer.content == "\t" * 5
    assert len(buffer.history) == 3


def test_stats_and_cursor_position() -> None:
    buffer = make_buffer("one two\nthree")
    buffer.select(10)

    stats = buffer.stats()

    assert (stats.words, stats.characters, stats.lines) == (3, 13, 2)
    assert buffer.cursor_position().line == 2
    assert buffer.cursor_position().column == 3


def test_mirror_reflects_state() -> None:
    buffer = make_buffer("abc", path="a.md")
    buffer.select(1, 2)

    mirror = buffer.mirror(attributes={"theme": "dark"})

    assert mirror.text == "abc"
    assert mirror.selection == SelectionRange(1, 2)
    assert mirror.current_file == "a.md"
    assert mirror.attributes == {"theme": "dark"}


def test_focus_emits_focus_event() -> None:
    buffer = make_buffer()
    focused: List[object] = []
    buffer.subscribe(focused.append, event="focus")

    buffer.focus()

    assert focused == ["test"]
