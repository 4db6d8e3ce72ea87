import pytest

from markdd_engine.buffer import HistorySnapshot, HistoryStore, TextBuffer
from markdd_engine.selection import SelectionRange


def make_snapshot(content: str) -> HistorySnapshot:
    return HistorySnapshot.capture(content, SelectionRange.caret(len(content)))


def make_store(*contents: str, capacity: int = 100) -> HistoryStore:
    store = HistoryStore(capacity)
    for content in contents:
        store.record(make_snapshot(content))
    return store


def test_empty_store_has_no_cursor() -> None:
    store = HistoryStore()

    assert store.index == -1
    assert store.current is None
    assert store.undo() is None
    assert store.redo() is None


def test_undo_and_redo_walk_the_cursor() -> None:
    store = make_store("a", "ab", "abc")

    assert store.undo().content == "ab"
    assert store.undo().content == "a"
    assert store.undo() is None
    assert store.redo().content == "ab"
    assert store.index == 1


def test_record_after_undo_discards_redo_branch() -> None:
    store = make_store("a", "ab", "abc")
    store.undo()
    store.undo()

    store.record(make_snapshot("ax"))

    assert [entry.content for entry in store] == ["a", "ax"]
    assert not store.can_redo()


def test_capacity_evicts_oldest_snapshots() -> None:
    store = make_store(*(str(i) for i in range(150)))

    assert len(store) == 100
    assert store.index == 99
    assert store.current.content == "149"
    assert next(iter(store)).content == "50"


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryStore(0)


def test_snapshot_selection_is_clamped_to_content() -> None:
    snapshot = HistorySnapshot(content="abc", selection_start=1, selection_end=10)

    assert snapshot.selection == SelectionRange(1, 3)


def test_buffer_undo_redo_are_inverse() -> None:
    buffer = TextBuffer.from_text("hello")
    buffer.select(5)
    buffer.insert_text(" world")

    assert buffer.undo()
    assert buffer.content == "hello"
    assert buffer.redo()
    assert buffer.content == "hello world"
    assert buffer.selection == SelectionRange.caret(11)


def test_buffer_new_edit_after_undo_drops_redo() -> None:
    buffer = TextBuffer.from_text("")
    buffer.insert_text("a")
    buffer.insert_text("b")
    buffer.undo()

    buffer.insert_text("c")

    assert buffer.content == "ac"
    assert buffer.redo() is False


def test_buffer_history_is_bounded() -> None:
    buffer = TextBuffer()
    for _ in range(150):
        buffer.insert_text("x")

    assert len(buffer.history) == 100
    undone = 0
    while buffer.undo():
        undone += 1
    assert undone == 99
    assert buffer.content == "x" * 51


def test_first_edit_on_fresh_buffer_is_undoable() -> None:
    buffer = TextBuffer()
    buffer.insert_text("a")

    assert buffer.undo()
    assert buffer.content == ""
    assert not buffer.is_modified


def test_undo_and_redo_walk_a_mixed_edit_sequence() -> None:
    buffer = TextBuffer.from_text("- item")
    recorded = buffer.history.current
    baseline = (recorded.content, recorded.selection)
    buffer.select(6)

    def insert() -> None:
        buffer.insert_text(" one")

    def bold() -> None:
        buffer.select(2, 6)
        buffer.toggle_bold()

    def newline() -> None:
        buffer.select(len(buffer.content))
        buffer.newline()

    edits = [insert, bold, buffer.indent, newline]
    states = []
    for edit in edits:
        edit()
        states.append((buffer.content, buffer.selection))

    for _ in edits:
        assert buffer.undo()
    assert (buffer.content, buffer.selection) == baseline
    assert buffer.undo() is False

    for expected in states:
        assert buffer.redo()
        assert (buffer.content, buffer.selection) == expected
    assert buffer.redo() is False
