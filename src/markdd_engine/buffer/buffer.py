"""Text buffer owning content, selection, history and change notifications."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, ContextManager, Optional

from markdd_engine.formatting import (
    MARKERS,
    EditInstruction,
    InlineMarker,
    enter_instruction,
    tab_instruction,
    templates,
    toggle_instruction,
)
from markdd_engine.runtime import telemetry
from markdd_engine.runtime.settings import EditorSettings
from markdd_engine.selection import SelectionRange

from .events import ChangeEvent, ChangeNotifier
from .history import HistorySnapshot, HistoryStore
from .locator import CursorPosition, DocumentStats, document_stats, locate
from .sync import (
    BufferMirror,
    BufferReentrancyError,
    BufferValidationError,
    SaveCollaborator,
    SaveResult,
)


class TextBuffer:
    """Single source of truth for a document and its cursor.

    Every content change goes through :meth:`apply_instruction`, which records
    one history snapshot and then notifies ``change`` subscribers
    synchronously, in subscription order.
    """

    def __init__(
        self,
        *,
        name: str = "untitled",
        settings: Optional[EditorSettings] = None,
        history: Optional[HistoryStore] = None,
        notifier: Optional[ChangeNotifier] = None,
    ) -> None:
        self.name = name
        self.settings = settings or EditorSettings()
        self.history = history or HistoryStore(self.settings.history_capacity)
        self.notifier = notifier or ChangeNotifier()
        self._content = ""
        self._selection = SelectionRange()
        self._current_file: Optional[str] = None
        self._modified = False
        self._saved_content = ""
        self._notifying = False
        self.history.record(HistorySnapshot.capture(self._content, self._selection))

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "untitled",
        settings: Optional[EditorSettings] = None,
    ) -> "TextBuffer":
        buffer = cls(name=name, settings=settings)
        buffer.set_content(text)
        return buffer

    # -- state -------------------------------------------------------------

    @property
    def content(self) -> str:
        return self._content

    @property
    def selection(self) -> SelectionRange:
        return self._selection

    @property
    def current_file(self) -> Optional[str]:
        return self._current_file

    @property
    def is_modified(self) -> bool:
        return self._modified

    def get_content(self) -> str:
        return self._content

    def get_current_file(self) -> Optional[str]:
        return self._current_file

    def is_file_modified(self) -> bool:
        return self._modified

    def get_selected_text(self) -> str:
        return self._selection.text_in(self._content)

    def cursor_position(self) -> CursorPosition:
        return locate(self._content, self._selection.start)

    def stats(self) -> DocumentStats:
        return document_stats(self._content, self._selection.start)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self._content,
            selection=self._selection,
            current_file=self._current_file,
            is_modified=self._modified,
            attributes=dict(attributes or {}),
        )

    # -- observers ---------------------------------------------------------

    def subscribe(
        self, callback: Callable[[object], None], *, event: str = "change"
    ) -> Callable[[], None]:
        return self.notifier.subscribe(event, callback)

    def unsubscribe(
        self, callback: Callable[[object], None], *, event: str = "change"
    ) -> bool:
        return self.notifier.unsubscribe(event, callback)

    def focus(self) -> None:
        self._emit("focus", self.name)

    # -- editing -----------------------------------------------------------

    def select(self, start: int, end: Optional[int] = None) -> SelectionRange:
        self._guard("select")
        self._selection = SelectionRange.clamp(
            start, start if end is None else end, len(self._content)
        )
        self._emit("selection", self._selection)
        return self._selection

    def insert_text(self, text: str) -> ChangeEvent:
        return self.replace_range(
            self._selection.start, self._selection.end, text, label="insert_text"
        )

    def replace_selection(self, text: str) -> ChangeEvent:
        return self.replace_range(
            self._selection.start,
            self._selection.end,
            text,
            select_inserted=True,
            label="replace_selection",
        )

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        *,
        select_inserted: bool = False,
        label: str = "replace_range",
    ) -> ChangeEvent:
        _require_text(text)
        span = SelectionRange.clamp(start, end, len(self._content))
        instruction = EditInstruction.replace(
            span.start, span.end, text, select_inserted=select_inserted
        )
        return self.apply_instruction(instruction, label=label)

    def apply_instruction(
        self, instruction: EditInstruction, *, label: str = "edit"
    ) -> ChangeEvent:
        with Transaction(self, label) as tx:
            span = SelectionRange.clamp(
                instruction.start, instruction.end, len(self._content)
            )
            content = (
                self._content[: span.start]
                + instruction.text
                + self._content[span.end :]
            )
            selection = SelectionRange.clamp(
                instruction.selection.start, instruction.selection.end, len(content)
            )
            tx.commit(content, selection)
        return self._notify(label)

    def delete_backward(self) -> Optional[ChangeEvent]:
        start, end = self._selection.start, self._selection.end
        if start == end:
            if start == 0:
                return None
            start -= 1
        return self.replace_range(start, end, "", label="delete_backward")

    def delete_forward(self) -> Optional[ChangeEvent]:
        start, end = self._selection.start, self._selection.end
        if start == end:
            if end >= len(self._content):
                return None
            end += 1
        return self.replace_range(start, end, "", label="delete_forward")

    # -- history -----------------------------------------------------------

    def undo(self) -> bool:
        self._guard("undo")
        snapshot = self.history.undo()
        if snapshot is None:
            telemetry.record_event(
                "buffer.undo",
                level="debug",
                data={"buffer": self.name, "status": "boundary"},
            )
            return False
        self._materialize(snapshot, reason="undo")
        return True

    def redo(self) -> bool:
        self._guard("redo")
        snapshot = self.history.redo()
        if snapshot is None:
            telemetry.record_event(
                "buffer.redo",
                level="debug",
                data={"buffer": self.name, "status": "boundary"},
            )
            return False
        self._materialize(snapshot, reason="redo")
        return True

    # -- file lifecycle ----------------------------------------------------

    def new_file(self) -> ChangeEvent:
        self._guard("new_file")
        self._content = ""
        self._selection = SelectionRange()
        self._current_file = None
        self._modified = False
        self._saved_content = ""
        self.history.clear()
        self.history.record(HistorySnapshot.capture("", self._selection))
        telemetry.record_event("buffer.new_file", data={"buffer": self.name})
        return self._notify("new_file")

    def open_file(self, identity: Optional[str], content: str) -> ChangeEvent:
        return self._load(identity, content, reason="open_file")

    def set_content(self, content: str) -> ChangeEvent:
        return self._load(None, content, reason="set_content")

    async def save(self, collaborator: SaveCollaborator) -> SaveResult:
        """Persist the current content through ``collaborator``.

        Edits made while the save is pending are not locked out; the
        collaborator receives the content as it was when the save started.
        """

        content = self._content
        with telemetry.span(
            "buffer::save",
            component="buffer",
            metadata={"buffer": self.name, "file": self._current_file or ""},
        ) as handle:
            result = await collaborator.save(self._current_file, content)
            handle.add_metadata("success", result.success)

        if not result.success:
            telemetry.record_event(
                "buffer.save_failed",
                level="warning",
                data={"buffer": self.name, "error": result.error or "unknown"},
            )
            return result

        self._saved_content = content
        self._modified = self._content != content
        if result.file_path:
            self._current_file = result.file_path
        self._notify("save")
        return result

    # -- formatting --------------------------------------------------------

    def indent(self) -> ChangeEvent:
        instruction = tab_instruction(
            self._content, self._selection, self.settings.indent_unit
        )
        return self.apply_instruction(instruction, label="indent")

    def newline(self) -> ChangeEvent:
        instruction = enter_instruction(self._content, self._selection)
        if instruction is None:
            instruction = EditInstruction.at_selection(self._selection, "\n")
        return self.apply_instruction(instruction, label="newline")

    def toggle(self, marker: InlineMarker | str) -> ChangeEvent:
        if isinstance(marker, str):
            marker = MARKERS[marker]
        instruction = toggle_instruction(self._content, self._selection, marker)
        return self.apply_instruction(instruction, label=f"toggle_{marker.name}")

    def toggle_bold(self) -> ChangeEvent:
        return self.toggle("bold")

    def toggle_italic(self) -> ChangeEvent:
        return self.toggle("italic")

    def toggle_highlight(self) -> ChangeEvent:
        return self.toggle("highlight")

    def toggle_strikethrough(self) -> ChangeEvent:
        return self.toggle("strikethrough")

    def toggle_superscript(self) -> ChangeEvent:
        return self.toggle("superscript")

    def toggle_subscript(self) -> ChangeEvent:
        return self.toggle("subscript")

    def insert_heading(self, level: int = 1) -> ChangeEvent:
        return self._template("heading", templates.heading, level=level)

    def insert_link(self, url: str = "", title: str = "") -> ChangeEvent:
        return self._template("link", templates.link, url=url, title=title)

    def insert_image(self, url: str = "", alt: str = "") -> ChangeEvent:
        return self._template("image", templates.image, url=url, alt=alt)

    def insert_table(self, rows: int = 3, cols: int = 3) -> ChangeEvent:
        return self._template("table", templates.table, rows=rows, cols=cols)

    def insert_math(self) -> ChangeEvent:
        return self._template("math", templates.math)

    def insert_inline_code(self) -> ChangeEvent:
        return self._template("inline_code", templates.inline_code)

    def insert_keyboard_shortcut(self) -> ChangeEvent:
        return self._template("keyboard_shortcut", templates.keyboard_shortcut)

    def insert_code_block(self, language: str = "", body: str = "") -> ChangeEvent:
        return self._template(
            "code_block", templates.code_block, language=language, body=body
        )

    def insert_diagram(self, kind: str) -> ChangeEvent:
        return self._template(f"diagram_{kind}", templates.diagram, kind=kind)

    # -- internals ---------------------------------------------------------

    def _template(
        self, name: str, builder: Callable[..., EditInstruction], **options: object
    ) -> ChangeEvent:
        instruction = builder(self._content, self._selection, **options)
        return self.apply_instruction(instruction, label=f"insert_{name}")

    def _load(
        self, identity: Optional[str], content: str, *, reason: str
    ) -> ChangeEvent:
        self._guard(reason)
        _require_text(content)
        self._content = content
        self._selection = SelectionRange()
        self._current_file = identity
        self._modified = False
        self._saved_content = content
        self.history.clear()
        self.history.record(HistorySnapshot.capture(content, self._selection))
        telemetry.record_event(
            f"buffer.{reason}",
            data={"buffer": self.name, "file": identity or "", "length": len(content)},
        )
        return self._notify(reason)

    def _materialize(self, snapshot: HistorySnapshot, *, reason: str) -> None:
        self._content = snapshot.content
        self._selection = snapshot.selection
        self._modified = snapshot.content != self._saved_content
        self._notify(reason)

    def _guard(self, operation: str) -> None:
        if self._notifying:
            raise BufferReentrancyError(operation)

    def _notify(self, reason: str) -> ChangeEvent:
        event = ChangeEvent(
            content=self._content,
            is_modified=self._modified,
            current_file=self._current_file,
            reason=reason,
        )
        self._emit("change", event)
        return event

    def _emit(self, event: str, payload: object | None) -> None:
        previous = self._notifying
        self._notifying = True
        try:
            self.notifier.emit(event, payload)
        finally:
            self._notifying = previous


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one edit in a telemetry span and records its history snapshot."""

    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self.buffer._guard(self.label)
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, content: str, selection: SelectionRange) -> None:
        buffer = self.buffer
        if content == buffer._content and selection == buffer._selection:
            return
        buffer._content = content
        buffer._selection = selection
        buffer._modified = content != buffer._saved_content
        buffer.history.record(HistorySnapshot.capture(content, selection))

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _require_text(value: object) -> None:
    if not isinstance(value, str):
        raise BufferValidationError(
            f"expected str content, got {type(value).__name__}", value=value
        )


__all__ = ["TextBuffer", "Transaction"]
