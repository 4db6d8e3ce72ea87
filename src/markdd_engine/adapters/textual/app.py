"""Executable Textual app that hosts the markdown editing core."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use markdd_engine.adapters.textual.app"
    ) from exc

from markdd_engine.buffer import BufferMirror, TextBuffer
from markdd_engine.input import InputDispatcher
from markdd_engine.runtime import telemetry
from markdd_engine.runtime.autosave import AutosaveScheduler
from markdd_engine.runtime.settings import EditorSettings
from markdd_engine.search import SearchPatternError, SearchQuery, SearchSession

from ..files import FileSaveCollaborator, open_into
from .controller import TextualEditorAdapter, TextualUIHooks

CARET = "│"


def create_default_dispatcher(
    path: Optional[str] = None, *, settings: Optional[EditorSettings] = None
) -> InputDispatcher:
    """Build a buffer (optionally loaded from ``path``) with the default keymaps."""

    buffer = TextBuffer(name=path or "untitled", settings=settings)
    if path:
        open_into(buffer, path)
    return InputDispatcher(buffer)


def render_with_caret(mirror: BufferMirror) -> str:
    """Buffer text with the selection bracketed, or a caret glyph for a caret."""

    text = mirror.text
    start, end = mirror.selection.start, mirror.selection.end
    if start == end:
        return f"{text[:start]}{CARET}{text[start:]}"
    return f"{text[:start]}[{text[start:end]}]{text[end:]}"


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    message_text: str = ""


class MarkddEditorApp(App[None]):
    """Minimal Textual UI embedding the editing core."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#message-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        path: Optional[str] = None,
        *,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self._settings = settings or EditorSettings.from_env()
        self.dispatcher: InputDispatcher | None = None
        self.adapter: TextualEditorAdapter | None = None
        self.autosave: AutosaveScheduler | None = None
        self.collaborator = FileSaveCollaborator(path)
        self._search: SearchSession | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._message_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        self._message_widget = Static("", id="message-line", markup=False)
        yield self._status_widget
        yield self._message_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.dispatcher = create_default_dispatcher(
            self._path, settings=self._settings
        )
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.dispatcher, hooks)
        self.autosave = AutosaveScheduler(self.dispatcher.buffer, self.collaborator)

    async def on_unmount(self) -> None:
        if self.autosave:
            self.autosave.close()
            self.autosave = None
        if self.adapter:
            self.adapter.close()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        text = event.character if event.is_printable else None
        self.adapter.handle_textual_key(event.key, text=text)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = render_with_caret(mirror)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_message(self, message: str) -> None:
        self._state.message_text = message
        if self._message_widget:
            self._message_widget.update(message)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "save_requested":
            self.run_worker(self._save(), exclusive=True, group="save")
        elif name in {"find_requested", "replace_requested"}:
            self._find(payload if isinstance(payload, str) else None)
        elif name in {"open_file", "new_file", "set_content"}:
            self._search = None

    async def _save(self) -> None:
        if not self.dispatcher:
            return
        result = await self.dispatcher.save(self.collaborator)
        if result.success:
            self._show_message(f"Saved {result.file_path}")
        else:
            self._show_message(f"Save failed: {result.error}")

    def _find(self, pattern: Optional[str]) -> None:
        if not self.dispatcher:
            return
        if pattern:
            try:
                self._search = SearchSession(
                    self.dispatcher.buffer, SearchQuery(pattern)
                )
            except SearchPatternError as exc:
                self._show_message(str(exc))
                return
        if self._search is None:
            self._show_message("Select text to search for")
            return
        self._search.refresh()
        match = self._search.find_next()
        total = len(self._search.matches)
        if match is None:
            self._show_message(f"No matches for {self._search.query.pattern!r}")
        else:
            self._show_message(f"Match {self._search.current + 1} of {total}")

    def _log_line(self, line: str) -> None:
        telemetry.record_event("textual.ui", level="debug", data={"line": line})


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Edit a markdown file with the markdd engine Textual demo."
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="File to open; created on first save when it does not exist",
    )
    parser.add_argument(
        "--autosave",
        action="store_true",
        help="Save automatically after a period without edits",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override MARKDD_ENGINE_LOG_LEVEL for this run",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_level:
        config = telemetry.tl.Config()
        config.with_min_level(args.log_level.upper())
        config.with_console_output(False)
        config.with_profiling(True)
        telemetry.configure(config=config)
    settings = EditorSettings.from_env()
    if args.autosave:
        settings = EditorSettings(
            history_capacity=settings.history_capacity,
            indent_unit=settings.indent_unit,
            autosave_enabled=True,
            autosave_interval=settings.autosave_interval,
        )
    app = MarkddEditorApp(args.path, settings=settings)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
