"""Deferred autosave driven by buffer change notifications."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from markdd_engine.runtime import telemetry

if TYPE_CHECKING:
    from markdd_engine.buffer import SaveCollaborator, SaveResult, TextBuffer


class AutosaveScheduler:
    """Saves a modified, file-backed buffer after ``interval`` seconds of quiet.

    Each edit re-arms the timer. A failed save re-arms it as well; the
    result is still logged so the host can surface it.
    """

    def __init__(
        self,
        buffer: "TextBuffer",
        collaborator: "SaveCollaborator",
        *,
        interval: Optional[float] = None,
        enabled: Optional[bool] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.buffer = buffer
        self.collaborator = collaborator
        settings = buffer.settings
        self.interval = settings.autosave_interval if interval is None else interval
        self._enabled = settings.autosave_enabled if enabled is None else enabled
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task[Optional["SaveResult"]]] = None
        self._unsubscribe = buffer.subscribe(self._on_change)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not self.schedule():
            self.cancel()

    def schedule(self) -> bool:
        """Arm (or re-arm) the timer when the buffer needs saving."""

        if not (self._enabled and self.buffer.current_file and self.buffer.is_modified):
            return False
        loop = self._resolve_loop()
        if loop is None:
            telemetry.record_event(
                "autosave.no_loop", level="debug", data={"buffer": self.buffer.name}
            )
            return False
        self.cancel()
        self._handle = loop.call_later(self.interval, self._fire, loop)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        self.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._unsubscribe()

    async def perform(self) -> Optional["SaveResult"]:
        if not self.buffer.current_file or not self.buffer.is_modified:
            return None
        try:
            result = await self.buffer.save(self.collaborator)
        except Exception as exc:
            telemetry.record_event(
                "autosave.error",
                level="error",
                data={"buffer": self.buffer.name, "error": str(exc)},
            )
            self.schedule()
            raise
        if result.success:
            telemetry.record_event(
                "autosave.saved",
                data={"buffer": self.buffer.name, "file": result.file_path or ""},
            )
        else:
            telemetry.record_event(
                "autosave.failed",
                level="warning",
                data={"buffer": self.buffer.name, "error": result.error or "unknown"},
            )
            self.schedule()
        return result

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = None
        task = loop.create_task(self.perform())
        task.add_done_callback(self._collect)
        self._task = task

    def _collect(self, task: asyncio.Task[Optional["SaveResult"]]) -> None:
        if self._task is task:
            self._task = None
        if not task.cancelled():
            # Errors were already logged and re-armed by perform().
            task.exception()

    def _on_change(self, payload: object) -> None:
        # Saves that raced with edits leave the buffer modified; keep it armed.
        if not self.schedule():
            self.cancel()

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None


__all__ = ["AutosaveScheduler"]
