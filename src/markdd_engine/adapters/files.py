"""Filesystem-backed save collaborator used by the bundled hosts."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from markdd_engine.buffer import SaveResult, TextBuffer
from markdd_engine.runtime import telemetry


class FileSaveCollaborator:
    """Writes buffer content to disk off the event loop.

    ``fallback_path`` is used for buffers that have no file identity yet.
    """

    def __init__(
        self, fallback_path: Optional[str | Path] = None, *, encoding: str = "utf-8"
    ) -> None:
        self.fallback_path = Path(fallback_path) if fallback_path else None
        self.encoding = encoding

    async def save(self, current_file: Optional[str], content: str) -> SaveResult:
        target = Path(current_file) if current_file else self.fallback_path
        if target is None:
            return SaveResult.failed("no file selected")
        try:
            await asyncio.to_thread(target.write_text, content, encoding=self.encoding)
        except OSError as exc:
            return SaveResult.failed(f"{target}: {exc.strerror or exc}")
        return SaveResult.ok(str(target))


def open_into(buffer: TextBuffer, path: str | Path, *, encoding: str = "utf-8") -> None:
    """Load ``path`` into ``buffer``; a missing file opens as an empty document."""

    target = Path(path)
    content = target.read_text(encoding=encoding) if target.exists() else ""
    telemetry.record_event(
        "files.open",
        level="debug",
        data={"path": str(target), "exists": target.exists()},
    )
    buffer.open_file(str(target), content)


__all__ = ["FileSaveCollaborator", "open_into"]
