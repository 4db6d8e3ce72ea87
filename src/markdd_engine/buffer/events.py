"""Synchronous observer registry used for buffer notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

Callback = Callable[[object], None]


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Payload delivered to ``change`` subscribers after every mutation."""

    content: str
    is_modified: bool
    current_file: Optional[str]
    reason: str = "edit"


class ChangeNotifier:
    """Delivers events to subscribers in registration order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callback]] = {}

    def subscribe(self, event: str, callback: Callback) -> Callable[[], None]:
        """Register ``callback``; the returned function unsubscribes it."""

        self._subscribers.setdefault(event, []).append(callback)
        return lambda: self.unsubscribe(event, callback)

    def unsubscribe(self, event: str, callback: Callback) -> bool:
        callbacks = self._subscribers.get(event)
        if not callbacks or callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def subscriber_count(self, event: str) -> int:
        return len(self._subscribers.get(event, ()))

    def emit(self, event: str, payload: object | None = None) -> None:
        # Snapshot so an observer may unsubscribe itself mid-delivery.
        for callback in tuple(self._subscribers.get(event, ())):
            callback(payload)


__all__ = ["ChangeEvent", "ChangeNotifier"]
