"""Editor settings sourced from ``MARKDD_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "MARKDD_ENGINE_"

DEFAULT_HISTORY_CAPACITY = 100
DEFAULT_INDENT_UNIT = "    "
DEFAULT_AUTOSAVE_INTERVAL = 30.0


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Tunables shared by the buffer, formatter and autosave scheduler."""

    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    indent_unit: str = DEFAULT_INDENT_UNIT
    autosave_enabled: bool = False
    autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")
        if not self.indent_unit:
            raise ValueError("indent_unit cannot be empty")
        if self.autosave_interval <= 0:
            raise ValueError("autosave_interval must be positive")

    @classmethod
    def from_env(cls) -> "EditorSettings":
        tab_width = _env_int("TAB_WIDTH", len(DEFAULT_INDENT_UNIT))
        return cls(
            history_capacity=_env_int("HISTORY_CAPACITY", DEFAULT_HISTORY_CAPACITY),
            indent_unit=" " * max(1, tab_width),
            autosave_enabled=env_flag("AUTOSAVE", False),
            autosave_interval=_env_float(
                "AUTOSAVE_INTERVAL", DEFAULT_AUTOSAVE_INTERVAL
            ),
        )


__all__ = ["EditorSettings", "ENV_PREFIX", "env", "env_flag"]
