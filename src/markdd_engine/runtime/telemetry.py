"""Telemetry helpers for the editing core, built on telelog.

Public surface:

``configure(...)`` -- adopt an explicit telelog config or a named preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- profile a block and optionally track it as a component
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

from .settings import env, env_flag

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = env("LOGGER") or "markdd_engine"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _build_preset_config(preset: str) -> Any:
    config = tl.Config()
    key = preset.lower()

    if key == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif key == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_file_output(env("LOG_FILE") or "markdd_engine.log")
        config.with_buffering(True)
    elif key == "quiet":
        config.with_min_level("ERROR")
        config.with_console_output(False)
    else:
        raise ValueError(f"Unknown preset '{preset}'.")

    config.with_profiling(True)
    return config


def _build_default_config() -> Any:
    config = tl.Config()
    config.with_min_level((env("LOG_LEVEL") or "WARNING").upper())

    if env_flag("DISABLE_CONSOLE", False):
        config.with_console_output(False)
    else:
        config.with_console_output(True)
        config.with_colored_output(not env_flag("NO_COLOR", False))

    if env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` and ``preset`` are mutually exclusive. With neither, the
    configuration is rebuilt from ``MARKDD_ENGINE_*`` environment variables.
    Cached loggers are dropped so the next ``get_logger`` call picks up the
    new settings.
    """

    global _ACTIVE_CONFIG
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = _build_preset_config(preset)
    elif config is None:
        config = _build_default_config()

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def _ensure_config() -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = _build_default_config()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ensure_config()
        )
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: str) -> Tuple[Any, bool]:
    name = str(level).lower()
    with_attr = getattr(logger, f"{name}_with", None)
    if with_attr is not None:
        return with_attr, True
    attr = getattr(logger, name, None)
    if attr is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr, False


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` as structured key/value pairs."""

    log = get_logger(logger_name)
    payload = {"event": name, **(data or {})}
    method, accepts_data = _level_method(log, level)
    message = f"event::{name}"
    if accepts_data:
        method(message, _format_pairs(payload))
    else:
        method(f"{message} {payload}")


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for attaching metadata to the active block."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        method, accepts = _level_method(self.logger, "error")
        if accepts:
            method("span::fail", _format_pairs(payload))
        else:
            method(f"span::fail {payload}")


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a code block, optionally tracking it as a component.

    ``component=True`` reuses ``name`` as the component identifier; a string
    names the component explicitly. ``metadata`` is attached as logger
    context for the duration of the block.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    context_keys = []
    metadata_payload: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        serialized = _stringify(value)
        metadata_payload[key] = serialized
        log.add_context(key, serialized)
        context_keys.append(key)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(metadata_payload),
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


configure()
logger = get_logger()

__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
    "logger",
]
