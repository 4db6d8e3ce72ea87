"""Textual host adapter; ``app`` requires the ``textual`` extra."""

from .controller import (
    NAVIGATION_KEYS,
    TextualEditorAdapter,
    TextualUIHooks,
    format_status,
    split_textual_key,
)

__all__ = [
    "NAVIGATION_KEYS",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "format_status",
    "split_textual_key",
]
