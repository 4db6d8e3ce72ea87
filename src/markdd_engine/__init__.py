"""UI-agnostic markdown text-editing core."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "formatting",
    "input",
    "keymaps",
    "runtime",
    "search",
    "selection",
]

__version__ = "0.1.0"
