"""Declarative keymap registry and default editor shortcuts."""

from .models import ActionRef, Binding, KeyStroke, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import DEFAULT_ACTIONS, DEFAULT_BINDINGS, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeyStroke",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
]
