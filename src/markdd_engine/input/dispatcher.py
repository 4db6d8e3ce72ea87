"""Routes host key events and typed actions to the editor's action handlers."""

from __future__ import annotations

from typing import Dict, Optional

from markdd_engine.actions import ActionResult, EditorContext, KeyAction, KeyInput
from markdd_engine.buffer import SaveCollaborator, SaveResult, TextBuffer
from markdd_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    load_default_keymaps,
)
from markdd_engine.runtime import telemetry

# Chords carrying these modifiers never fall back to text insertion.
COMMAND_MODIFIERS = frozenset({"ctrl", "alt", "meta", "cmd", "command"})


class InputDispatcher:
    """Owns the keymap layer for one buffer and applies actions to it."""

    def __init__(
        self,
        buffer: TextBuffer,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        extras: Optional[Dict[str, object]] = None,
    ) -> None:
        self.context = EditorContext(buffer=buffer, extras=dict(extras or {}))
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="markdd_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="markdd_engine.keymaps"
        )
        self.context.extras.setdefault("keymap_flags", {})

    @property
    def buffer(self) -> TextBuffer:
        return self.context.buffer

    def set_flag(self, name: str, value: bool) -> None:
        flags = self.context.extras.setdefault("keymap_flags", {})
        if isinstance(flags, dict):
            flags[name] = value

    def handle_key(self, key: KeyInput) -> ActionResult:
        """Resolve ``key`` through the keymap, falling back to text insertion."""

        stroke = KeyStroke(key.key, key.modifiers)
        result = self.keymap_resolver.resolve(stroke, context=self.context.flags())
        if result.status == "match" and result.match:
            return self.apply(KeyAction(result.match.action.id, key.text))

        if key.text and key.text.isprintable() and not self._is_command(key):
            return self.apply(KeyAction.insert(key.text))

        return ActionResult(consumed=False, status="unbound", message=stroke.token)

    def apply(self, action: KeyAction) -> ActionResult:
        handler = self.keymap_registry.get_action(action.kind)
        with telemetry.span(
            name=f"action::{action.kind}",
            component="actions",
            metadata={"buffer": self.buffer.name},
        ):
            outcome = handler(self.context, action)
        if isinstance(outcome, ActionResult):
            return outcome
        return ActionResult(consumed=True)

    async def save(self, collaborator: SaveCollaborator) -> SaveResult:
        return await self.buffer.save(collaborator)

    @staticmethod
    def _is_command(key: KeyInput) -> bool:
        return any(mod.lower() in COMMAND_MODIFIERS for mod in key.modifiers)


__all__ = ["InputDispatcher", "COMMAND_MODIFIERS"]
