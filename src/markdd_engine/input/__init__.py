"""Input dispatch from host key events to editor actions."""

from markdd_engine.actions import KeyAction, KeyInput

from .dispatcher import COMMAND_MODIFIERS, InputDispatcher

__all__ = ["COMMAND_MODIFIERS", "InputDispatcher", "KeyAction", "KeyInput"]
