"""Dataclasses describing key chords, bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, MutableMapping

# Hosts report the platform command key under different names; the editor
# treats all of them as ``ctrl``.
MODIFIER_ALIASES = {
    "control": "ctrl",
    "meta": "ctrl",
    "cmd": "ctrl",
    "command": "ctrl",
    "option": "alt",
}

KEY_ALIASES = {
    "return": "enter",
    "esc": "escape",
    "del": "delete",
}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for modifier in modifiers:
        cleaned = modifier.strip().lower()
        if cleaned:
            values.append(MODIFIER_ALIASES.get(cleaned, cleaned))
    return tuple(sorted(dict.fromkeys(values)))


def _normalize_key(key: str) -> str:
    cleaned = key.strip("<>").lower() if len(key) > 1 else key.lower()
    return KEY_ALIASES.get(cleaned, cleaned)


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press, e.g. ``ctrl+shift+z``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", _normalize_key(self.key))
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers + (self.key,))
        return self.key

    @classmethod
    def parse(cls, chord: str) -> "KeyStroke":
        """Parse ``"ctrl+b"`` style chords; a lone ``"+"`` is the plus key."""

        if chord == "+" or chord.endswith("++"):
            return cls("+", tuple(chord[:-2].split("+")) if len(chord) > 1 else ())
        *modifiers, key = chord.split("+")
        return cls(key, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Boolean condition on a context flag used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        if expr.startswith("!"):
            return cls(expr[1:], False)
        return cls(expr, True)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used when a binding fires."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key chord with an action, optionally gated by flags."""

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def token(self) -> str:
        return self.stroke.token


__all__ = [
    "KeyStroke",
    "WhenClause",
    "ActionRef",
    "Binding",
]
