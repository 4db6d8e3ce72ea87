"""Chord resolution against the registry, with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from markdd_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None
    token: str = ""


class KeymapResolver:
    """Resolves a chord to the highest-priority binding allowed by the context."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(
        self,
        stroke: KeyStroke | str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        if isinstance(stroke, str):
            stroke = KeyStroke.parse(stroke)
        token = stroke.token
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"chord": token},
        ) as handle:
            candidates = [
                binding
                for binding in self._registry.iter_bindings(token)
                if binding.allows(ctx)
            ]
            if not candidates:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", token=token)

            candidates.sort(key=lambda b: (-b.priority, b.id))
            binding = candidates[0]
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", binding.id)
            action = self._registry.get_action(binding.action_id)
            return ResolutionResult(
                status="match",
                match=ResolutionMatch(binding=binding, action=action),
                token=token,
            )


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
