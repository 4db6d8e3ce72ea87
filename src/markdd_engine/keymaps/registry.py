"""Keymap registry responsible for storing actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from markdd_engine.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    chords: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding shadows an existing one."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' ({binding.token}) conflicts with "
            f"{[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and chord bindings."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._chord_index: Dict[str, set[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "chord": binding.token},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action "
                    f"'{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(c.id for c in conflicts))
                raise KeymapConflictError(binding, conflicts)
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            for stale in conflicts + [self._bindings.get(binding.id)]:
                if stale is not None:
                    self._remove_binding(stale)

            self._bindings[binding.id] = binding
            self._index_binding(binding)
            self._touch()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._remove_binding(binding)
        self._touch()
        return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        current = self.get_binding(binding_id)
        updated = replace(current, **changes)
        if updated.action_id not in self._actions:
            raise KeyError(
                f"Binding '{binding_id}' references unknown action "
                f"'{updated.action_id}'"
            )
        conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
        if conflicts:
            raise KeymapConflictError(updated, conflicts)
        self._remove_binding(current)
        self._bindings[binding_id] = updated
        self._index_binding(updated)
        self._touch()
        return updated

    def iter_bindings(self, chord: Optional[str] = None) -> Iterator[Binding]:
        if chord is None:
            yield from self._bindings.values()
            return
        for binding_id in sorted(self._chord_index.get(chord, ())):
            yield self._bindings[binding_id]

    def bindings_for_action(self, action_id: str) -> list[Binding]:
        return [b for b in self._bindings.values() if b.action_id == action_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            chords=tuple(sorted(self._chord_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Iterable[str] = ()
    ) -> list[Binding]:
        ignored = set(ignore)
        return [
            existing
            for existing in self.iter_bindings(binding.token)
            if existing.id not in ignored and _contexts_overlap(binding, existing)
        ]

    def _index_binding(self, binding: Binding) -> None:
        self._chord_index.setdefault(binding.token, set()).add(binding.id)

    def _remove_binding(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._chord_index.get(binding.token)
        if not bucket:
            return
        bucket.discard(binding.id)
        if not bucket:
            self._chord_index.pop(binding.token, None)

    def _touch(self) -> None:
        self._revision += 1


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """Two bindings on one chord overlap unless some flag demands opposite values."""

    if not left.when and not right.when:
        return True
    left_map = left.when_map
    right_map = right.when_map
    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False
    if not left.when or not right.when:
        return False
    return left_map == right_map


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
