import pytest

from markdd_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    chord: str = "ctrl+k",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(chord),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="editor.k")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings("ctrl+k")) == [binding]


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="editor.k"))


def test_register_action_twice_needs_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())
    registry.register_action(make_action(), replace=True)


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="editor.k"))

    with pytest.raises(KeymapConflictError) as info:
        registry.register_binding(make_binding(binding_id="editor.k.duplicate"))

    assert [b.id for b in info.value.conflicts] == ["editor.k"]


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(
        make_binding(binding_id="with_selection", when=(WhenClause("has_selection"),))
    )
    registry.register_binding(
        make_binding(
            binding_id="without_selection",
            when=(WhenClause.parse("!has_selection"),),
        )
    )

    assert registry.stats().binding_count == 2


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_update_binding_changes_stroke() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", stroke=KeyStroke.parse("ctrl+l"), description="relabel"
    )

    assert updated.token == "ctrl+l"
    assert updated.description == "relabel"
    assert list(registry.iter_bindings("ctrl+k")) == []
    assert registry.revision() == before + 1


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_bindings_for_action() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    ids = sorted(b.id for b in registry.bindings_for_action("redo"))

    assert ids == ["editor.redo", "editor.redo_alt"]


def test_load_default_keymaps_registers_editor_shortcuts() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.get_binding("editor.save").token == "ctrl+s"
    assert registry.get_binding("editor.strikethrough").token == "alt+ctrl+s"
    assert registry.get_binding("editor.redo").token == "ctrl+shift+z"
    assert registry.has_action("toggle_highlight")


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, include_bindings=("editor.bold",))

    assert registry.stats().binding_count == 1
    assert registry.get_binding("editor.bold").action_id == "toggle_bold"


def test_load_default_keymaps_extra_binding_overrides_default() -> None:
    registry = KeymapRegistry()
    custom = Binding(id="editor.bold", stroke="ctrl+shift+b", action_id="toggle_bold")

    load_default_keymaps(registry, extra_bindings=(custom,))

    assert registry.get_binding("editor.bold").token == "ctrl+shift+b"
    assert list(registry.iter_bindings("ctrl+b")) == []


def test_keystroke_normalizes_platform_modifiers() -> None:
    assert KeyStroke("Z", ("Shift", "cmd")).token == "ctrl+shift+z"
    assert KeyStroke.parse("meta+b") == KeyStroke.parse("ctrl+b")
    assert KeyStroke.parse("option+return").token == "alt+enter"


def test_keystroke_parses_plus_key() -> None:
    assert KeyStroke.parse("+").token == "+"
    assert KeyStroke.parse("ctrl++").token == "ctrl++"


def test_get_missing_binding_raises_key_error() -> None:
    with pytest.raises(KeyError):
        KeymapRegistry().get_binding("missing")
