"""
Unit Tests for the Shortcuts Domain

Tests for:
- Key normalisation and KeyPress construction
- ShortcutBinding validation and matching
- The default table and ShortcutTable resolution, editing and conflicts
"""

import pytest
from pydantic import ValidationError

from vly_player.domain.shortcuts.entities import ShortcutBinding, ShortcutTable, default_bindings
from vly_player.domain.shortcuts.value_objects import (
    KeyPress,
    ModifierKey,
    ShortcutAction,
    normalize_key,
)

CMD = frozenset({ModifierKey.COMMAND})


class TestKeyPress:
    """Unit tests for key tokens."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(" ", "space"), ("Space", "space"), ("F", "f"), ("LeftArrow", "left"), (",", ",")],
    )
    def test_normalize_key(self, raw, expected):
        """Should lowercase keys and spell out named keys."""
        assert normalize_key(raw) == expected

    def test_of_accepts_modifier_names(self):
        """Should build modifiers from their string values."""
        press = KeyPress.of("F", ["command"])

        assert press.key == "f"
        assert press.modifiers == CMD

    def test_str(self):
        assert str(KeyPress.of("f", [ModifierKey.SHIFT, ModifierKey.COMMAND])) == "cmd+shift+f"

    def test_equal_presses_hash_equal(self):
        assert KeyPress("F", CMD) == KeyPress("f", CMD)
        assert len({KeyPress("F", CMD), KeyPress("f", CMD)}) == 1


class TestShortcutBinding:
    """Unit tests for ShortcutBinding."""

    def test_key_normalized_on_create(self):
        binding = ShortcutBinding(action=ShortcutAction.PLAY_PAUSE, key=" ")

        assert binding.key == "space"

    def test_seek_to_progress_requires_decile(self):
        """Should reject seek-to-progress bindings without a 0-9 argument."""
        with pytest.raises(ValidationError):
            ShortcutBinding(action=ShortcutAction.SEEK_TO_PROGRESS, key="1")
        with pytest.raises(ValidationError):
            ShortcutBinding(action=ShortcutAction.SEEK_TO_PROGRESS, key="1", argument=10)

    def test_matches_requires_exact_modifiers(self):
        """Should match only when the modifier sets are equal."""
        binding = ShortcutBinding(action=ShortcutAction.TOGGLE_FULLSCREEN, key="f", modifiers=CMD)

        assert binding.matches(KeyPress("f", CMD))
        assert not binding.matches(KeyPress("f"))
        assert not binding.matches(KeyPress("f", frozenset({ModifierKey.COMMAND, ModifierKey.SHIFT})))

    def test_identity_includes_argument(self):
        a = ShortcutBinding(action=ShortcutAction.SEEK_TO_PROGRESS, key="1", argument=1)
        b = ShortcutBinding(action=ShortcutAction.SEEK_TO_PROGRESS, key="2", argument=2)

        assert a.identity != b.identity


class TestDefaultBindings:
    """Unit tests for the seed shortcut table."""

    def test_seed_covers_every_action(self):
        """Should bind every action at least once."""
        actions = {b.action for b in default_bindings()}

        assert actions == set(ShortcutAction)

    def test_digits_seek_by_decile(self):
        """Should bind digit N to seek-to-progress with argument N."""
        table = ShortcutTable()

        for decile in range(10):
            binding = table.resolve(KeyPress(str(decile)))
            assert binding is not None
            assert binding.action == ShortcutAction.SEEK_TO_PROGRESS
            assert binding.argument == decile

    @pytest.mark.parametrize(
        "press,action",
        [
            (KeyPress("space"), ShortcutAction.PLAY_PAUSE),
            (KeyPress("left"), ShortcutAction.SEEK_BACKWARD),
            (KeyPress("right"), ShortcutAction.SEEK_FORWARD),
            (KeyPress("m"), ShortcutAction.TOGGLE_MUTE),
            (KeyPress("f", CMD), ShortcutAction.TOGGLE_FULLSCREEN),
            (KeyPress(","), ShortcutAction.PREVIOUS_FRAME),
            (KeyPress(",", CMD), ShortcutAction.SHOW_SETTINGS),
            (KeyPress("\\"), ShortcutAction.RESET_PLAYBACK_SPEED),
            (KeyPress("p", CMD), ShortcutAction.SHOW_PLAYLIST),
        ],
    )
    def test_seed_bindings(self, press, action):
        binding = ShortcutTable().resolve(press)

        assert binding is not None and binding.action == action

    def test_seed_has_no_conflicts(self):
        assert ShortcutTable().conflicts() == []


class TestShortcutTable:
    """Unit tests for ShortcutTable."""

    def test_unbound_key_resolves_to_none(self):
        assert ShortcutTable().resolve(KeyPress("z")) is None

    def test_disabled_table_resolves_nothing(self):
        """Should evaluate no binding while the table is switched off."""
        table = ShortcutTable(enabled=False)

        assert table.resolve(KeyPress("space")) is None

    def test_disabled_binding_skipped(self):
        table = ShortcutTable()
        binding = table.find(ShortcutAction.TOGGLE_MUTE)
        table.replace(binding.model_copy(update={"enabled": False}))

        assert table.resolve(KeyPress("m")) is None

    def test_earlier_binding_wins(self):
        """Should dispatch the first matching binding in table order."""
        table = ShortcutTable(
            bindings=[
                ShortcutBinding(action=ShortcutAction.TOGGLE_MUTE, key="x"),
                ShortcutBinding(action=ShortcutAction.PLAY_PAUSE, key="x"),
            ]
        )

        assert table.resolve(KeyPress("x")).action == ShortcutAction.TOGGLE_MUTE

    def test_conflicts_report_shadowed(self):
        """Should list the later binding as shadowed by the earlier one."""
        first = ShortcutBinding(action=ShortcutAction.TOGGLE_MUTE, key="x")
        second = ShortcutBinding(action=ShortcutAction.PLAY_PAUSE, key="x")
        table = ShortcutTable(bindings=[first, second])

        assert table.conflicts() == [(first, second)]

    def test_replace_keeps_position(self):
        """Should swap the binding with the same identity in place."""
        table = ShortcutTable()
        index = next(i for i, b in enumerate(table.bindings) if b.action == ShortcutAction.TOGGLE_MUTE)

        replaced = table.replace(ShortcutBinding(action=ShortcutAction.TOGGLE_MUTE, key="k"))

        assert replaced is True
        assert table.bindings[index].key == "k"
        assert table.resolve(KeyPress("k")).action == ShortcutAction.TOGGLE_MUTE
        assert table.resolve(KeyPress("m")) is None

    def test_replace_unknown_identity(self):
        table = ShortcutTable(bindings=[])

        assert table.replace(ShortcutBinding(action=ShortcutAction.QUIT, key="q")) is False

    def test_reset_to_defaults(self):
        table = ShortcutTable(bindings=[])

        table.reset_to_defaults()

        assert [b.identity for b in table.bindings] == [b.identity for b in default_bindings()]
