"""Core domain entities for the shortcuts bounded context."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vly_player.domain.shared.messages import ErrorMessages
from vly_player.domain.shared.types import NonEmptyStr
from vly_player.domain.shortcuts.value_objects import (
    KeyPress,
    ModifierKey,
    ShortcutAction,
    normalize_key,
)

CMD = frozenset({ModifierKey.COMMAND})


class ShortcutBinding(BaseModel):
    """Immutable mapping from a key combination to an action.

    A binding is identified by its action plus argument, so the ten
    seek-to-progress bindings can be edited independently.
    """

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    action: ShortcutAction
    key: NonEmptyStr
    modifiers: frozenset[ModifierKey] = frozenset()
    enabled: bool = True
    argument: int | None = None

    @field_validator("key", mode="before")
    @classmethod
    def _normalize_key(cls, v: object) -> object:
        return normalize_key(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def _check_argument(self) -> ShortcutBinding:
        if self.action == ShortcutAction.SEEK_TO_PROGRESS:
            if self.argument is None or not 0 <= self.argument <= 9:
                raise ValueError(ErrorMessages.INVALID_PROGRESS_DECILE)
        return self

    @property
    def identity(self) -> tuple[ShortcutAction, int | None]:
        return (self.action, self.argument)

    @property
    def key_press(self) -> KeyPress:
        return KeyPress(self.key, self.modifiers)

    @property
    def display(self) -> str:
        return str(self.key_press)

    def matches(self, press: KeyPress) -> bool:
        """Exact match on key token and modifier set."""
        return self.key == press.key and self.modifiers == press.modifiers


def _binding(
    action: ShortcutAction,
    key: str,
    modifiers: frozenset[ModifierKey] = frozenset(),
    argument: int | None = None,
) -> ShortcutBinding:
    return ShortcutBinding(action=action, key=key, modifiers=modifiers, argument=argument)


def default_bindings() -> list[ShortcutBinding]:
    """The seed shortcut table, in dispatch order."""
    bindings = [
        _binding(ShortcutAction.PLAY_PAUSE, " "),
        _binding(ShortcutAction.SEEK_BACKWARD, "left"),
        _binding(ShortcutAction.SEEK_FORWARD, "right"),
        _binding(ShortcutAction.VOLUME_UP, "up"),
        _binding(ShortcutAction.VOLUME_DOWN, "down"),
        _binding(ShortcutAction.TOGGLE_FULLSCREEN, "f", CMD),
        _binding(ShortcutAction.TOGGLE_MUTE, "m"),
        _binding(ShortcutAction.PREVIOUS_FRAME, ","),
        _binding(ShortcutAction.NEXT_FRAME, "."),
    ]
    bindings.extend(
        _binding(ShortcutAction.SEEK_TO_PROGRESS, str(decile), argument=decile)
        for decile in range(10)
    )
    bindings.extend(
        [
            _binding(ShortcutAction.SLOWER_PLAYBACK, "["),
            _binding(ShortcutAction.FASTER_PLAYBACK, "]"),
            _binding(ShortcutAction.RESET_PLAYBACK_SPEED, "\\"),
            _binding(ShortcutAction.QUIT, "q", CMD),
            _binding(ShortcutAction.NEW_WINDOW, "n", CMD),
            _binding(ShortcutAction.CLOSE_WINDOW, "w", CMD),
            _binding(ShortcutAction.TOGGLE_SUBTITLE, "c"),
            _binding(ShortcutAction.INCREASE_SUBTITLE_SIZE, "+", CMD),
            _binding(ShortcutAction.DECREASE_SUBTITLE_SIZE, "-", CMD),
            _binding(ShortcutAction.SHOW_PLAYLIST, "p", CMD),
            _binding(ShortcutAction.SHOW_SETTINGS, ",", CMD),
        ]
    )
    return bindings


class ShortcutTable(BaseModel):
    """Ordered shortcut bindings plus the global on/off switch.

    Table order decides ties: when two enabled bindings match the same key
    press, the earlier one wins and the later one is never dispatched.
    """

    bindings: list[ShortcutBinding] = Field(default_factory=default_bindings)
    enabled: bool = True

    def resolve(self, press: KeyPress) -> ShortcutBinding | None:
        """Return the first enabled binding matching ``press`` exactly."""
        if not self.enabled:
            return None
        for binding in self.bindings:
            if binding.enabled and binding.matches(press):
                return binding
        return None

    def find(self, action: ShortcutAction, argument: int | None = None) -> ShortcutBinding | None:
        return next((b for b in self.bindings if b.identity == (action, argument)), None)

    def replace(self, binding: ShortcutBinding) -> bool:
        """Swap in ``binding`` at the position of the entry with the same identity."""
        for index, existing in enumerate(self.bindings):
            if existing.identity == binding.identity:
                self.bindings[index] = binding
                return True
        return False

    def reset_to_defaults(self) -> None:
        self.bindings = default_bindings()

    def conflicts(self) -> list[tuple[ShortcutBinding, ShortcutBinding]]:
        """Pairs of (winning, shadowed) enabled bindings sharing a key combination."""
        seen: dict[KeyPress, ShortcutBinding] = {}
        shadowed: list[tuple[ShortcutBinding, ShortcutBinding]] = []
        for binding in self.bindings:
            if not binding.enabled:
                continue
            press = binding.key_press
            if press in seen:
                shadowed.append((seen[press], binding))
            else:
                seen[press] = binding
        return shadowed
