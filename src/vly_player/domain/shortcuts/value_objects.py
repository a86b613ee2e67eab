"""Immutable value objects for the shortcuts bounded context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class ShortcutAction(Enum):
    """Closed set of commands a key binding can trigger."""

    PLAY_PAUSE = "play_pause"
    SEEK_BACKWARD = "seek_backward"
    SEEK_FORWARD = "seek_forward"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    TOGGLE_MUTE = "toggle_mute"
    PREVIOUS_FRAME = "previous_frame"
    NEXT_FRAME = "next_frame"
    SEEK_TO_PROGRESS = "seek_to_progress"
    SLOWER_PLAYBACK = "slower_playback"
    FASTER_PLAYBACK = "faster_playback"
    RESET_PLAYBACK_SPEED = "reset_playback_speed"
    QUIT = "quit"
    NEW_WINDOW = "new_window"
    CLOSE_WINDOW = "close_window"
    TOGGLE_SUBTITLE = "toggle_subtitle"
    INCREASE_SUBTITLE_SIZE = "increase_subtitle_size"
    DECREASE_SUBTITLE_SIZE = "decrease_subtitle_size"
    SHOW_PLAYLIST = "show_playlist"
    SHOW_SETTINGS = "show_settings"

    @property
    def is_transport(self) -> bool:
        """The action maps onto a playback session command."""
        return self in _TRANSPORT_ACTIONS

    @property
    def takes_argument(self) -> bool:
        return self == ShortcutAction.SEEK_TO_PROGRESS

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").capitalize()


_TRANSPORT_ACTIONS = frozenset(
    {
        ShortcutAction.PLAY_PAUSE,
        ShortcutAction.SEEK_BACKWARD,
        ShortcutAction.SEEK_FORWARD,
        ShortcutAction.VOLUME_UP,
        ShortcutAction.VOLUME_DOWN,
        ShortcutAction.TOGGLE_FULLSCREEN,
        ShortcutAction.TOGGLE_MUTE,
        ShortcutAction.SEEK_TO_PROGRESS,
        ShortcutAction.SLOWER_PLAYBACK,
        ShortcutAction.FASTER_PLAYBACK,
        ShortcutAction.RESET_PLAYBACK_SPEED,
    }
)


class ModifierKey(Enum):
    """Modifier tokens. COMMAND stands for the platform's primary modifier."""

    COMMAND = "command"
    OPTION = "option"
    CONTROL = "control"
    SHIFT = "shift"
    FUNCTION = "function"

    @property
    def symbol(self) -> str:
        return {
            ModifierKey.COMMAND: "cmd",
            ModifierKey.OPTION: "opt",
            ModifierKey.CONTROL: "ctrl",
            ModifierKey.SHIFT: "shift",
            ModifierKey.FUNCTION: "fn",
        }[self]


_KEY_ALIASES = {
    " ": "space",
    "spacebar": "space",
    "leftarrow": "left",
    "rightarrow": "right",
    "uparrow": "up",
    "downarrow": "down",
    "esc": "escape",
    "return": "enter",
}


def normalize_key(key: str) -> str:
    """Canonical token for a primary key: lowercase, with named keys spelled out."""
    if key == " ":
        return "space"
    token = key.strip().lower()
    return _KEY_ALIASES.get(token, token)


@dataclass(frozen=True)
class KeyPress:
    """A single key event: primary key token plus the exact set of held modifiers."""

    key: str
    modifiers: frozenset[ModifierKey] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "modifiers", frozenset(self.modifiers))

    @classmethod
    def of(cls, key: str, modifiers: Iterable[ModifierKey | str] = ()) -> KeyPress:
        """Build a key press, accepting modifier names as strings."""
        return cls(key, frozenset(ModifierKey(m) if isinstance(m, str) else m for m in modifiers))

    def __str__(self) -> str:
        parts = [m.symbol for m in ModifierKey if m in self.modifiers]
        parts.append(self.key)
        return "+".join(parts)
