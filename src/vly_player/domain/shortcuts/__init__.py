"""
Shortcuts Bounded Context

Key bindings, the default table and first-match resolution.
"""

from vly_player.domain.shortcuts.entities import ShortcutBinding, ShortcutTable, default_bindings
from vly_player.domain.shortcuts.repository import ShortcutRepository
from vly_player.domain.shortcuts.value_objects import KeyPress, ModifierKey, ShortcutAction

__all__ = [
    "ShortcutBinding",
    "ShortcutTable",
    "default_bindings",
    "ShortcutRepository",
    "KeyPress",
    "ModifierKey",
    "ShortcutAction",
]
