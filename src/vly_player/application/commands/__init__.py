"""
Application Commands

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from vly_player.application.commands.execute_shortcut import (
    ExecuteShortcutHandler,
    ShortcutCommand,
    ShortcutResult,
    ShortcutStatus,
)

__all__ = [
    "ShortcutCommand",
    "ShortcutResult",
    "ShortcutStatus",
    "ExecuteShortcutHandler",
]
