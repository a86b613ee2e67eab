"""
Shortcut Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from vly_player.domain.shortcuts.entities import ShortcutBinding


class ShortcutRepository(ABC):
    """Abstract repository for the shortcut table and its global switch."""

    @abstractmethod
    async def load_bindings(self) -> list[ShortcutBinding] | None:
        """Load the stored bindings in table order.

        Returns:
            The stored bindings, or None when nothing has been saved yet.

        Raises:
            PersistenceError: If the stored data cannot be decoded.
        """
        ...

    @abstractmethod
    async def save_bindings(self, bindings: list[ShortcutBinding]) -> None:
        ...

    @abstractmethod
    async def load_enabled(self) -> bool | None:
        """Load the global enabled flag, or None when unset."""
        ...

    @abstractmethod
    async def save_enabled(self, enabled: bool) -> None:
        ...
