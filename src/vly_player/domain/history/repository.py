"""
History Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from vly_player.domain.history.entities import HistoryEntry


class HistoryRepository(ABC):
    """Abstract repository for the watch history list."""

    @abstractmethod
    async def load(self) -> list[HistoryEntry]:
        """Load entries most-recent-first.

        Raises:
            PersistenceError: If the stored data cannot be decoded.
        """
        ...

    @abstractmethod
    async def save(self, entries: list[HistoryEntry]) -> None:
        ...
