"""
Playlist Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from vly_player.domain.playlist.entities import Playlist


class PlaylistRepository(ABC):
    """Abstract repository for the playlist collection.

    The whole collection is loaded and saved at once.
    """

    @abstractmethod
    async def load_all(self) -> list[Playlist]:
        """Load every stored playlist.

        Returns:
            The stored playlists, empty when nothing is stored.

        Raises:
            PersistenceError: If the stored data cannot be decoded.
        """
        ...

    @abstractmethod
    async def save_all(self, playlists: list[Playlist]) -> None:
        """Replace the stored collection.

        Args:
            playlists: The full collection to store.
        """
        ...

    @abstractmethod
    async def load_current_id(self) -> str | None:
        """Load the id of the selected playlist, if any."""
        ...

    @abstractmethod
    async def save_current_id(self, playlist_id: str | None) -> None:
        """Store the id of the selected playlist, or clear it with None."""
        ...
