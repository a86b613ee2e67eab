"""
Playlist Bounded Context

Media items, playlists and the traversal rules between them.
"""

from vly_player.domain.playlist.entities import MediaItem, Playlist
from vly_player.domain.playlist.repository import PlaylistRepository
from vly_player.domain.playlist.services import PlaylistNavigator
from vly_player.domain.playlist.value_objects import Direction, RepeatMode, SortOrder

__all__ = [
    # Entities
    "MediaItem",
    "Playlist",
    # Value Objects
    "RepeatMode",
    "SortOrder",
    "Direction",
    # Repository
    "PlaylistRepository",
    # Services
    "PlaylistNavigator",
]
