"""Key-value backed repository implementations."""

from vly_player.infrastructure.persistence.repositories.history_repository import (
    KVHistoryRepository,
)
from vly_player.infrastructure.persistence.repositories.playlist_repository import (
    KVPlaylistRepository,
)
from vly_player.infrastructure.persistence.repositories.shortcut_repository import (
    KVShortcutRepository,
)

__all__ = [
    "KVPlaylistRepository",
    "KVShortcutRepository",
    "KVHistoryRepository",
]
