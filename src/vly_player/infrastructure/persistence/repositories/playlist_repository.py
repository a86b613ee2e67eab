"""Key-value implementation of the playlist repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from vly_player.domain.playlist.entities import Playlist
from vly_player.domain.playlist.repository import PlaylistRepository
from vly_player.domain.shared.constants import StorageKeys

from .base import JsonBlob

if TYPE_CHECKING:
    from vly_player.application.interfaces.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

_PLAYLISTS = TypeAdapter(list[Playlist])
_CURRENT_ID = TypeAdapter(str | None)


class KVPlaylistRepository(PlaylistRepository):
    def __init__(self, store: KeyValueStore) -> None:
        self._playlists = JsonBlob(store, StorageKeys.PLAYLISTS, _PLAYLISTS)
        self._current = JsonBlob(store, StorageKeys.CURRENT_PLAYLIST, _CURRENT_ID)

    async def load_all(self) -> list[Playlist]:
        playlists = await self._playlists.load()
        if playlists is None:
            return []
        logger.debug("Loaded %d playlists", len(playlists))
        return playlists

    async def save_all(self, playlists: list[Playlist]) -> None:
        await self._playlists.save(playlists)

    async def load_current_id(self) -> str | None:
        return await self._current.load()

    async def save_current_id(self, playlist_id: str | None) -> None:
        if playlist_id is None:
            await self._current.clear()
            return
        await self._current.save(playlist_id)
