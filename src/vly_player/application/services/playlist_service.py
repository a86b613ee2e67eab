"""Playlist Application Service - manages the playlist collection and its persistence."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel

from ...domain.playlist.entities import MediaItem, Playlist
from ...domain.playlist.services import PlaylistNavigator
from ...domain.playlist.value_objects import RepeatMode, SortOrder
from ...domain.shared.events import PlaylistsChanged
from ...domain.shared.exceptions import EntityNotFoundError, PersistenceError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import NonNegativeInt

if TYPE_CHECKING:
    from ...domain.playlist.repository import PlaylistRepository
    from ...domain.shared.events import EventBus

logger = logging.getLogger(__name__)


class AddItemsResult(BaseModel):
    added: list[MediaItem]
    skipped: list[MediaItem]
    playlist_length: NonNegativeInt = 0

    @property
    def added_count(self) -> int:
        return len(self.added)


class PlaylistApplicationService:
    """Create, edit and select playlists.

    Every mutation updates the in-memory collection first and then writes the
    whole collection back. Persistence failures are logged and never raised.
    """

    def __init__(
        self,
        *,
        playlist_repository: PlaylistRepository,
        event_bus: EventBus,
    ) -> None:
        self._repo = playlist_repository
        self._event_bus = event_bus
        self._playlists: list[Playlist] = []
        self._current_id: str | None = None

    async def initialize(self) -> None:
        """Load the stored collection, falling back to empty when it is missing or corrupt."""
        try:
            self._playlists = await self._repo.load_all()
            current_id = await self._repo.load_current_id()
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_LOAD_FAILED, "playlists")
            self._playlists = []
            current_id = None

        if current_id is not None and self._find(current_id) is None:
            current_id = None
        self._current_id = current_id

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def playlists(self) -> list[Playlist]:
        return list(self._playlists)

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def current(self) -> Playlist | None:
        if self._current_id is None:
            return None
        return self._find(self._current_id)

    def get(self, playlist_id: str) -> Playlist:
        playlist = self._find(playlist_id)
        if playlist is None:
            raise EntityNotFoundError("Playlist", playlist_id)
        return playlist

    def find_item(self, item_id: str) -> tuple[Playlist, MediaItem] | None:
        """Locate an item, preferring the current playlist."""
        candidates = self._playlists
        current = self.current
        if current is not None:
            candidates = [current, *[p for p in self._playlists if p is not current]]
        for playlist in candidates:
            item = playlist.get_item(item_id)
            if item is not None:
                return playlist, item
        return None

    # ── Collection ───────────────────────────────────────────────────

    async def create_playlist(self, name: str, items: Iterable[MediaItem] = ()) -> Playlist:
        playlist = Playlist(name=name)
        playlist.add_items(items)
        self._playlists.append(playlist)
        if self._current_id is None:
            self._current_id = playlist.id

        logger.info(LogTemplates.PLAYLIST_CREATED, playlist.name, playlist.id)
        await self._commit(playlist.id, "created")
        return playlist

    async def delete_playlist(self, playlist_id: str) -> bool:
        playlist = self._find(playlist_id)
        if playlist is None:
            return False

        self._playlists = [p for p in self._playlists if p.id != playlist_id]
        if self._current_id == playlist_id:
            self._current_id = self._playlists[0].id if self._playlists else None

        logger.info(LogTemplates.PLAYLIST_DELETED, playlist.name)
        await self._commit(playlist_id, "deleted")
        return True

    async def rename_playlist(self, playlist_id: str, name: str) -> Playlist:
        playlist = self.get(playlist_id)
        playlist.rename(name)
        logger.info(LogTemplates.PLAYLIST_RENAMED, playlist_id, name)
        await self._commit(playlist_id, "renamed")
        return playlist

    async def set_current(self, playlist_id: str | None) -> Playlist | None:
        """Select the playlist used for navigation, or clear the selection with None."""
        playlist = self.get(playlist_id) if playlist_id is not None else None
        self._current_id = playlist_id
        logger.info(LogTemplates.PLAYLIST_CURRENT_CHANGED, playlist_id)
        await self._commit(playlist_id, "current")
        return playlist

    # ── Items ────────────────────────────────────────────────────────

    async def add_items(self, playlist_id: str, items: Iterable[MediaItem]) -> AddItemsResult:
        playlist = self.get(playlist_id)
        added: list[MediaItem] = []
        skipped: list[MediaItem] = []
        for item in items:
            if playlist.contains(item.id):
                logger.info(LogTemplates.PLAYLIST_DUPLICATE_SKIPPED, item.title, playlist.name)
                skipped.append(item)
                continue
            added.append(playlist.add_item(item))

        if added:
            logger.info(LogTemplates.PLAYLIST_ITEMS_ADDED, len(added), playlist.name)
            await self._commit(playlist_id, "items_added")
        return AddItemsResult(added=added, skipped=skipped, playlist_length=playlist.count)

    async def remove_item(self, playlist_id: str, item_id: str) -> MediaItem | None:
        playlist = self.get(playlist_id)
        removed = playlist.remove_item(item_id)
        if removed is not None:
            logger.info(LogTemplates.PLAYLIST_ITEM_REMOVED, removed.title, playlist.name)
            await self._commit(playlist_id, "item_removed")
        return removed

    async def remove_at(self, playlist_id: str, index: int) -> MediaItem | None:
        playlist = self.get(playlist_id)
        removed = playlist.remove_at(index)
        if removed is not None:
            logger.info(LogTemplates.PLAYLIST_ITEM_REMOVED, removed.title, playlist.name)
            await self._commit(playlist_id, "item_removed")
        return removed

    async def move_item(self, playlist_id: str, from_index: int, to_index: int) -> bool:
        playlist = self.get(playlist_id)
        moved = playlist.move_item(from_index, to_index)
        if moved:
            logger.info(LogTemplates.PLAYLIST_ITEM_MOVED, from_index, to_index, playlist.name)
            await self._commit(playlist_id, "item_moved")
        return moved

    async def clear(self, playlist_id: str) -> int:
        playlist = self.get(playlist_id)
        count = playlist.clear()
        await self._commit(playlist_id, "cleared")
        return count

    async def update_item(self, playlist_id: str, item: MediaItem) -> bool:
        playlist = self.get(playlist_id)
        updated = playlist.update_item(item)
        if updated:
            await self._commit(playlist_id, "item_updated")
        return updated

    async def save_position(self, item_id: str, position: float) -> MediaItem | None:
        """Remember where playback of an item stopped."""
        found = self.find_item(item_id)
        if found is None:
            return None
        playlist, item = found
        updated = item.with_position(position)
        playlist.update_item(updated)
        logger.debug(LogTemplates.PLAYLIST_POSITION_SAVED, updated.last_position, item.title)
        await self._commit(playlist.id, "position_saved")
        return updated

    # ── Ordering ─────────────────────────────────────────────────────

    async def sort(self, playlist_id: str, order: SortOrder) -> list[MediaItem]:
        playlist = self.get(playlist_id)
        ordered = PlaylistNavigator.sort(playlist, order)
        logger.info(LogTemplates.PLAYLIST_SORTED, playlist.name, order.value)
        await self._commit(playlist_id, "sorted")
        return ordered

    async def set_shuffle(self, playlist_id: str, enabled: bool) -> Playlist:
        playlist = self.get(playlist_id)
        if playlist.shuffle != enabled:
            playlist.toggle_shuffle()
            await self._commit(playlist_id, "shuffle")
        return playlist

    async def set_repeat_mode(self, playlist_id: str, mode: RepeatMode) -> Playlist:
        playlist = self.get(playlist_id)
        if playlist.repeat_mode != mode:
            playlist.repeat_mode = mode
            playlist.touch()
            await self._commit(playlist_id, "repeat")
        return playlist

    async def cycle_repeat(self, playlist_id: str) -> RepeatMode:
        playlist = self.get(playlist_id)
        mode = playlist.cycle_repeat()
        await self._commit(playlist_id, "repeat")
        return mode

    # ── Helpers ──────────────────────────────────────────────────────

    def _find(self, playlist_id: str) -> Playlist | None:
        return next((p for p in self._playlists if p.id == playlist_id), None)

    async def _commit(self, playlist_id: str | None, reason: str) -> None:
        try:
            await self._repo.save_all(self._playlists)
            await self._repo.save_current_id(self._current_id)
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_SAVE_FAILED, "playlists")
        await self._event_bus.publish(PlaylistsChanged(playlist_id=playlist_id, reason=reason))
