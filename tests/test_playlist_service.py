"""
Unit Tests for PlaylistApplicationService

Tests for:
- Playlist collection CRUD and current-playlist selection
- Item mutations with persistence and change events
- Persistence failure fallbacks
"""

from unittest.mock import AsyncMock

import pytest

from vly_player.application.services.playlist_service import PlaylistApplicationService
from vly_player.domain.playlist.value_objects import RepeatMode, SortOrder
from vly_player.domain.shared.events import PlaylistsChanged
from vly_player.domain.shared.exceptions import EntityNotFoundError, PersistenceError
from vly_player.infrastructure.persistence.repositories.playlist_repository import (
    KVPlaylistRepository,
)


class TestPlaylistCollection:
    """Unit tests for playlist collection operations."""

    @pytest.mark.asyncio
    async def test_first_playlist_becomes_current(self, playlist_service):
        first = await playlist_service.create_playlist("Movies")
        await playlist_service.create_playlist("Shows")

        assert playlist_service.current_id == first.id

    @pytest.mark.asyncio
    async def test_delete_current_selects_another(self, playlist_service):
        first = await playlist_service.create_playlist("Movies")
        second = await playlist_service.create_playlist("Shows")

        assert await playlist_service.delete_playlist(first.id) is True

        assert playlist_service.current_id == second.id
        assert await playlist_service.delete_playlist(first.id) is False

    @pytest.mark.asyncio
    async def test_rename(self, playlist_service):
        playlist = await playlist_service.create_playlist("Old")

        await playlist_service.rename_playlist(playlist.id, "New")

        assert playlist_service.get(playlist.id).name == "New"

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, playlist_service):
        with pytest.raises(EntityNotFoundError):
            playlist_service.get("missing")

    @pytest.mark.asyncio
    async def test_set_current_none_clears(self, playlist_service, memory_store):
        await playlist_service.create_playlist("Movies")

        await playlist_service.set_current(None)

        assert playlist_service.current is None
        assert await memory_store.get("vly_current_playlist") is None

    @pytest.mark.asyncio
    async def test_collection_survives_reload(self, playlist_service, memory_store, event_bus, make_item):
        """Should restore playlists and the current selection from the store."""
        playlist = await playlist_service.create_playlist("Movies", [make_item("a"), make_item("b")])
        await playlist_service.set_repeat_mode(playlist.id, RepeatMode.ALL)

        reloaded = PlaylistApplicationService(
            playlist_repository=KVPlaylistRepository(memory_store), event_bus=event_bus
        )
        await reloaded.initialize()

        assert reloaded.current_id == playlist.id
        restored = reloaded.current
        assert [i.id for i in restored.items] == ["a", "b"]
        assert restored.repeat_mode == RepeatMode.ALL

    @pytest.mark.asyncio
    async def test_corrupt_store_starts_empty(self, memory_store, event_bus):
        """Should start with no playlists when the stored blob is corrupt."""
        await memory_store.set("vly_playlists", "[{]")
        service = PlaylistApplicationService(
            playlist_repository=KVPlaylistRepository(memory_store), event_bus=event_bus
        )

        await service.initialize()

        assert service.playlists == []
        assert service.current is None

    @pytest.mark.asyncio
    async def test_dangling_current_id_dropped(self, memory_store, event_bus):
        await memory_store.set("vly_current_playlist", '"gone"')
        service = PlaylistApplicationService(
            playlist_repository=KVPlaylistRepository(memory_store), event_bus=event_bus
        )

        await service.initialize()

        assert service.current_id is None

    @pytest.mark.asyncio
    async def test_save_failure_keeps_memory_state(self, event_bus):
        """Should log and carry on when the store cannot be written."""
        repo = AsyncMock()
        repo.load_all.return_value = []
        repo.load_current_id.return_value = None
        repo.save_all.side_effect = PersistenceError("vly_playlists")
        service = PlaylistApplicationService(playlist_repository=repo, event_bus=event_bus)
        await service.initialize()

        playlist = await service.create_playlist("Movies")

        assert service.get(playlist.id).name == "Movies"


class TestPlaylistItems:
    """Unit tests for item operations."""

    @pytest.mark.asyncio
    async def test_add_items_reports_duplicates(self, playlist_service, make_item):
        playlist = await playlist_service.create_playlist("P", [make_item("a")])

        result = await playlist_service.add_items(playlist.id, [make_item("a"), make_item("b")])

        assert [i.id for i in result.added] == ["b"]
        assert [i.id for i in result.skipped] == ["a"]
        assert result.playlist_length == 2

    @pytest.mark.asyncio
    async def test_mutations_publish_changes(self, playlist_service, event_bus, make_item):
        """Should announce each committed mutation."""
        reasons = []

        async def _on_change(event):
            reasons.append(event.reason)

        event_bus.subscribe(PlaylistsChanged, _on_change)
        playlist = await playlist_service.create_playlist("P")
        await playlist_service.add_items(playlist.id, [make_item("a"), make_item("b")])
        await playlist_service.move_item(playlist.id, 0, 1)
        await playlist_service.remove_item(playlist.id, "a")

        assert reasons == ["created", "items_added", "item_moved", "item_removed"]

    @pytest.mark.asyncio
    async def test_save_position(self, playlist_service, make_item):
        """Should store a clamped position on the item in its playlist."""
        playlist = await playlist_service.create_playlist("P", [make_item("a", duration=100)])

        updated = await playlist_service.save_position("a", 250.0)

        assert updated.last_position == 100.0
        assert playlist_service.get(playlist.id).get_item("a").last_position == 100.0

    @pytest.mark.asyncio
    async def test_save_position_unknown_item(self, playlist_service):
        assert await playlist_service.save_position("nope", 10.0) is None

    @pytest.mark.asyncio
    async def test_find_item_prefers_current(self, playlist_service, make_item):
        other = await playlist_service.create_playlist("Other", [make_item("shared")])
        current = await playlist_service.create_playlist("Current", [make_item("shared")])
        await playlist_service.set_current(current.id)

        playlist, _ = playlist_service.find_item("shared")

        assert playlist.id == current.id
        assert playlist.id != other.id

    @pytest.mark.asyncio
    async def test_sort_and_repeat(self, playlist_service, make_item):
        playlist = await playlist_service.create_playlist(
            "P", [make_item("b", "Bravo"), make_item("a", "Alpha")]
        )

        ordered = await playlist_service.sort(playlist.id, SortOrder.TITLE_ASC)
        mode = await playlist_service.cycle_repeat(playlist.id)
        shuffled = await playlist_service.set_shuffle(playlist.id, True)

        assert [i.id for i in ordered] == ["a", "b"]
        assert mode == RepeatMode.ONE
        assert shuffled.shuffle is True

    @pytest.mark.asyncio
    async def test_clear_and_remove_at(self, playlist_service, make_item):
        playlist = await playlist_service.create_playlist("P", [make_item("a"), make_item("b")])

        removed = await playlist_service.remove_at(playlist.id, 1)
        cleared = await playlist_service.clear(playlist.id)

        assert removed.id == "b"
        assert cleared == 1
