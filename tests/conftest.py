import random
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from vly_player.domain.playback.value_objects import SessionHandle

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from vly_player.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def kv_store(in_memory_database):
    """SQLite key-value store over the in-memory database."""
    from vly_player.infrastructure.persistence.key_value_store import SQLiteKeyValueStore

    return SQLiteKeyValueStore(in_memory_database)


@pytest.fixture
def memory_store():
    """Dictionary-backed key-value store."""
    from vly_player.infrastructure.persistence.key_value_store import InMemoryKeyValueStore

    return InMemoryKeyValueStore()


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_item():
    """Factory for media items with readable ids."""
    from vly_player.domain.playlist.entities import MediaItem

    def _make(item_id: str, title: str | None = None, duration: float = 0.0, **kwargs):
        return MediaItem(
            id=item_id,
            title=title or item_id,
            locator=f"/media/{item_id}.mp4",
            duration=duration,
            format="mp4",
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_item(make_item):
    return make_item("movie", title="Test Movie", duration=120.0)


@pytest.fixture
def abc_playlist(make_item):
    """Playlist holding items A, B and C in manual order."""
    from vly_player.domain.playlist.entities import Playlist

    playlist = Playlist(name="ABC")
    playlist.add_items([make_item("A"), make_item("B"), make_item("C")])
    return playlist


# ============================================================================
# Engine & Service Fixtures
# ============================================================================


@pytest.fixture
def fake_engine():
    """Mock media engine handing out sequential handles."""
    from vly_player.application.interfaces.media_engine import MediaEngine

    engine = MagicMock(spec=MediaEngine)
    counter = iter(range(1, 1000))
    engine.load = AsyncMock(side_effect=lambda locator: SessionHandle(next(counter)))
    engine.play = AsyncMock()
    engine.pause = AsyncMock()
    engine.seek = AsyncMock()
    engine.set_rate = AsyncMock()
    engine.set_volume = AsyncMock()
    engine.release = AsyncMock()
    engine.close = AsyncMock()
    return engine


@pytest.fixture
def event_bus():
    from vly_player.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture
def session_service(fake_engine, event_bus):
    """Session service driven by direct engine event calls (no pump)."""
    from vly_player.application.services.session_service import PlaybackSessionService

    return PlaybackSessionService(engine=fake_engine, event_bus=event_bus)


@pytest_asyncio.fixture
async def playlist_service(memory_store, event_bus):
    from vly_player.application.services.playlist_service import PlaylistApplicationService
    from vly_player.infrastructure.persistence.repositories.playlist_repository import (
        KVPlaylistRepository,
    )

    service = PlaylistApplicationService(
        playlist_repository=KVPlaylistRepository(memory_store),
        event_bus=event_bus,
    )
    await service.initialize()
    return service


@pytest_asyncio.fixture
async def history_service(memory_store):
    from vly_player.application.services.history_service import HistoryApplicationService
    from vly_player.infrastructure.persistence.repositories.history_repository import (
        KVHistoryRepository,
    )

    service = HistoryApplicationService(history_repository=KVHistoryRepository(memory_store))
    await service.initialize()
    return service


@pytest_asyncio.fixture
async def shortcut_dispatcher(memory_store):
    from vly_player.application.services.shortcut_dispatcher import ShortcutDispatcher
    from vly_player.infrastructure.persistence.repositories.shortcut_repository import (
        KVShortcutRepository,
    )

    dispatcher = ShortcutDispatcher(shortcut_repository=KVShortcutRepository(memory_store))
    await dispatcher.initialize()
    return dispatcher


@pytest.fixture
def seeded_rng():
    return random.Random(1234)
