"""
Unit Tests for Dependency Injection Container

Tests for:
- Lazy initialization and caching of every component
- Engine injection (set_engine and its ordering guard)
- Settings flowing into the services they configure
- Lifecycle methods (initialize, shutdown) over an in-memory database
"""

import pytest

from vly_player.application.services.orchestrator import PlaybackOrchestrator
from vly_player.application.services.session_service import PlaybackSessionService
from vly_player.config.container import Container, create_container
from vly_player.config.settings import Settings
from vly_player.domain.shared.events import SessionFinished
from vly_player.infrastructure.engine.simulated_engine import SimulatedMediaEngine


@pytest.fixture
def settings():
    return Settings(
        database={"url": "sqlite:///:memory:"},
        playback={"auto_play_next": False, "seek_interval_seconds": 5.0},
        shortcuts={"enabled": False},
    )


@pytest.fixture
def container(settings):
    return create_container(settings)


class TestContainerComponents:
    """Tests for lazily created, cached components."""

    def test_create_container(self, settings):
        container = create_container(settings)

        assert isinstance(container, Container)
        assert container.settings is settings

    @pytest.mark.parametrize(
        "name",
        [
            "database",
            "key_value_store",
            "playlist_repository",
            "shortcut_repository",
            "history_repository",
            "event_bus",
            "session_service",
            "playlist_service",
            "shortcut_dispatcher",
            "history_service",
            "orchestrator",
        ],
    )
    def test_components_are_cached(self, container, name):
        assert getattr(container, name) is getattr(container, name)

    def test_default_engine_is_simulated(self, container):
        assert isinstance(container.engine, SimulatedMediaEngine)

    def test_database_uses_configured_url(self, container):
        assert container.database.is_memory

    def test_services_share_one_event_bus(self, container):
        """Should wire every service to the same bus instance."""
        assert container.session_service._event_bus is container.event_bus
        assert container.playlist_service._event_bus is container.event_bus

    def test_settings_reach_orchestrator_and_dispatcher(self, container):
        assert isinstance(container.orchestrator, PlaybackOrchestrator)
        assert container.orchestrator.auto_play_next is False
        assert container.shortcut_dispatcher.enabled is False

    def test_two_containers_do_not_share_state(self, settings):
        first = create_container(settings)
        second = create_container(settings)

        assert first.event_bus is not second.event_bus
        assert first.session_service is not second.session_service


class TestEngineInjection:
    def test_set_engine_used_by_session(self, container, fake_engine):
        container.set_engine(fake_engine)

        assert container.engine is fake_engine
        assert isinstance(container.session_service, PlaybackSessionService)
        assert container.session_service._engine is fake_engine

    def test_set_engine_after_session_rejected(self, container, fake_engine):
        """Should refuse to swap the engine once the session service exists."""
        _ = container.session_service

        with pytest.raises(RuntimeError):
            container.set_engine(fake_engine)


class TestContainerLifecycle:
    """Tests for initialize and shutdown."""

    @pytest.mark.asyncio
    async def test_initialize_and_shutdown(self, container, fake_engine):
        container.set_engine(fake_engine)

        await container.initialize()
        try:
            assert container.database.initialized
            playlist = await container.playlist_service.create_playlist("Default")
            assert container.playlist_service.current_id == playlist.id
            fake_engine.set_event_sink.assert_called()
        finally:
            await container.shutdown()

        fake_engine.close.assert_awaited_once()
        assert container.database.initialized is False
        assert container.event_bus.handler_count(SessionFinished) == 0

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, container, fake_engine):
        container.set_engine(fake_engine)

        await container.initialize()
        await container.initialize()
        await container.shutdown()

        assert fake_engine.set_event_sink.call_args_list[0].args[0] is not None

    @pytest.mark.asyncio
    async def test_shutdown_without_initialize(self, container):
        await container.shutdown()
