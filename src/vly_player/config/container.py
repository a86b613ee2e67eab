"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for all services, repositories and adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.key_value_store import KeyValueStore
    from ..application.interfaces.media_engine import MediaEngine
    from ..application.services.history_service import HistoryApplicationService
    from ..application.services.orchestrator import PlaybackOrchestrator
    from ..application.services.playlist_service import PlaylistApplicationService
    from ..application.services.session_service import PlaybackSessionService
    from ..application.services.shortcut_dispatcher import ShortcutDispatcher
    from ..domain.history.repository import HistoryRepository
    from ..domain.playlist.repository import PlaylistRepository
    from ..domain.shared.events import EventBus
    from ..domain.shortcuts.repository import ShortcutRepository
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed. Nothing here is a
    module-level singleton; two containers never share state.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _key_value_store: KeyValueStore | None = None
    _playlist_repository: PlaylistRepository | None = None
    _shortcut_repository: ShortcutRepository | None = None
    _history_repository: HistoryRepository | None = None

    # Infrastructure adapters
    _engine: MediaEngine | None = None

    # Cross-cutting
    _event_bus: EventBus | None = None

    # Application services
    _session_service: PlaybackSessionService | None = None
    _playlist_service: PlaylistApplicationService | None = None
    _shortcut_dispatcher: ShortcutDispatcher | None = None
    _history_service: HistoryApplicationService | None = None
    _orchestrator: PlaybackOrchestrator | None = None

    _initialized: bool = False

    def set_engine(self, engine: MediaEngine) -> None:
        """Use a specific media engine instead of the configured one."""
        if self._session_service is not None:
            raise RuntimeError("Engine must be set before the session service is created")
        self._engine = engine

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    @property
    def key_value_store(self) -> KeyValueStore:
        if self._key_value_store is None:
            from ..infrastructure.persistence.key_value_store import SQLiteKeyValueStore

            self._key_value_store = SQLiteKeyValueStore(self.database)
        return self._key_value_store

    # === Repositories ===

    @property
    def playlist_repository(self) -> PlaylistRepository:
        if self._playlist_repository is None:
            from ..infrastructure.persistence.repositories.playlist_repository import (
                KVPlaylistRepository,
            )

            self._playlist_repository = KVPlaylistRepository(self.key_value_store)
        return self._playlist_repository

    @property
    def shortcut_repository(self) -> ShortcutRepository:
        if self._shortcut_repository is None:
            from ..infrastructure.persistence.repositories.shortcut_repository import (
                KVShortcutRepository,
            )

            self._shortcut_repository = KVShortcutRepository(self.key_value_store)
        return self._shortcut_repository

    @property
    def history_repository(self) -> HistoryRepository:
        if self._history_repository is None:
            from ..infrastructure.persistence.repositories.history_repository import (
                KVHistoryRepository,
            )

            self._history_repository = KVHistoryRepository(self.key_value_store)
        return self._history_repository

    # === Infrastructure Adapters ===

    @property
    def engine(self) -> MediaEngine:
        """Get the media engine."""
        if self._engine is None:
            from ..infrastructure.engine.simulated_engine import SimulatedMediaEngine

            engine_settings = self.settings.engine
            self._engine = SimulatedMediaEngine(
                tick_interval=engine_settings.tick_interval_seconds,
                default_duration=engine_settings.default_duration_seconds,
                time_scale=engine_settings.time_scale,
                check_files=engine_settings.check_files,
            )
        return self._engine

    # === Cross-cutting ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Application Services ===

    @property
    def session_service(self) -> PlaybackSessionService:
        """Get the playback session service."""
        if self._session_service is None:
            from ..application.services.session_service import PlaybackSessionService

            playback = self.settings.playback
            self._session_service = PlaybackSessionService(
                engine=self.engine,
                event_bus=self.event_bus,
                seek_interval=playback.seek_interval_seconds,
                volume_step=playback.volume_step,
                default_volume=playback.default_volume,
                default_rate=playback.default_rate,
            )
        return self._session_service

    @property
    def playlist_service(self) -> PlaylistApplicationService:
        if self._playlist_service is None:
            from ..application.services.playlist_service import PlaylistApplicationService

            self._playlist_service = PlaylistApplicationService(
                playlist_repository=self.playlist_repository,
                event_bus=self.event_bus,
            )
        return self._playlist_service

    @property
    def shortcut_dispatcher(self) -> ShortcutDispatcher:
        if self._shortcut_dispatcher is None:
            from ..application.services.shortcut_dispatcher import ShortcutDispatcher

            self._shortcut_dispatcher = ShortcutDispatcher(
                shortcut_repository=self.shortcut_repository,
                enabled=self.settings.shortcuts.enabled,
            )
        return self._shortcut_dispatcher

    @property
    def history_service(self) -> HistoryApplicationService:
        if self._history_service is None:
            from ..application.services.history_service import HistoryApplicationService

            self._history_service = HistoryApplicationService(
                history_repository=self.history_repository,
                max_entries=self.settings.history.max_entries,
            )
        return self._history_service

    @property
    def orchestrator(self) -> PlaybackOrchestrator:
        """Get the playback orchestrator."""
        if self._orchestrator is None:
            from ..application.services.orchestrator import PlaybackOrchestrator

            self._orchestrator = PlaybackOrchestrator(
                session_service=self.session_service,
                playlist_service=self.playlist_service,
                shortcut_dispatcher=self.shortcut_dispatcher,
                history_service=self.history_service,
                event_bus=self.event_bus,
                auto_play_next=self.settings.playback.auto_play_next,
                remember_position=self.settings.playback.remember_position,
            )
        return self._orchestrator

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        if self._initialized:
            return
        await self.database.initialize()

        await self.playlist_service.initialize()
        await self.shortcut_dispatcher.initialize()
        await self.history_service.initialize()

        await self.session_service.start()
        await self.orchestrator.start()

        self._initialized = True
        logger.info(LogTemplates.CONTAINER_INITIALIZED)

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        try:
            if self._orchestrator is not None:
                await self._orchestrator.shutdown()
        except Exception as exc:
            logger.warning("Failed stopping orchestrator: %r", exc)

        try:
            if self._session_service is not None:
                await self._session_service.close()
        except Exception as exc:
            logger.warning("Failed closing session service: %r", exc)

        if self._engine is not None:
            await self._engine.close()

        if self._event_bus is not None:
            self._event_bus.clear()

        if self._database is not None:
            await self._database.close()

        self._initialized = False
        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
