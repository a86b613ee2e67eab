"""Playback Orchestrator - glues shortcuts, the session state machine and playlist navigation."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...domain.playback.value_objects import PlaybackRate, SessionState
from ...domain.playlist.services import PlaylistNavigator
from ...domain.playlist.value_objects import Direction, RepeatMode, SortOrder
from ...domain.shared.events import SessionFinished, SessionStateChanged
from ...domain.shared.messages import LogTemplates
from ..commands.execute_shortcut import ExecuteShortcutHandler, ShortcutResult

if TYPE_CHECKING:
    from ...domain.playback.entities import SessionSnapshot
    from ...domain.playlist.entities import MediaItem, Playlist
    from ...domain.shared.events import EventBus
    from ...domain.shortcuts.value_objects import ModifierKey
    from .history_service import HistoryApplicationService
    from .playlist_service import AddItemsResult, PlaylistApplicationService
    from .session_service import PlaybackSessionService
    from .shortcut_dispatcher import ShortcutDispatcher

logger = logging.getLogger(__name__)


class PlaybackOrchestrator:
    """UI-facing entry point for the playback core.

    Reacts to finished sessions by choosing what plays next, consumes the
    shortcut command channel, and remembers playback positions and history
    whenever playback leaves an item.
    """

    def __init__(
        self,
        *,
        session_service: PlaybackSessionService,
        playlist_service: PlaylistApplicationService,
        shortcut_dispatcher: ShortcutDispatcher,
        history_service: HistoryApplicationService,
        event_bus: EventBus,
        auto_play_next: bool = True,
        remember_position: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self._session = session_service
        self._playlists = playlist_service
        self._dispatcher = shortcut_dispatcher
        self._history = history_service
        self._event_bus = event_bus
        self._auto_play_next = auto_play_next
        self._remember_position = remember_position
        self._rng = rng or random.Random()

        self._shortcut_handler = ExecuteShortcutHandler(session_service, event_bus)
        self._consumer_task: asyncio.Task[None] | None = None
        self._last_result: ShortcutResult | None = None

        # Playlist the loaded item was picked from
        self._playlist_id: str | None = None

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        if self._consumer_task is not None:
            return
        self._event_bus.subscribe(SessionFinished, self._on_session_finished)
        self._event_bus.subscribe(SessionStateChanged, self._on_state_changed)
        self._consumer_task = asyncio.create_task(self._consume_commands(), name="shortcut-consumer")
        logger.info(LogTemplates.ORCHESTRATOR_STARTED)

    async def shutdown(self) -> None:
        await self._leave_current()
        self._event_bus.unsubscribe(SessionFinished, self._on_session_finished)
        self._event_bus.unsubscribe(SessionStateChanged, self._on_state_changed)
        if self._consumer_task is not None:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
            self._consumer_task = None
        logger.info(LogTemplates.ORCHESTRATOR_STOPPED)

    # ── Settings ─────────────────────────────────────────────────────

    @property
    def auto_play_next(self) -> bool:
        return self._auto_play_next

    @auto_play_next.setter
    def auto_play_next(self, value: bool) -> None:
        self._auto_play_next = value

    @property
    def remember_position(self) -> bool:
        return self._remember_position

    @remember_position.setter
    def remember_position(self, value: bool) -> None:
        self._remember_position = value

    # ── Queries ──────────────────────────────────────────────────────

    def snapshot(self) -> SessionSnapshot:
        return self._session.snapshot()

    @property
    def active_playlist(self) -> Playlist | None:
        """The playlist navigation runs over: the one the current item came from, else the selected one."""
        if self._playlist_id is not None:
            for playlist in self._playlists.playlists:
                if playlist.id == self._playlist_id:
                    return playlist
        return self._playlists.current

    @property
    def last_shortcut_result(self) -> ShortcutResult | None:
        return self._last_result

    # ── Keyboard ─────────────────────────────────────────────────────

    def handle_key(self, key: str, modifiers: Iterable[ModifierKey | str] = ()) -> bool:
        """Offer a key press to the shortcut table; True when it was consumed."""
        return self._dispatcher.handle(key, modifiers)

    async def process_pending_commands(self) -> None:
        """Wait until every dispatched shortcut command has been executed."""
        await self._dispatcher.commands.join()

    async def _consume_commands(self) -> None:
        commands = self._dispatcher.commands
        while True:
            command = await commands.get()
            try:
                self._last_result = await self._shortcut_handler.handle(command)
            except Exception:
                logger.exception(LogTemplates.SHORTCUT_COMMAND_FAILED, command.action.value)
            finally:
                commands.task_done()

    # ── Navigation ───────────────────────────────────────────────────

    async def select_item(self, item_id: str, playlist_id: str | None = None) -> bool:
        """Play an item chosen by the user, resuming from its saved position when enabled."""
        playlist = self._playlists.get(playlist_id) if playlist_id else self.active_playlist
        if playlist is None:
            logger.warning(LogTemplates.ORCHESTRATOR_NO_PLAYLIST)
            return False
        item = playlist.get_item(item_id)
        if item is None:
            return False

        await self._leave_current()
        return await self._load(playlist, item, self._start_position(item))

    async def play_playlist(self, playlist_id: str | None = None) -> bool:
        """Start a playlist from the first item of its ordered view."""
        playlist = self._playlists.get(playlist_id) if playlist_id else self._playlists.current
        if playlist is None:
            logger.warning(LogTemplates.ORCHESTRATOR_NO_PLAYLIST)
            return False
        first = PlaylistNavigator.next_item(playlist, None)
        if first is None:
            return False
        await self._leave_current()
        return await self._load(playlist, first, self._start_position(first))

    async def next(self) -> MediaItem | None:
        return await self._step(Direction.NEXT)

    async def previous(self) -> MediaItem | None:
        return await self._step(Direction.PREVIOUS)

    async def _step(self, direction: Direction) -> MediaItem | None:
        playlist = self.active_playlist
        if playlist is None:
            logger.warning(LogTemplates.ORCHESTRATOR_NO_PLAYLIST)
            return None

        current = self._session.current_item
        current_id = current.id if current else None
        target = PlaylistNavigator.step(playlist, current_id, direction, rng=self._rng)
        if target is None:
            logger.info(LogTemplates.NAVIGATION_EXHAUSTED, direction.value, current_id, playlist.name)
            return None

        await self._leave_current()
        await self._load(playlist, target, self._start_position(target))
        return target

    async def _on_session_finished(self, event: SessionFinished) -> None:
        item = self._session.current_item
        if item is None or item.id != event.item_id:
            return

        await self._history.record(item, event.duration or self._session.duration, event.duration or None)
        if self._remember_position:
            await self._playlists.save_position(item.id, 0.0)

        playlist = self.active_playlist
        if playlist is None:
            return

        if playlist.repeat_mode == RepeatMode.ONE:
            logger.info(LogTemplates.NAVIGATION_REPEAT_ONE, item.title)
            await self._load(playlist, playlist.get_item(item.id) or item, 0.0)
            return

        if not self._auto_play_next:
            logger.info(LogTemplates.AUTO_ADVANCE_DISABLED, item.title)
            return

        following = PlaylistNavigator.next_item(playlist, item.id, rng=self._rng)
        if following is None:
            logger.info(LogTemplates.NAVIGATION_EXHAUSTED, "next", item.title, playlist.name)
            return

        logger.info(LogTemplates.NAVIGATION_ADVANCE, following.title)
        await self._load(playlist, following, self._start_position(following))

    async def _on_state_changed(self, event: SessionStateChanged) -> None:
        if event.new_state != SessionState.READY.value or event.item_id is None:
            return
        duration = self._session.duration
        found = self._playlists.find_item(event.item_id)
        if found is None or duration <= 0:
            return
        playlist, item = found
        if item.duration != duration:
            await self._playlists.update_item(playlist.id, item.with_duration(duration))

    # ── Transport ────────────────────────────────────────────────────

    async def play(self) -> bool:
        return await self._session.play()

    async def pause(self) -> bool:
        return await self._session.pause()

    async def play_pause(self) -> bool:
        return await self._session.play_pause()

    async def seek(self, target: float) -> float | None:
        return await self._session.seek(target)

    async def seek_to_fraction(self, fraction: float) -> float | None:
        return await self._session.seek_to_fraction(fraction)

    async def set_volume(self, volume: float) -> float:
        return await self._session.set_volume(volume)

    async def set_rate(self, rate: float) -> PlaybackRate:
        return await self._session.set_rate(rate)

    async def toggle_mute(self) -> bool:
        return await self._session.toggle_mute()

    def toggle_fullscreen(self) -> bool:
        return self._session.toggle_fullscreen()

    async def stop(self) -> None:
        await self._leave_current()
        await self._session.stop()
        self._playlist_id = None

    # ── Playlist commands ────────────────────────────────────────────

    async def create_playlist(self, name: str, items: Iterable[MediaItem] = ()) -> Playlist:
        return await self._playlists.create_playlist(name, items)

    async def add_items(self, playlist_id: str, items: Iterable[MediaItem]) -> AddItemsResult:
        return await self._playlists.add_items(playlist_id, items)

    async def remove_item(self, playlist_id: str, item_id: str) -> MediaItem | None:
        return await self._playlists.remove_item(playlist_id, item_id)

    async def move_item(self, playlist_id: str, from_index: int, to_index: int) -> bool:
        return await self._playlists.move_item(playlist_id, from_index, to_index)

    async def sort(self, playlist_id: str, order: SortOrder) -> list[MediaItem]:
        return await self._playlists.sort(playlist_id, order)

    async def set_current(self, playlist_id: str | None) -> Playlist | None:
        return await self._playlists.set_current(playlist_id)

    # ── Helpers ──────────────────────────────────────────────────────

    def _start_position(self, item: MediaItem) -> float:
        if not self._remember_position:
            return 0.0
        # A position at the very end would finish immediately.
        if item.has_duration and item.last_position >= item.duration:
            return 0.0
        return item.last_position

    async def _load(self, playlist: Playlist, item: MediaItem, start_position: float) -> bool:
        self._playlist_id = playlist.id
        handle = await self._session.load(item, start_position=start_position)
        return handle is not None

    async def _leave_current(self) -> None:
        """Save the position of the item being left and record it in history."""
        item = self._session.current_item
        if item is None or not self._session.state.has_media:
            return
        position = self._session.current_time
        if position <= 0:
            return
        if self._remember_position:
            await self._playlists.save_position(item.id, position)
        await self._history.record(item, position, self._session.duration or None)
