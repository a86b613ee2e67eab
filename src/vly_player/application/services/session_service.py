"""Playback Session Service - drives the session state machine from commands and engine events."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from ...domain.playback.entities import PlaybackSession, SessionSnapshot
from ...domain.playback.value_objects import PlaybackRate, SessionHandle, SessionState
from ...domain.shared.constants import PlaybackConstants
from ...domain.shared.events import SessionFailed, SessionFinished, SessionStateChanged
from ...domain.shared.exceptions import SessionError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.media_engine import (
    EngineBufferUpdated,
    EngineEvent,
    EngineFinished,
    EngineState,
    EngineStateChanged,
    EngineTimeUpdated,
)

if TYPE_CHECKING:
    from ...domain.playlist.entities import MediaItem
    from ...domain.shared.events import EventBus
    from ..interfaces.media_engine import MediaEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlaybackSessionService:
    """Owns the single playback session and its engine handle.

    Every method runs on the event loop that called :meth:`start`. Engine
    callbacks arrive on engine threads and are queued onto that loop; a single
    pump task applies them in arrival order.
    """

    def __init__(
        self,
        *,
        engine: MediaEngine,
        event_bus: EventBus,
        seek_interval: float = PlaybackConstants.SEEK_INTERVAL_SECONDS,
        volume_step: float = PlaybackConstants.VOLUME_STEP,
        default_volume: float = PlaybackConstants.DEFAULT_VOLUME,
        default_rate: float = PlaybackConstants.DEFAULT_RATE,
    ) -> None:
        self._engine = engine
        self._event_bus = event_bus
        self._seek_interval = seek_interval
        self._volume_step = volume_step
        self._default_rate = PlaybackRate.nearest(default_rate)

        self._session = PlaybackSession()
        self._session.set_volume(default_volume)
        self._session.rate = self._default_rate

        self._loop: asyncio.AbstractEventLoop | None = None
        self._inbox: asyncio.Queue[EngineEvent] = asyncio.Queue()
        self._pump_task: asyncio.Task[None] | None = None

        # Cleared while engine.load is in flight so queued events wait for the handle.
        self._load_settled = asyncio.Event()
        self._load_settled.set()

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        """Attach to the engine and start the event pump on the running loop."""
        if self._pump_task is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._engine.set_event_sink(self._on_engine_event)
        self._pump_task = asyncio.create_task(self._pump(), name="engine-event-pump")
        logger.debug(LogTemplates.SESSION_PUMP_STARTED)

    async def close(self) -> None:
        """Stop the current session and the event pump."""
        await self.stop()
        self._engine.set_event_sink(None)
        if self._pump_task is not None:
            self._pump_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._pump_task
            self._pump_task = None
            logger.debug(LogTemplates.SESSION_PUMP_STOPPED)

    async def drain(self) -> None:
        """Wait until every engine event queued so far has been applied."""
        await self._inbox.join()

    def _on_engine_event(self, event: EngineEvent) -> None:
        # Called from engine threads.
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug(LogTemplates.SESSION_EVENT_DROPPED, event)
            return
        try:
            loop.call_soon_threadsafe(self._inbox.put_nowait, event)
        except RuntimeError:
            logger.debug(LogTemplates.SESSION_EVENT_DROPPED, event)

    async def _pump(self) -> None:
        while True:
            event = await self._inbox.get()
            try:
                await self._load_settled.wait()
                await self.handle_engine_event(event)
            except Exception:
                logger.exception("Failed to apply engine event %s", event)
            finally:
                self._inbox.task_done()

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def current_item(self) -> MediaItem | None:
        return self._session.item

    @property
    def current_time(self) -> float:
        return self._session.current_time

    @property
    def duration(self) -> float:
        return self._session.duration

    @property
    def handle(self) -> SessionHandle | None:
        return self._session.handle

    def snapshot(self) -> SessionSnapshot:
        return self._session.snapshot()

    # ── Engine events ────────────────────────────────────────────────

    async def handle_engine_event(self, event: EngineEvent) -> None:
        """Apply one engine event; events for any handle but the active one are ignored."""
        session = self._session
        if not session.owns(event.handle):
            logger.debug(LogTemplates.SESSION_STALE_EVENT, type(event).__name__, event.handle)
            return

        match event:
            case EngineStateChanged():
                await self._on_state_changed(event)
            case EngineTimeUpdated(current=current, total=total):
                session.update_time(current, total)
            case EngineBufferUpdated(consumed_time=consumed):
                session.update_buffer(consumed)
            case EngineFinished(error=None):
                await self._on_finished()
            case EngineFinished(error=error):
                await self._fail(ErrorMessages.ENGINE_PLAYBACK_FAILED.format(reason=error))

    async def _on_state_changed(self, event: EngineStateChanged) -> None:
        session = self._session
        if event.duration is not None and event.duration > 0 and session.state != SessionState.LOADING:
            session.duration = event.duration

        match event.state:
            case EngineState.READY if session.state == SessionState.LOADING:
                await self._on_ready(event.duration)
            case EngineState.PLAYING if session.state in (SessionState.READY, SessionState.PAUSED):
                await self._transition(session.mark_playing)
            case EngineState.PAUSED if session.state == SessionState.PLAYING:
                await self._transition(session.mark_paused)
            case _:
                logger.debug(LogTemplates.SESSION_COMMAND_IGNORED, event.state.value, session.state.value)

    async def _on_ready(self, duration: float | None) -> None:
        session = self._session
        handle = session.handle
        assert handle is not None
        seek_target = await self._transition(lambda: session.mark_ready(duration))
        logger.info(LogTemplates.SESSION_READY, session.item.title if session.item else "?", session.duration)

        await self._engine_call("set_rate", lambda: self._engine.set_rate(handle, session.rate.value))
        await self._engine_call(
            "set_volume", lambda: self._engine.set_volume(handle, session.effective_volume)
        )
        if seek_target:
            session.current_time = seek_target
            await self._engine_call(
                "seek", lambda: self._engine.seek(handle, seek_target, auto_play_after=False)
            )
        if session.autoplay:
            await self.play()

    async def _on_finished(self) -> None:
        session = self._session
        if session.state not in (SessionState.PLAYING, SessionState.PAUSED):
            logger.debug(LogTemplates.SESSION_COMMAND_IGNORED, "finished", session.state.value)
            return

        item = session.item
        handle = session.handle
        assert item is not None and handle is not None
        await self._transition(session.mark_finished)
        logger.info(LogTemplates.SESSION_FINISHED, item.title)
        await self._event_bus.publish(
            SessionFinished(handle=handle.value, item_id=item.id, duration=session.duration)
        )

    async def _fail(self, message: str) -> None:
        session = self._session
        if not session.state.has_media:
            return

        error = SessionError(message, item_id=session.item_id)
        handle = session.handle
        logger.error(LogTemplates.SESSION_FAILED, session.item.title if session.item else "?", error.message)
        await self._transition(lambda: session.fail(error.message))

        if handle is not None:
            session.handle = None
            await self._engine_call("release", lambda: self._engine.release(handle))
        await self._event_bus.publish(
            SessionFailed(
                handle=handle.value if handle else 0,
                item_id=error.item_id,
                message=error.message,
            )
        )

    # ── Session lifecycle ────────────────────────────────────────────

    async def load(
        self, item: MediaItem, start_position: float = 0.0, autoplay: bool = True
    ) -> SessionHandle | None:
        """Start a new session for ``item``, replacing any current one.

        Never raises. An engine that refuses the locator leaves the session in
        ERROR and None is returned.
        """
        session = self._session
        previous = session.handle
        if previous is not None:
            await self._engine_call("release", lambda: self._engine.release(previous))

        self._load_settled.clear()
        try:
            await self._transition(lambda: session.begin_load(item, start_position, autoplay))
            try:
                handle = await self._engine.load(item.locator)
            except Exception as e:
                logger.exception(LogTemplates.SESSION_ENGINE_CALL_FAILED, "load", item.locator)
                await self._fail(ErrorMessages.ENGINE_LOAD_FAILED.format(locator=item.locator, reason=e))
                return None
            session.attach(handle)
        finally:
            self._load_settled.set()

        logger.info(LogTemplates.SESSION_LOADING, item.title, handle, start_position)
        return handle

    async def stop(self) -> None:
        """Release the engine handle and return to idle. Safe to call in any state."""
        session = self._session
        handle = session.handle
        item = session.item
        if handle is not None:
            await self._engine_call("release", lambda: self._engine.release(handle))

        await self._transition(session.reset)
        session.rate = self._default_rate
        if item is not None:
            logger.info(LogTemplates.SESSION_STOPPED, item.title)

    # ── Transport ────────────────────────────────────────────────────

    async def play(self) -> bool:
        session = self._session
        if session.state not in (SessionState.READY, SessionState.PAUSED):
            logger.debug(LogTemplates.SESSION_COMMAND_IGNORED, "play", session.state.value)
            return False
        handle = session.handle
        assert handle is not None
        await self._transition(session.mark_playing)
        await self._engine_call("play", lambda: self._engine.play(handle))
        return True

    async def pause(self) -> bool:
        session = self._session
        if session.state != SessionState.PLAYING:
            logger.debug(LogTemplates.SESSION_COMMAND_IGNORED, "pause", session.state.value)
            return False
        handle = session.handle
        assert handle is not None
        await self._transition(session.mark_paused)
        await self._engine_call("pause", lambda: self._engine.pause(handle))
        return True

    async def play_pause(self) -> bool:
        if self._session.state == SessionState.PLAYING:
            return await self.pause()
        return await self.play()

    async def seek(self, target: float) -> float | None:
        """Seek to ``target`` seconds, clamped to the media.

        Returns the clamped time, or None when nothing is seekable yet.
        """
        session = self._session
        if not session.state.accepts_transport or session.duration <= 0:
            logger.debug(LogTemplates.SESSION_COMMAND_IGNORED, "seek", session.state.value)
            return None
        handle = session.handle
        assert handle is not None

        clamped = session.clamp_time(target)
        session.current_time = clamped
        logger.debug(LogTemplates.TRANSPORT_SEEK, clamped, target)
        await self._engine_call("seek", lambda: self._engine.seek(handle, clamped, auto_play_after=True))
        return clamped

    async def seek_forward(self, delta: float | None = None) -> float | None:
        return await self.seek(self._session.current_time + (self._seek_interval if delta is None else delta))

    async def seek_backward(self, delta: float | None = None) -> float | None:
        return await self.seek(self._session.current_time - (self._seek_interval if delta is None else delta))

    async def seek_to_fraction(self, fraction: float) -> float | None:
        fraction = max(0.0, min(1.0, fraction))
        return await self.seek(self._session.duration * fraction)

    async def set_volume(self, volume: float) -> float:
        session = self._session
        applied = session.set_volume(volume)
        logger.debug(LogTemplates.TRANSPORT_VOLUME, applied)
        await self._push_volume()
        return applied

    async def volume_up(self) -> float:
        return await self.set_volume(self._session.volume + self._volume_step)

    async def volume_down(self) -> float:
        return await self.set_volume(self._session.volume - self._volume_step)

    async def toggle_mute(self) -> bool:
        session = self._session
        session.muted = not session.muted
        await self._push_volume()
        return session.muted

    def toggle_fullscreen(self) -> bool:
        session = self._session
        session.fullscreen = not session.fullscreen
        return session.fullscreen

    async def set_rate(self, rate: float | PlaybackRate) -> PlaybackRate:
        """Apply a playback speed, snapping off-grid values to the nearest allowed rate."""
        session = self._session
        session.rate = rate if isinstance(rate, PlaybackRate) else PlaybackRate.nearest(rate)
        logger.debug(LogTemplates.TRANSPORT_RATE, session.rate.value)

        handle = session.handle
        if handle is not None and session.state.accepts_transport:
            value = session.rate.value
            await self._engine_call("set_rate", lambda: self._engine.set_rate(handle, value))
        return session.rate

    async def increase_rate(self) -> PlaybackRate:
        return await self.set_rate(self._session.rate.faster())

    async def decrease_rate(self) -> PlaybackRate:
        return await self.set_rate(self._session.rate.slower())

    async def reset_rate(self) -> PlaybackRate:
        return await self.set_rate(PlaybackRate.NORMAL)

    # ── Helpers ──────────────────────────────────────────────────────

    async def _push_volume(self) -> None:
        session = self._session
        handle = session.handle
        if handle is None or not session.state.has_media:
            return
        volume = session.effective_volume
        await self._engine_call("set_volume", lambda: self._engine.set_volume(handle, volume))

    async def _transition(self, change: Callable[[], T]) -> T:
        """Run a session mutation and publish the state change it caused, if any."""
        session = self._session
        previous = session.state
        result = change()
        if session.state != previous:
            logger.debug(LogTemplates.SESSION_STATE_CHANGED, session.handle, previous.value, session.state.value)
            await self._event_bus.publish(
                SessionStateChanged(
                    handle=session.handle.value if session.handle else 0,
                    item_id=session.item_id,
                    previous_state=previous.value,
                    new_state=session.state.value,
                )
            )
        return result

    async def _engine_call(self, name: str, call: Callable[[], Awaitable[None]]) -> None:
        try:
            await call()
        except Exception:
            logger.exception(LogTemplates.SESSION_ENGINE_CALL_FAILED, name, self._session.handle)
