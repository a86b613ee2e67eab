"""In-process media engine that plays virtual media on a background clock thread.

No decoding happens. Each loaded locator gets a fixed duration and a playhead
advanced by a wall-clock ticker; every event is delivered from the ticker
thread, like a real engine's callback thread.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from vly_player.application.interfaces.media_engine import (
    EngineBufferUpdated,
    EngineEvent,
    EngineFinished,
    EngineState,
    EngineStateChanged,
    EngineTimeUpdated,
    EventSink,
    MediaEngine,
)
from vly_player.domain.playback.value_objects import SessionHandle
from vly_player.domain.shared.constants import EngineConstants
from vly_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


@dataclass
class _VirtualMedia:
    handle: SessionHandle
    locator: str
    duration: float
    position: float = 0.0
    rate: float = 1.0
    volume: float = 1.0
    playing: bool = False
    finished: bool = False
    buffer_count: int = 0
    outbox: list[EngineEvent] = field(default_factory=list)


class SimulatedMediaEngine(MediaEngine):
    """A ticking stand-in for a real decoder.

    Args:
        tick_interval: Wall-clock seconds between ticks.
        default_duration: Duration given to locators without an explicit one.
        durations: Per-locator durations.
        time_scale: Media seconds advanced per wall-clock second at rate 1.0.
        check_files: Report a playback error for local paths that do not exist.
    """

    def __init__(
        self,
        *,
        tick_interval: float = EngineConstants.TICK_INTERVAL_SECONDS,
        default_duration: float = EngineConstants.DEFAULT_DURATION_SECONDS,
        durations: dict[str, float] | None = None,
        time_scale: float = 1.0,
        check_files: bool = False,
    ) -> None:
        self._tick_interval = tick_interval
        self._default_duration = default_duration
        self._durations = dict(durations or {})
        self._time_scale = time_scale
        self._check_files = check_files

        self._lock = threading.Lock()
        self._media: dict[SessionHandle, _VirtualMedia] = {}
        self._handles = itertools.count(1)
        self._sink: EventSink | None = None
        self._thread: threading.Thread | None = None
        self._stopping = threading.Event()

    # ── MediaEngine ──────────────────────────────────────────────────

    def set_event_sink(self, sink: EventSink | None) -> None:
        with self._lock:
            self._sink = sink

    async def load(self, locator: str) -> SessionHandle:
        if not locator:
            raise ValueError("Empty media locator")

        handle = SessionHandle(next(self._handles))
        media = _VirtualMedia(
            handle=handle,
            locator=locator,
            duration=self._durations.get(locator, self._default_duration),
        )

        missing = self._check_files and self._is_missing_file(locator)
        if missing:
            media.outbox.append(EngineFinished(handle, error=f"No such file: {locator}"))
        else:
            media.outbox.append(EngineStateChanged(handle, EngineState.READY, duration=media.duration))

        with self._lock:
            self._media[handle] = media
        self._ensure_thread()
        logger.debug(LogTemplates.ENGINE_LOADED, locator, handle)
        return handle

    async def play(self, handle: SessionHandle) -> None:
        with self._lock:
            media = self._media.get(handle)
            if media is None or media.finished or media.playing:
                return
            media.playing = True
            media.outbox.append(EngineStateChanged(handle, EngineState.PLAYING))

    async def pause(self, handle: SessionHandle) -> None:
        with self._lock:
            media = self._media.get(handle)
            if media is None or not media.playing:
                return
            media.playing = False
            media.outbox.append(EngineStateChanged(handle, EngineState.PAUSED))

    async def seek(self, handle: SessionHandle, time: float, auto_play_after: bool = True) -> None:
        with self._lock:
            media = self._media.get(handle)
            if media is None:
                return
            media.position = max(0.0, min(time, media.duration))
            media.finished = False
            media.outbox.append(EngineTimeUpdated(handle, media.position, media.duration))
            if auto_play_after and not media.playing:
                media.playing = True
                media.outbox.append(EngineStateChanged(handle, EngineState.PLAYING))

    async def set_rate(self, handle: SessionHandle, rate: float) -> None:
        with self._lock:
            media = self._media.get(handle)
            if media is not None:
                media.rate = rate

    async def set_volume(self, handle: SessionHandle, volume: float) -> None:
        with self._lock:
            media = self._media.get(handle)
            if media is not None:
                media.volume = volume

    async def release(self, handle: SessionHandle) -> None:
        with self._lock:
            released = self._media.pop(handle, None)
        if released is not None:
            logger.debug(LogTemplates.ENGINE_RELEASED, handle)

    async def close(self) -> None:
        self._stopping.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=self._tick_interval * 4)
            self._thread = None
        with self._lock:
            self._media.clear()

    # ── Introspection ────────────────────────────────────────────────

    def position_of(self, handle: SessionHandle) -> float | None:
        with self._lock:
            media = self._media.get(handle)
            return media.position if media else None

    def volume_of(self, handle: SessionHandle) -> float | None:
        with self._lock:
            media = self._media.get(handle)
            return media.volume if media else None

    def rate_of(self, handle: SessionHandle) -> float | None:
        with self._lock:
            media = self._media.get(handle)
            return media.rate if media else None

    @property
    def live_handles(self) -> list[SessionHandle]:
        with self._lock:
            return list(self._media)

    # ── Clock thread ─────────────────────────────────────────────────

    def _ensure_thread(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopping.clear()
        self._thread = threading.Thread(target=self._run, name="simulated-engine-clock", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        logger.debug(LogTemplates.ENGINE_THREAD_STARTED)
        while not self._stopping.wait(self._tick_interval):
            self._tick(self._tick_interval * self._time_scale)
        logger.debug(LogTemplates.ENGINE_THREAD_STOPPED)

    def _tick(self, elapsed: float) -> None:
        with self._lock:
            sink = self._sink
            events: list[EngineEvent] = []
            for media in self._media.values():
                events.extend(media.outbox)
                media.outbox.clear()
                if media.playing:
                    events.extend(self._advance(media, elapsed))

        if sink is None:
            if events:
                logger.debug(LogTemplates.ENGINE_EVENTS_DROPPED, len(events))
            return
        for event in events:
            try:
                sink(event)
            except Exception:
                logger.exception("Engine event sink raised for %s", event)

    def _advance(self, media: _VirtualMedia, elapsed: float) -> list[EngineEvent]:
        media.position = min(media.duration, media.position + elapsed * media.rate)
        media.buffer_count += 1
        ahead = min(EngineConstants.BUFFER_CHUNK_SECONDS, media.duration - media.position)
        events: list[EngineEvent] = [
            EngineTimeUpdated(media.handle, media.position, media.duration),
            EngineBufferUpdated(media.handle, media.buffer_count, ahead),
        ]
        if media.position >= media.duration:
            media.playing = False
            media.finished = True
            events.append(EngineFinished(media.handle))
        return events

    @staticmethod
    def _is_missing_file(locator: str) -> bool:
        parsed = urlparse(locator)
        if parsed.scheme and parsed.scheme != "file" and len(parsed.scheme) > 1:
            return False
        path = Path(parsed.path if parsed.scheme == "file" else locator)
        return not path.exists()
