"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from vly_player.domain.playback.value_objects import PlaybackRate, SessionHandle, SessionState
from vly_player.domain.playlist.entities import MediaItem
from vly_player.domain.shared.constants import PlaybackConstants
from vly_player.domain.shared.datetime_utils import format_clock
from vly_player.domain.shared.exceptions import InvalidOperationError
from vly_player.domain.shared.types import Seconds, UnitInterval


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class SessionSnapshot(BaseModel):
    """Read-only view of the playback session for rendering."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    item_id: str | None = None
    title: str | None = None
    current_time: Seconds = 0.0
    duration: Seconds = 0.0
    buffered: UnitInterval = 0.0
    rate: PlaybackRate = PlaybackRate.NORMAL
    volume: UnitInterval = PlaybackConstants.DEFAULT_VOLUME
    muted: bool = False
    fullscreen: bool = False
    error_message: str | None = None

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return _clamp_unit(self.current_time / self.duration)

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.muted else self.volume

    @property
    def time_formatted(self) -> str:
        return f"{format_clock(self.current_time)} / {format_clock(self.duration)}"


class PlaybackSession(BaseModel):
    """Ephemeral playback state for the single active media item.

    Never persisted. One instance lives for the lifetime of the session service;
    ``load`` starts a fresh session on it and ``reset`` returns it to idle.
    Volume survives resets, the other transport settings do not.
    """

    item: MediaItem | None = None
    handle: SessionHandle | None = None
    state: SessionState = SessionState.IDLE
    current_time: Seconds = 0.0
    duration: Seconds = 0.0
    buffered: UnitInterval = 0.0
    rate: PlaybackRate = PlaybackRate.NORMAL
    volume: UnitInterval = PlaybackConstants.DEFAULT_VOLUME
    muted: bool = False
    fullscreen: bool = False
    error_message: str | None = None

    # Seek applied once the engine reports ready
    pending_seek: Seconds | None = None
    autoplay: bool = True

    @property
    def item_id(self) -> str | None:
        return self.item.id if self.item else None

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.muted else self.volume

    def owns(self, handle: SessionHandle | None) -> bool:
        return handle is not None and self.handle == handle

    def transition_to(self, new_state: SessionState) -> None:
        """Transition to a new session state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def begin_load(self, item: MediaItem, start_position: float = 0.0, autoplay: bool = True) -> None:
        """Start a fresh session for ``item``; the engine handle is attached separately."""
        self.transition_to(SessionState.LOADING)
        self.item = item
        self.handle = None
        self.current_time = 0.0
        self.duration = 0.0
        self.buffered = 0.0
        self.error_message = None
        self.pending_seek = start_position if start_position > 0 else None
        self.autoplay = autoplay

    def attach(self, handle: SessionHandle) -> None:
        self.handle = handle

    def mark_ready(self, duration: float | None) -> float | None:
        """Record the engine-reported duration and return the pending seek target, if any."""
        self.transition_to(SessionState.READY)
        if duration is not None:
            self.duration = max(0.0, duration)
        pending, self.pending_seek = self.pending_seek, None
        if pending is None:
            return None
        return self.clamp_time(pending)

    def mark_playing(self) -> None:
        self.transition_to(SessionState.PLAYING)

    def mark_paused(self) -> None:
        self.transition_to(SessionState.PAUSED)

    def mark_finished(self) -> None:
        self.transition_to(SessionState.FINISHED)
        if self.duration > 0:
            self.current_time = self.duration

    def fail(self, message: str) -> None:
        """Enter the terminal error state, surfacing ``message``."""
        self.transition_to(SessionState.ERROR)
        self.error_message = message
        self.pending_seek = None

    def reset(self) -> None:
        """Return to idle, dropping the item and the transport settings except volume."""
        self.state = SessionState.IDLE
        self.item = None
        self.handle = None
        self.current_time = 0.0
        self.duration = 0.0
        self.buffered = 0.0
        self.rate = PlaybackRate.NORMAL
        self.muted = False
        self.fullscreen = False
        self.error_message = None
        self.pending_seek = None
        self.autoplay = True

    def clamp_time(self, target: float) -> float:
        return max(0.0, min(target, self.duration))

    def update_time(self, current: float, total: float | None = None) -> None:
        if total is not None and total > 0:
            self.duration = total
        self.current_time = max(0.0, current)
        if self.duration > 0:
            self.current_time = min(self.current_time, self.duration)

    def update_buffer(self, consumed_time: float) -> None:
        """Recompute the buffered fraction from the seconds buffered past the playhead."""
        if self.duration <= 0:
            self.buffered = 0.0
            return
        self.buffered = _clamp_unit((self.current_time + consumed_time) / self.duration)

    def set_volume(self, volume: float) -> float:
        self.volume = _clamp_unit(volume)
        return self.volume

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            item_id=self.item_id,
            title=self.item.title if self.item else None,
            current_time=self.current_time,
            duration=self.duration,
            buffered=self.buffered,
            rate=self.rate,
            volume=self.volume,
            muted=self.muted,
            fullscreen=self.fullscreen,
            error_message=self.error_message,
        )
