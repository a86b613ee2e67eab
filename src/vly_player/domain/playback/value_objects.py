"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SessionHandle:
    """Opaque engine-side identifier for one loaded media item."""

    value: int

    def __str__(self) -> str:
        return f"#{self.value}"

    def __int__(self) -> int:
        return self.value


class SessionState(Enum):
    """Playback session state with enforced transitions.

    State transitions:
    - IDLE -> LOADING (load)
    - LOADING -> READY (engine ready)
    - READY/PAUSED -> PLAYING (play)
    - PLAYING -> PAUSED (pause)
    - PLAYING/PAUSED -> FINISHED (end of media)
    - LOADING/READY/PLAYING/PAUSED -> ERROR (engine failure)
    - Any -> LOADING (a new load replaces the current session)
    - Any -> IDLE (stop)
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"
    ERROR = "error"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        if target in (SessionState.LOADING, SessionState.IDLE):
            return True
        valid_transitions = {
            SessionState.LOADING: {SessionState.READY, SessionState.ERROR},
            SessionState.READY: {SessionState.PLAYING, SessionState.ERROR},
            SessionState.PLAYING: {
                SessionState.PAUSED,
                SessionState.FINISHED,
                SessionState.ERROR,
            },
            SessionState.PAUSED: {
                SessionState.PLAYING,
                SessionState.FINISHED,
                SessionState.ERROR,
            },
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_terminal(self) -> bool:
        return self in {SessionState.FINISHED, SessionState.ERROR}

    @property
    def has_media(self) -> bool:
        """An engine handle is live in this state."""
        return self in {
            SessionState.LOADING,
            SessionState.READY,
            SessionState.PLAYING,
            SessionState.PAUSED,
        }

    @property
    def accepts_transport(self) -> bool:
        """Seek, rate and play/pause commands reach the engine in this state."""
        return self in {SessionState.READY, SessionState.PLAYING, SessionState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == SessionState.PLAYING


class PlaybackRate(Enum):
    """Allowed playback speeds, in ascending order."""

    HALF = 0.5
    THREE_QUARTERS = 0.75
    NORMAL = 1.0
    ONE_AND_QUARTER = 1.25
    ONE_AND_HALF = 1.5
    DOUBLE = 2.0

    @property
    def label(self) -> str:
        return f"{self.value:g}x"

    def faster(self) -> PlaybackRate:
        """Next higher rate, staying at the top of the range."""
        rates = list(PlaybackRate)
        index = rates.index(self)
        return rates[min(index + 1, len(rates) - 1)]

    def slower(self) -> PlaybackRate:
        """Next lower rate, staying at the bottom of the range."""
        rates = list(PlaybackRate)
        index = rates.index(self)
        return rates[max(index - 1, 0)]

    @classmethod
    def nearest(cls, value: float) -> PlaybackRate:
        """Snap an arbitrary speed to the closest allowed rate (lower one on ties)."""
        return min(cls, key=lambda rate: (abs(rate.value - value), rate.value))
