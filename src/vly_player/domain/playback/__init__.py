"""
Playback Bounded Context

The single live playback session and its state machine.
"""

from vly_player.domain.playback.entities import PlaybackSession, SessionSnapshot
from vly_player.domain.playback.value_objects import PlaybackRate, SessionHandle, SessionState

__all__ = [
    "PlaybackSession",
    "SessionSnapshot",
    "PlaybackRate",
    "SessionHandle",
    "SessionState",
]
