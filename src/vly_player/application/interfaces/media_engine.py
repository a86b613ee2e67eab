"""Port interface for the media decoding engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from vly_player.domain.playback.value_objects import SessionHandle


class EngineState(Enum):
    """Transport states an engine reports for a handle."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class EngineEvent:
    handle: SessionHandle


@dataclass(frozen=True)
class EngineStateChanged(EngineEvent):
    state: EngineState
    duration: float | None = None


@dataclass(frozen=True)
class EngineTimeUpdated(EngineEvent):
    current: float
    total: float | None = None


@dataclass(frozen=True)
class EngineFinished(EngineEvent):
    """End of media, or a decoding failure when ``error`` is set."""

    error: str | None = None


@dataclass(frozen=True)
class EngineBufferUpdated(EngineEvent):
    count: int
    consumed_time: float


EventSink = Callable[[EngineEvent], None]


class MediaEngine(ABC):
    """Interface for an opaque decoding engine.

    Events may be delivered on any thread through the sink passed to
    :meth:`set_event_sink`; consumers must marshal them themselves.
    """

    @abstractmethod
    def set_event_sink(self, sink: EventSink | None) -> None:
        """Install the callback that receives every engine event."""
        ...

    @abstractmethod
    async def load(self, locator: str) -> SessionHandle:
        """Begin loading a media locator and return its handle.

        Readiness is reported later with an ``EngineStateChanged(READY)``.

        Raises:
            Exception: Any failure to open the locator.
        """
        ...

    @abstractmethod
    async def play(self, handle: SessionHandle) -> None:
        ...

    @abstractmethod
    async def pause(self, handle: SessionHandle) -> None:
        ...

    @abstractmethod
    async def seek(self, handle: SessionHandle, time: float, auto_play_after: bool = True) -> None:
        """Move the playhead, resuming afterwards when ``auto_play_after`` is set."""
        ...

    @abstractmethod
    async def set_rate(self, handle: SessionHandle, rate: float) -> None:
        ...

    @abstractmethod
    async def set_volume(self, handle: SessionHandle, volume: float) -> None:
        ...

    @abstractmethod
    async def release(self, handle: SessionHandle) -> None:
        """Free the handle; no further events are emitted for it."""
        ...

    async def close(self) -> None:
        """Release engine-wide resources."""
        return None
