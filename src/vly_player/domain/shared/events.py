"""Domain events and the in-process bus that delivers them."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from vly_player.domain.shared.datetime_utils import utcnow
from vly_player.domain.shared.types import NonEmptyStr, NonNegativeFloat, UtcDatetimeField

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


# === Playback Events ===


class SessionStateChanged(DomainEvent):
    handle: int = 0
    item_id: str | None = None
    previous_state: str = ""
    new_state: str = ""


class SessionFinished(DomainEvent):
    """The engine reached end-of-media on the active handle."""

    handle: int = 0
    item_id: str = ""
    duration: NonNegativeFloat = 0.0


class SessionFailed(DomainEvent):
    handle: int = 0
    item_id: str | None = None
    message: str = ""


# === Playlist Events ===


class PlaylistsChanged(DomainEvent):
    playlist_id: str | None = None
    reason: str = ""


# === UI Events ===


class UiNotification(DomainEvent):
    """An action with no playback meaning, forwarded to the UI layer untouched."""

    action: str = ""
    argument: int | None = None


# === Event Bus ===


class EventBus:
    """Routes each published event to the handlers subscribed to its exact type.

    Handlers of one event run concurrently and ``publish`` returns once all of
    them are done. A handler that raises is logged and does not affect the others.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("%s subscribed to %s", getattr(handler, "__qualname__", handler), event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        with contextlib.suppress(ValueError):
            self._handlers[event_type].remove(handler)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, ()))

    async def publish(self, event: DomainEvent) -> None:
        name = type(event).__name__
        handlers = tuple(self._handlers.get(type(event), ()))
        if not handlers:
            return

        async def run(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception:
                logger.exception("Handler %s failed on %s", getattr(handler, "__qualname__", handler), name)

        async with asyncio.TaskGroup() as group:
            for handler in handlers:
                group.create_task(run(handler))

    def clear(self) -> None:
        self._handlers.clear()
