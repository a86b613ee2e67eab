"""
Execute Shortcut Command

Command emitted by the shortcut dispatcher and the handler that turns it
into playback session calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ...domain.shared.events import UiNotification
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shortcuts.value_objects import ShortcutAction

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ..services.session_service import PlaybackSessionService

logger = logging.getLogger(__name__)


class ShortcutStatus(Enum):
    """Status codes for shortcut results."""

    APPLIED = "applied"
    IGNORED = "ignored"
    FORWARDED = "forwarded"
    ERROR = "error"


@dataclass(frozen=True)
class ShortcutCommand:
    """One resolved key press, consumed exactly once."""

    action: ShortcutAction
    argument: int | None = None
    key: str = ""

    def __post_init__(self) -> None:
        if self.action == ShortcutAction.SEEK_TO_PROGRESS:
            if self.argument is None or not 0 <= self.argument <= 9:
                raise ValueError(ErrorMessages.INVALID_PROGRESS_DECILE)


@dataclass
class ShortcutResult:
    """Result of executing a shortcut command."""

    status: ShortcutStatus
    action: ShortcutAction
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status in (ShortcutStatus.APPLIED, ShortcutStatus.FORWARDED)

    @classmethod
    def applied(cls, action: ShortcutAction, message: str = "") -> ShortcutResult:
        return cls(status=ShortcutStatus.APPLIED, action=action, message=message)

    @classmethod
    def ignored(cls, action: ShortcutAction) -> ShortcutResult:
        return cls(status=ShortcutStatus.IGNORED, action=action, message="Nothing to control")

    @classmethod
    def forwarded(cls, action: ShortcutAction) -> ShortcutResult:
        return cls(status=ShortcutStatus.FORWARDED, action=action)

    @classmethod
    def error(cls, action: ShortcutAction, message: str) -> ShortcutResult:
        return cls(status=ShortcutStatus.ERROR, action=action, message=message)


class ExecuteShortcutHandler:
    """Handler for ShortcutCommand.

    Transport actions are applied to the playback session. Everything else is
    published as a :class:`UiNotification` for the presentation layer.
    """

    def __init__(self, session_service: PlaybackSessionService, event_bus: EventBus) -> None:
        self._session = session_service
        self._event_bus = event_bus

    async def handle(self, command: ShortcutCommand) -> ShortcutResult:
        """Execute the shortcut command.

        Args:
            command: The resolved shortcut.

        Returns:
            The result of the operation.
        """
        action = command.action
        if not action.is_transport:
            logger.debug(LogTemplates.ORCHESTRATOR_UI_ACTION, action.value)
            await self._event_bus.publish(UiNotification(action=action.value, argument=command.argument))
            return ShortcutResult.forwarded(action)

        try:
            return await self._apply(command)
        except Exception as e:
            logger.exception(LogTemplates.SHORTCUT_COMMAND_FAILED, action.value)
            return ShortcutResult.error(action, str(e))

    async def _apply(self, command: ShortcutCommand) -> ShortcutResult:
        session = self._session
        action = command.action

        match action:
            case ShortcutAction.PLAY_PAUSE:
                changed = await session.play_pause()
                return ShortcutResult.applied(action) if changed else ShortcutResult.ignored(action)
            case ShortcutAction.SEEK_FORWARD:
                return self._seek_result(action, await session.seek_forward())
            case ShortcutAction.SEEK_BACKWARD:
                return self._seek_result(action, await session.seek_backward())
            case ShortcutAction.SEEK_TO_PROGRESS:
                fraction = (command.argument or 0) / 10
                return self._seek_result(action, await session.seek_to_fraction(fraction))
            case ShortcutAction.VOLUME_UP:
                volume = await session.volume_up()
                return ShortcutResult.applied(action, f"Volume {volume:.0%}")
            case ShortcutAction.VOLUME_DOWN:
                volume = await session.volume_down()
                return ShortcutResult.applied(action, f"Volume {volume:.0%}")
            case ShortcutAction.TOGGLE_MUTE:
                muted = await session.toggle_mute()
                return ShortcutResult.applied(action, "Muted" if muted else "Unmuted")
            case ShortcutAction.TOGGLE_FULLSCREEN:
                fullscreen = session.toggle_fullscreen()
                return ShortcutResult.applied(action, "Fullscreen" if fullscreen else "Windowed")
            case ShortcutAction.FASTER_PLAYBACK:
                rate = await session.increase_rate()
                return ShortcutResult.applied(action, rate.label)
            case ShortcutAction.SLOWER_PLAYBACK:
                rate = await session.decrease_rate()
                return ShortcutResult.applied(action, rate.label)
            case ShortcutAction.RESET_PLAYBACK_SPEED:
                rate = await session.reset_rate()
                return ShortcutResult.applied(action, rate.label)
            case _:
                return ShortcutResult.error(
                    action, ErrorMessages.UNKNOWN_SHORTCUT_ACTION.format(action=action.value)
                )

    @staticmethod
    def _seek_result(action: ShortcutAction, position: float | None) -> ShortcutResult:
        if position is None:
            return ShortcutResult.ignored(action)
        return ShortcutResult.applied(action, f"{position:.1f}s")
