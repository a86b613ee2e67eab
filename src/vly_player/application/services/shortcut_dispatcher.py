"""Shortcut Dispatch Service - resolves key presses into one-shot shortcut commands."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import PersistenceError
from ...domain.shared.messages import LogTemplates
from ...domain.shortcuts.entities import ShortcutBinding, ShortcutTable
from ...domain.shortcuts.value_objects import KeyPress, ModifierKey, ShortcutAction
from ..commands.execute_shortcut import ShortcutCommand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ...domain.shortcuts.repository import ShortcutRepository

logger = logging.getLogger(__name__)


class ShortcutDispatcher:
    """Maps key presses onto the shortcut table.

    A matched press is consumed and exactly one :class:`ShortcutCommand` is put
    on the command channel; nothing is executed here. Unmatched presses, and
    every press while shortcuts are disabled, are left for the caller.
    """

    def __init__(
        self,
        *,
        shortcut_repository: ShortcutRepository,
        enabled: bool = True,
    ) -> None:
        self._repo = shortcut_repository
        self._table = ShortcutTable(enabled=enabled)
        self._commands: asyncio.Queue[ShortcutCommand] = asyncio.Queue()

    async def initialize(self) -> None:
        """Load the stored table, falling back to the defaults when it is missing or corrupt."""
        try:
            bindings = await self._repo.load_bindings()
            enabled = await self._repo.load_enabled()
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_LOAD_FAILED, "shortcuts")
            bindings, enabled = None, None

        if bindings is not None:
            self._table.bindings = bindings
        else:
            self._table.reset_to_defaults()
        if enabled is not None:
            self._table.enabled = enabled

        for winner, shadowed in self._table.conflicts():
            logger.warning(LogTemplates.SHORTCUT_CONFLICT, winner.action.value, shadowed.action.value, winner.display)

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def commands(self) -> asyncio.Queue[ShortcutCommand]:
        """The command channel; the orchestrator is its only consumer."""
        return self._commands

    @property
    def enabled(self) -> bool:
        return self._table.enabled

    @property
    def bindings(self) -> list[ShortcutBinding]:
        return list(self._table.bindings)

    def binding_for(self, action: ShortcutAction, argument: int | None = None) -> ShortcutBinding | None:
        return self._table.find(action, argument)

    def conflicts(self) -> list[tuple[ShortcutBinding, ShortcutBinding]]:
        return self._table.conflicts()

    # ── Dispatch ─────────────────────────────────────────────────────

    def handle_key(self, press: KeyPress) -> bool:
        """Resolve a key press and enqueue its command.

        Returns:
            True when the press was consumed by a binding.
        """
        if not self._table.enabled:
            logger.debug(LogTemplates.SHORTCUTS_DISABLED, press)
            return False

        binding = self._table.resolve(press)
        if binding is None:
            logger.debug(LogTemplates.SHORTCUT_UNMATCHED, press)
            return False

        self._commands.put_nowait(
            ShortcutCommand(action=binding.action, argument=binding.argument, key=str(press))
        )
        logger.debug(LogTemplates.SHORTCUT_DISPATCHED, press, binding.action.value)
        return True

    def handle(self, key: str, modifiers: Iterable[ModifierKey | str] = ()) -> bool:
        return self.handle_key(KeyPress.of(key, modifiers))

    # ── Editing ──────────────────────────────────────────────────────

    async def set_enabled(self, enabled: bool) -> None:
        self._table.enabled = enabled
        try:
            await self._repo.save_enabled(enabled)
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_SAVE_FAILED, "shortcuts")

    async def update_binding(self, binding: ShortcutBinding) -> bool:
        """Replace the binding with the same action and argument, keeping its table position."""
        replaced = self._table.replace(binding)
        if replaced:
            logger.info(LogTemplates.SHORTCUT_UPDATED, binding.action.value)
            await self._save_bindings()
        return replaced

    async def set_binding_enabled(
        self, action: ShortcutAction, enabled: bool, argument: int | None = None
    ) -> bool:
        binding = self._table.find(action, argument)
        if binding is None:
            return False
        return await self.update_binding(binding.model_copy(update={"enabled": enabled}))

    async def reset_to_defaults(self) -> None:
        self._table.reset_to_defaults()
        logger.info(LogTemplates.SHORTCUTS_RESET)
        await self._save_bindings()

    async def _save_bindings(self) -> None:
        try:
            await self._repo.save_bindings(self._table.bindings)
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_SAVE_FAILED, "shortcuts")
