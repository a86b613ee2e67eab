"""Key-value implementation of the shortcut repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from vly_player.domain.shared.constants import StorageKeys
from vly_player.domain.shortcuts.entities import ShortcutBinding
from vly_player.domain.shortcuts.repository import ShortcutRepository

from .base import JsonBlob

if TYPE_CHECKING:
    from vly_player.application.interfaces.key_value_store import KeyValueStore

_BINDINGS = TypeAdapter(list[ShortcutBinding])
_ENABLED = TypeAdapter(bool)


class KVShortcutRepository(ShortcutRepository):
    def __init__(self, store: KeyValueStore) -> None:
        self._bindings = JsonBlob(store, StorageKeys.KEYBOARD_SHORTCUTS, _BINDINGS)
        self._enabled = JsonBlob(store, StorageKeys.SHORTCUTS_ENABLED, _ENABLED)

    async def load_bindings(self) -> list[ShortcutBinding] | None:
        return await self._bindings.load()

    async def save_bindings(self, bindings: list[ShortcutBinding]) -> None:
        await self._bindings.save(bindings)

    async def load_enabled(self) -> bool | None:
        return await self._enabled.load()

    async def save_enabled(self, enabled: bool) -> None:
        await self._enabled.save(enabled)
