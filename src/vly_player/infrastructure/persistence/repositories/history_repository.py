"""Key-value implementation of the watch history repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from vly_player.domain.history.entities import HistoryEntry
from vly_player.domain.history.repository import HistoryRepository
from vly_player.domain.shared.constants import StorageKeys

from .base import JsonBlob

if TYPE_CHECKING:
    from vly_player.application.interfaces.key_value_store import KeyValueStore

_ENTRIES = TypeAdapter(list[HistoryEntry])


class KVHistoryRepository(HistoryRepository):
    def __init__(self, store: KeyValueStore) -> None:
        self._entries = JsonBlob(store, StorageKeys.PLAYBACK_HISTORY, _ENTRIES)

    async def load(self) -> list[HistoryEntry]:
        return await self._entries.load() or []

    async def save(self, entries: list[HistoryEntry]) -> None:
        await self._entries.save(entries)
