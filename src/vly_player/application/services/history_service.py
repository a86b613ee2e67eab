"""History Application Service - records what was watched and for how long."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.history.entities import HistoryEntry, HistoryStats, WatchHistory
from ...domain.shared.constants import HistoryConstants
from ...domain.shared.exceptions import PersistenceError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.history.repository import HistoryRepository
    from ...domain.playlist.entities import MediaItem

logger = logging.getLogger(__name__)


class HistoryApplicationService:
    def __init__(
        self,
        *,
        history_repository: HistoryRepository,
        max_entries: int = HistoryConstants.MAX_ENTRIES,
    ) -> None:
        self._repo = history_repository
        self._history = WatchHistory(max_entries=max_entries)

    async def initialize(self) -> None:
        try:
            entries = await self._repo.load()
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_LOAD_FAILED, "history")
            entries = []
        self._history.entries = entries[: self._history.max_entries]

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._history.entries)

    def recent(self, limit: int = 10) -> list[HistoryEntry]:
        return self._history.recent(limit)

    def latest_for(self, item_id: str) -> HistoryEntry | None:
        return self._history.latest_for(item_id)

    def stats(self) -> HistoryStats:
        return self._history.stats()

    async def record(self, item: MediaItem, watched: float, total: float | None = None) -> HistoryEntry:
        """Record a watch of ``item``, replacing its previous entry."""
        entry = HistoryEntry.for_item(item, watched, total)
        self._history.add(entry)
        logger.debug(LogTemplates.HISTORY_RECORDED, item.title, entry.completion * 100)
        await self._save()
        return entry

    async def remove(self, item_id: str) -> bool:
        removed = self._history.remove(item_id)
        if removed:
            await self._save()
        return removed

    async def clear(self) -> int:
        count = self._history.clear()
        logger.info(LogTemplates.HISTORY_CLEARED, count)
        await self._save()
        return count

    async def _save(self) -> None:
        try:
            await self._repo.save(self._history.entries)
        except PersistenceError:
            logger.exception(LogTemplates.PERSISTENCE_SAVE_FAILED, "history")
