"""Core domain entities for the watch history bounded context."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from vly_player.domain.playlist.entities import MediaItem
from vly_player.domain.shared.constants import HistoryConstants, PlaybackConstants
from vly_player.domain.shared.datetime_utils import format_clock, utcnow
from vly_player.domain.shared.types import NonEmptyStr, Seconds, UtcDatetimeField


class HistoryEntry(BaseModel):
    """One watched media item, as of the last time it was left or finished."""

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    item_id: NonEmptyStr
    title: str
    locator: str
    watched_at: UtcDatetimeField = Field(default_factory=utcnow)
    watch_duration: Seconds = 0.0
    total_duration: Seconds = 0.0

    @classmethod
    def for_item(cls, item: MediaItem, watched: float, total: float | None = None) -> HistoryEntry:
        return cls(
            item_id=item.id,
            title=item.title,
            locator=item.locator,
            watch_duration=max(0.0, watched),
            total_duration=max(0.0, total if total is not None else item.duration),
        )

    @property
    def completion(self) -> float:
        if self.total_duration <= 0:
            return 0.0
        return min(1.0, self.watch_duration / self.total_duration)

    @property
    def is_completed(self) -> bool:
        return self.completion >= PlaybackConstants.COMPLETION_THRESHOLD

    @property
    def watch_duration_formatted(self) -> str:
        return format_clock(self.watch_duration)


class HistoryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_entries: int = 0
    completed_entries: int = 0
    total_watch_time: Seconds = 0.0

    @property
    def completion_rate(self) -> float:
        if self.total_entries == 0:
            return 0.0
        return self.completed_entries / self.total_entries


class WatchHistory(BaseModel):
    """Most-recent-first list of history entries, one per media item."""

    entries: list[HistoryEntry] = Field(default_factory=list)
    max_entries: int = Field(default=HistoryConstants.MAX_ENTRIES, gt=0)

    def add(self, entry: HistoryEntry) -> None:
        """Record ``entry`` at the front, replacing any older entry for the same item."""
        self.entries = [e for e in self.entries if e.item_id != entry.item_id]
        self.entries.insert(0, entry)
        del self.entries[self.max_entries :]

    def remove(self, item_id: str) -> bool:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.item_id != item_id]
        return len(self.entries) != before

    def clear(self) -> int:
        count = len(self.entries)
        self.entries.clear()
        return count

    def latest_for(self, item_id: str) -> HistoryEntry | None:
        return next((e for e in self.entries if e.item_id == item_id), None)

    def recent(self, limit: int = 10) -> list[HistoryEntry]:
        return self.entries[:limit]

    def stats(self) -> HistoryStats:
        return HistoryStats(
            total_entries=len(self.entries),
            completed_entries=sum(1 for e in self.entries if e.is_completed),
            total_watch_time=sum(e.watch_duration for e in self.entries),
        )
