"""Core domain entities for the playlist bounded context."""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Iterable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from vly_player.domain.playlist.value_objects import RepeatMode, SortOrder
from vly_player.domain.shared.constants import PlaybackConstants
from vly_player.domain.shared.datetime_utils import format_clock, utcnow
from vly_player.domain.shared.exceptions import BusinessRuleViolationError
from vly_player.domain.shared.messages import ErrorMessages
from vly_player.domain.shared.types import (
    NonEmptyStr,
    PlaylistNameStr,
    Seconds,
    TitleStr,
    UtcDatetimeField,
)


def _new_id() -> str:
    return str(uuid4())


class MediaItem(BaseModel):
    """Immutable reference to a playable file or stream.

    Position saves produce a new copy via :meth:`with_position`.
    """

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr = Field(default_factory=_new_id)
    title: TitleStr
    locator: NonEmptyStr
    duration: Seconds = 0.0
    last_position: Seconds = 0.0
    format: str = ""
    date_added: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def has_duration(self) -> bool:
        return self.duration > 0

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS."""
        if not self.has_duration:
            return "Unknown"
        return format_clock(self.duration)

    @property
    def display_title(self) -> str:
        if self.has_duration:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    @property
    def progress(self) -> float:
        """Fraction of the item already watched, 0.0 when the duration is unknown."""
        if not self.has_duration:
            return 0.0
        return min(1.0, self.last_position / self.duration)

    @property
    def is_stream(self) -> bool:
        return self.format.lower() in PlaybackConstants.STREAM_FORMATS

    def with_position(self, position: float) -> MediaItem:
        """Return a copy with the saved playback position, clamped to the known duration."""
        position = max(0.0, position)
        if self.has_duration:
            position = min(position, self.duration)
        return self.model_copy(update={"last_position": position})

    def with_duration(self, duration: float) -> MediaItem:
        duration = max(0.0, duration)
        update: dict[str, float] = {"duration": duration}
        if duration > 0 and self.last_position > duration:
            update["last_position"] = duration
        return self.model_copy(update=update)


def sort_items(items: Iterable[MediaItem], order: SortOrder) -> list[MediaItem]:
    """Return a stably sorted copy of ``items``.

    Title orders compare case-insensitively with the current locale's collation.
    Date-added and duration orders are newest-first and longest-first.
    """
    items = list(items)
    match order:
        case SortOrder.MANUAL:
            return items
        case SortOrder.TITLE_ASC:
            return sorted(items, key=_title_key)
        case SortOrder.TITLE_DESC:
            return sorted(items, key=_title_key, reverse=True)
        case SortOrder.DATE_ADDED:
            return sorted(items, key=lambda item: item.date_added, reverse=True)
        case SortOrder.DURATION:
            return sorted(items, key=lambda item: item.duration, reverse=True)


def _title_key(item: MediaItem) -> str:
    decomposed = unicodedata.normalize("NFKD", item.title.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(base)


class Playlist(BaseModel):
    """Aggregate root owning an ordered collection of media items.

    ``items`` is always the manual (insertion) order. The active ``sort_order``
    only changes the view returned by :attr:`ordered_items`.
    """

    id: NonEmptyStr = Field(default_factory=_new_id)
    name: PlaylistNameStr
    items: list[MediaItem] = Field(default_factory=list)
    sort_order: SortOrder = SortOrder.MANUAL
    shuffle: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def ordered_items(self) -> list[MediaItem]:
        return sort_items(self.items, self.sort_order)

    @property
    def total_duration(self) -> float:
        return sum(item.duration for item in self.items)

    @property
    def total_duration_formatted(self) -> str:
        return format_clock(self.total_duration)

    def touch(self) -> None:
        """Update the modification timestamp."""
        self.updated_at = utcnow()

    def get_item(self, item_id: str) -> MediaItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def contains(self, item_id: str) -> bool:
        return self.get_item(item_id) is not None

    def index_of(self, item_id: str) -> int | None:
        """Index of an item within the ordered view."""
        for index, item in enumerate(self.ordered_items):
            if item.id == item_id:
                return index
        return None

    def add_item(self, item: MediaItem) -> MediaItem:
        """Append an item with its saved position reset to the start."""
        if self.contains(item.id):
            raise BusinessRuleViolationError(
                rule="NO_DUPLICATES",
                message=ErrorMessages.DUPLICATE_ITEM.format(title=item.title, playlist=self.name),
            )
        added = item.with_position(0.0)
        self.items.append(added)
        self.touch()
        return added

    def add_items(self, items: Iterable[MediaItem]) -> list[MediaItem]:
        """Add several items, skipping ids that are already present."""
        added: list[MediaItem] = []
        for item in items:
            if self.contains(item.id):
                continue
            added.append(self.add_item(item))
        return added

    def remove_item(self, item_id: str) -> MediaItem | None:
        item = self.get_item(item_id)
        if item is None:
            return None
        self.items = [i for i in self.items if i.id != item_id]
        self.touch()
        return item

    def remove_at(self, index: int) -> MediaItem | None:
        """Remove the item at a position of the ordered view."""
        ordered = self.ordered_items
        if not 0 <= index < len(ordered):
            return None
        return self.remove_item(ordered[index].id)

    def move_item(self, from_index: int, to_index: int) -> bool:
        """Move an item within the ordered view.

        Moving while a sort is active makes the current view the new manual order.
        """
        ordered = self.ordered_items
        if not (0 <= from_index < len(ordered) and 0 <= to_index < len(ordered)):
            return False

        item = ordered.pop(from_index)
        ordered.insert(to_index, item)
        self.items = ordered
        self.sort_order = SortOrder.MANUAL
        self.touch()
        return True

    def update_item(self, item: MediaItem) -> bool:
        """Replace the stored item with the same id, keeping its place."""
        for index, existing in enumerate(self.items):
            if existing.id == item.id:
                self.items[index] = item
                self.touch()
                return True
        return False

    def clear(self) -> int:
        """Remove every item and return the count removed."""
        count = len(self.items)
        self.items.clear()
        self.touch()
        return count

    def rename(self, name: str) -> None:
        self.name = name
        self.touch()

    def toggle_shuffle(self) -> bool:
        self.shuffle = not self.shuffle
        self.touch()
        return self.shuffle

    def cycle_repeat(self) -> RepeatMode:
        """Advance repeat mode and return the new mode."""
        self.repeat_mode = self.repeat_mode.next_mode()
        self.touch()
        return self.repeat_mode
