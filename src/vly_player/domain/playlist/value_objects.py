"""Immutable value objects for the playlist bounded context."""

from __future__ import annotations

from enum import Enum


class RepeatMode(Enum):
    """Repeat settings for playlist traversal."""

    OFF = "off"
    ONE = "one"  # Replay the current item
    ALL = "all"  # Wrap around at either end

    def next_mode(self) -> RepeatMode:
        """Cycle to next repeat mode."""
        modes = list(RepeatMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]

    @property
    def wraps(self) -> bool:
        return self == RepeatMode.ALL


class SortOrder(Enum):
    """Ordering applied to a playlist's view of its items."""

    MANUAL = "manual"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    DATE_ADDED = "date_added"
    DURATION = "duration"

    @property
    def display_name(self) -> str:
        return {
            SortOrder.MANUAL: "Manual",
            SortOrder.TITLE_ASC: "Title (A-Z)",
            SortOrder.TITLE_DESC: "Title (Z-A)",
            SortOrder.DATE_ADDED: "Date Added",
            SortOrder.DURATION: "Duration",
        }[self]


class Direction(Enum):
    """Traversal direction through a playlist."""

    NEXT = "next"
    PREVIOUS = "previous"
