"""
Playlist Domain Services

Traversal and ordering decisions over a playlist. Nothing here mutates
items; only :meth:`PlaylistNavigator.sort` touches the playlist's sort
mode and timestamp.
"""

from __future__ import annotations

import random

from vly_player.domain.playlist.entities import MediaItem, Playlist, sort_items
from vly_player.domain.playlist.value_objects import Direction, SortOrder


class PlaylistNavigator:
    """Domain service deciding which item plays next or previously.

    Decisions are made over the playlist's ordered view. Repeat-one is not
    interpreted here; replaying the same item is the caller's concern.
    """

    @classmethod
    def next_item(
        cls,
        playlist: Playlist,
        current_id: str | None,
        rng: random.Random | None = None,
    ) -> MediaItem | None:
        """Determine the item after ``current_id``.

        Args:
            playlist: The playlist to traverse.
            current_id: Id of the item currently playing, if any.
            rng: Random source used when shuffle is on.

        Returns:
            The next item, or None when the playlist is exhausted or empty.
        """
        items = playlist.ordered_items
        if not items:
            return None

        index = cls._find(items, current_id)
        if index is None:
            return items[0]

        if playlist.shuffle:
            # Uniform over the whole playlist, so the current item may come up again.
            return items[(rng or random).randrange(len(items))]

        if index + 1 < len(items):
            return items[index + 1]
        if playlist.repeat_mode.wraps:
            return items[0]
        return None

    @classmethod
    def previous_item(cls, playlist: Playlist, current_id: str | None) -> MediaItem | None:
        """Determine the item before ``current_id``.

        Args:
            playlist: The playlist to traverse.
            current_id: Id of the item currently playing, if any.

        Returns:
            The previous item, or None at the start without repeat-all.
        """
        items = playlist.ordered_items
        if not items:
            return None

        index = cls._find(items, current_id)
        if index is None:
            return items[0]

        if index > 0:
            return items[index - 1]
        if playlist.repeat_mode.wraps:
            return items[-1]
        return None

    @classmethod
    def step(
        cls,
        playlist: Playlist,
        current_id: str | None,
        direction: Direction,
        rng: random.Random | None = None,
    ) -> MediaItem | None:
        if direction == Direction.NEXT:
            return cls.next_item(playlist, current_id, rng=rng)
        return cls.previous_item(playlist, current_id)

    @classmethod
    def sort(cls, playlist: Playlist, order: SortOrder) -> list[MediaItem]:
        """Apply a sort mode to the playlist and return the resulting view.

        Shuffle and repeat settings are left untouched.
        """
        playlist.sort_order = order
        playlist.touch()
        return sort_items(playlist.items, order)

    @staticmethod
    def _find(items: list[MediaItem], item_id: str | None) -> int | None:
        if item_id is None:
            return None
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        return None
