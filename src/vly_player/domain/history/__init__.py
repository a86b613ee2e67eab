"""
Watch History Bounded Context
"""

from vly_player.domain.history.entities import HistoryEntry, HistoryStats, WatchHistory
from vly_player.domain.history.repository import HistoryRepository

__all__ = [
    "HistoryEntry",
    "HistoryStats",
    "WatchHistory",
    "HistoryRepository",
]
