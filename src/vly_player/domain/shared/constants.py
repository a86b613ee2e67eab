"""Centralized constants for storage keys, database schema, and playback defaults.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class ConfigKeys:
    """Environment variables read outside of Settings."""

    NO_COLOR = "NO_COLOR"


class StorageKeys:
    """Keys of the persisted key-value store.

    Each key holds exactly one JSON blob for a whole logical collection.
    """

    PLAYLISTS = "vly_playlists"
    CURRENT_PLAYLIST = "vly_current_playlist"
    KEYBOARD_SHORTCUTS = "vly_keyboard_shortcuts"
    SHORTCUTS_ENABLED = "vly_shortcut_enabled"
    PLAYBACK_HISTORY = "vly_playback_history"


class DatabaseTables:
    """Database table names."""

    KV_STORE = "kv_store"


class SQLPragmas:
    """SQLite PRAGMA statements applied on every connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    SYNCHRONOUS_NORMAL = "PRAGMA synchronous=NORMAL"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class PlaybackConstants:
    """Transport defaults shared by the session service and settings."""

    SEEK_INTERVAL_SECONDS = 15.0
    VOLUME_STEP = 0.1
    DEFAULT_VOLUME = 1.0
    DEFAULT_RATE = 1.0

    # Watched fraction at which a history entry counts as completed
    COMPLETION_THRESHOLD = 0.9

    # Container format tags treated as streams
    STREAM_FORMATS = frozenset({"m3u8", "ts"})


class HistoryConstants:
    """Watch history limits."""

    MAX_ENTRIES = 100


class EngineConstants:
    """Simulated engine defaults."""

    TICK_INTERVAL_SECONDS = 0.25
    DEFAULT_DURATION_SECONDS = 5.0
    BUFFER_CHUNK_SECONDS = 10.0
