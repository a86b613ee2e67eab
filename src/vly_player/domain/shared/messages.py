"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Playlist Errors
    DUPLICATE_ITEM = '"{title}" is already in playlist "{playlist}"'

    # Session Errors
    ENGINE_LOAD_FAILED = "Engine failed to load '{locator}': {reason}"
    ENGINE_PLAYBACK_FAILED = "Playback failed: {reason}"

    # Shortcut Errors
    UNKNOWN_SHORTCUT_ACTION = "Unknown shortcut action: {action}"
    INVALID_PROGRESS_DECILE = "Seek-to-progress decile must be between 0 and 9"

    # Persistence Errors
    CORRUPT_COLLECTION = "Stored value under '{key}' could not be decoded"
    UNSERIALIZABLE_COLLECTION = "Value for '{key}' could not be encoded"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "Timestamps must be timezone-aware"

    # Database Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Key-Value Store
    KV_LOADED = "Loaded key '%s' (%d bytes)"
    KV_SAVED = "Saved key '%s' (%d bytes)"
    KV_MISSING = "No stored value for key '%s'"

    # Persistence
    PERSISTENCE_LOAD_FAILED = "Failed to load '%s', falling back to defaults"
    PERSISTENCE_SAVE_FAILED = "Failed to save '%s'"

    # Session Lifecycle
    SESSION_LOADING = "Loading '%s' (handle %s, start %.1fs)"
    SESSION_READY = "Session ready for '%s' (duration %.1fs)"
    SESSION_STATE_CHANGED = "Session %s: %s -> %s"
    SESSION_FINISHED = "Finished playing '%s'"
    SESSION_FAILED = "Session failed for '%s': %s"
    SESSION_STOPPED = "Stopped session for '%s'"
    SESSION_STALE_EVENT = "Ignoring %s for stale handle %s"
    SESSION_EVENT_DROPPED = "Dropped engine event, no loop attached: %s"
    SESSION_COMMAND_IGNORED = "Ignoring %s in state %s"
    SESSION_ENGINE_CALL_FAILED = "Engine call %s failed for handle %s"
    SESSION_PUMP_STARTED = "Engine event pump started"
    SESSION_PUMP_STOPPED = "Engine event pump stopped"

    # Transport
    TRANSPORT_SEEK = "Seek to %.2fs (requested %.2fs)"
    TRANSPORT_RATE = "Playback rate set to %sx"
    TRANSPORT_VOLUME = "Volume set to %.2f"

    # Playlist Operations
    PLAYLIST_CREATED = "Created playlist '%s' (%s)"
    PLAYLIST_DELETED = "Deleted playlist '%s'"
    PLAYLIST_RENAMED = "Renamed playlist %s to '%s'"
    PLAYLIST_ITEMS_ADDED = "Added %d items to playlist '%s'"
    PLAYLIST_DUPLICATE_SKIPPED = "Skipped duplicate item '%s' in playlist '%s'"
    PLAYLIST_ITEM_REMOVED = "Removed '%s' from playlist '%s'"
    PLAYLIST_ITEM_MOVED = "Moved item from %d to %d in playlist '%s'"
    PLAYLIST_SORTED = "Sorted playlist '%s' by %s"
    PLAYLIST_CURRENT_CHANGED = "Current playlist set to %s"
    PLAYLIST_POSITION_SAVED = "Saved position %.1fs for '%s'"

    # Navigation
    NAVIGATION_EXHAUSTED = "No %s item after '%s' in playlist '%s'"
    NAVIGATION_REPEAT_ONE = "Repeating '%s'"
    NAVIGATION_ADVANCE = "Advancing to '%s'"
    AUTO_ADVANCE_DISABLED = "Auto-advance disabled, staying on '%s'"

    # Shortcuts
    SHORTCUT_DISPATCHED = "Shortcut %s -> %s"
    SHORTCUT_UNMATCHED = "No binding for %s"
    SHORTCUTS_DISABLED = "Shortcuts disabled, passing through %s"
    SHORTCUT_UPDATED = "Updated binding for %s"
    SHORTCUTS_RESET = "Restored default shortcut table"
    SHORTCUT_CONFLICT = "Binding %s shadows %s on %s"
    SHORTCUT_COMMAND_FAILED = "Failed to execute shortcut %s"

    # Orchestrator
    ORCHESTRATOR_STARTED = "Orchestrator started"
    ORCHESTRATOR_STOPPED = "Orchestrator stopped"
    ORCHESTRATOR_UI_ACTION = "Forwarding %s to UI"
    ORCHESTRATOR_NO_PLAYLIST = "No current playlist selected"

    # History
    HISTORY_RECORDED = "Recorded history for '%s' (%.0f%%)"
    HISTORY_CLEARED = "Cleared %d history entries"

    # Engine
    ENGINE_LOADED = "Engine loaded %s as %s"
    ENGINE_RELEASED = "Engine released %s"
    ENGINE_THREAD_STARTED = "Engine clock thread started"
    ENGINE_THREAD_STOPPED = "Engine clock thread stopped"
    ENGINE_EVENTS_DROPPED = "Dropped %d engine events, no sink attached"

    # Application Lifecycle
    APP_STARTING = "Starting vly-player (%s)"
    APP_STOPPED = "vly-player stopped"
    APP_INTERRUPTED = "Interrupted, shutting down"
    LOCALE_UNAVAILABLE = "Locale collation unavailable, using C collation: %s"
    CONTAINER_INITIALIZED = "Container initialized"
    CONTAINER_SHUTDOWN = "Container shut down"
    HEADLESS_QUEUED = "Queued %d files into '%s'"
    HEADLESS_DONE = "Playlist exhausted"
