"""Time helpers.

Stored timestamps are always timezone-aware UTC; media times are plain
float seconds formatted as clock strings for display.
"""

from __future__ import annotations

from datetime import UTC, datetime

from vly_player.domain.shared.messages import ErrorMessages


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalise an aware datetime to UTC.

    Raises:
        ValueError: If ``value`` is naive.
    """
    if value.tzinfo is None:
        raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
    return value.astimezone(UTC)


def iso_timestamp(value: datetime | None = None) -> str:
    """ISO 8601 string with an explicit +00:00 offset, for database columns."""
    return ensure_utc(value or utcnow()).isoformat()


def format_clock(seconds: float, *, pad_minutes: bool = False) -> str:
    """Format a media time as M:SS (or MM:SS) below an hour, H:MM:SS above."""
    total = int(max(0.0, seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    if pad_minutes:
        return f"{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
