"""Constrained pydantic types shared by the domain models and settings.

Models annotate fields with these instead of repeating ``Field`` bounds::

    class MediaItem(BaseModel):
        title: TitleStr
        duration: Seconds
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field

from vly_player.domain.shared.datetime_utils import ensure_utc

# Media time and fractions
Seconds = Annotated[float, Field(ge=0.0)]
"""Media time in seconds. A zero duration means not yet known."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Volume, buffered and watched fractions."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
NonNegativeInt = Annotated[int, Field(ge=0)]

# Text
NonEmptyStr = Annotated[str, Field(min_length=1)]
TitleStr = Annotated[str, Field(min_length=1, max_length=500)]
PlaylistNameStr = Annotated[str, Field(min_length=1, max_length=200)]

# Settings bounds
BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
MaxHistoryEntries = Annotated[int, Field(gt=0, le=10_000)]

UtcDatetimeField = Annotated[datetime, AfterValidator(ensure_utc)]
"""Aware datetime, converted to UTC after parsing; naive values are rejected."""
