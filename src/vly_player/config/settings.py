"""Player configuration.

One frozen section per concern, read from the environment (and an optional
.env file) by pydantic-settings. Nested values use a double underscore, for
example PLAYBACK__AUTO_PLAY_NEXT=false.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import EngineConstants, HistoryConstants, PlaybackConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, ConnectionTimeoutS, MaxHistoryEntries


class DatabaseSettings(BaseModel):
    """Where the key-value store lives."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/vly.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class PlaybackSettings(BaseModel):
    """Transport and playlist behaviour."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    seek_interval_seconds: float = Field(
        default=PlaybackConstants.SEEK_INTERVAL_SECONDS,
        gt=0.0,
        le=600.0,
        validation_alias=AliasChoices("seek_interval_seconds", "seek_interval"),
    )
    volume_step: float = Field(default=PlaybackConstants.VOLUME_STEP, gt=0.0, le=1.0)
    default_volume: float = Field(default=PlaybackConstants.DEFAULT_VOLUME, ge=0.0, le=1.0)
    default_rate: float = Field(
        default=PlaybackConstants.DEFAULT_RATE,
        ge=0.5,
        le=2.0,
        validation_alias=AliasChoices("default_rate", "playback_speed"),
    )
    auto_play_next: bool = True
    remember_position: bool = True


class ShortcutSettings(BaseModel):
    """Keyboard shortcut configuration."""

    model_config = SettingsConfigDict(frozen=True)

    enabled: bool = True


class HistorySettings(BaseModel):
    """Watch history configuration."""

    model_config = SettingsConfigDict(frozen=True)

    max_entries: MaxHistoryEntries = HistoryConstants.MAX_ENTRIES


class EngineSettings(BaseModel):
    """Simulated engine configuration."""

    model_config = SettingsConfigDict(frozen=True)

    tick_interval_seconds: float = Field(
        default=EngineConstants.TICK_INTERVAL_SECONDS, gt=0.0, le=5.0
    )
    default_duration_seconds: float = Field(
        default=EngineConstants.DEFAULT_DURATION_SECONDS, gt=0.0
    )
    time_scale: float = Field(default=1.0, gt=0.0, le=1000.0)
    check_files: bool = True


class Settings(BaseSettings):
    """Top-level settings: environment, debug and log level plus the nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    shortcuts: ShortcutSettings = Field(default_factory=ShortcutSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings built once per process; environment beats .env beats defaults."""
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
