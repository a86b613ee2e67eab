"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from vly_player.application.interfaces.key_value_store import KeyValueStore
from vly_player.application.interfaces.media_engine import (
    EngineBufferUpdated,
    EngineEvent,
    EngineFinished,
    EngineState,
    EngineStateChanged,
    EngineTimeUpdated,
    MediaEngine,
)

__all__ = [
    "KeyValueStore",
    "MediaEngine",
    "EngineEvent",
    "EngineState",
    "EngineStateChanged",
    "EngineTimeUpdated",
    "EngineFinished",
    "EngineBufferUpdated",
]
