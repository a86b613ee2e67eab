"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite key-value store and repositories)
- Media engines
"""

from vly_player.infrastructure.engine.simulated_engine import SimulatedMediaEngine
from vly_player.infrastructure.persistence.database import Database
from vly_player.infrastructure.persistence.key_value_store import (
    InMemoryKeyValueStore,
    SQLiteKeyValueStore,
)

__all__ = [
    "Database",
    "InMemoryKeyValueStore",
    "SimulatedMediaEngine",
    "SQLiteKeyValueStore",
]
