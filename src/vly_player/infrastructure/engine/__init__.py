"""Media engine adapters."""

from vly_player.infrastructure.engine.simulated_engine import SimulatedMediaEngine

__all__ = [
    "SimulatedMediaEngine",
]
