# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Exceptions, constrained types and the event bus
- playlist/: Media items, playlists and navigation
- playback/: The playback session state machine
- shortcuts/: Key bindings and resolution
- history/: Watch history
"""

from vly_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
