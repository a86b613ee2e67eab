"""
Shared Domain Kernel

Contains exceptions, constrained types and the event bus shared across all bounded contexts.
"""

from vly_player.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    PersistenceError,
    SessionError,
)

__all__ = [
    "DomainError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "SessionError",
    "PersistenceError",
]
