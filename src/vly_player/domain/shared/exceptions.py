"""Domain error hierarchy.

Every error carries a human-readable ``message`` and a stable ``code``.
Clamped inputs and exhausted navigation are not errors and have no class here.
"""

from __future__ import annotations


class DomainError(Exception):
    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__


class EntityNotFoundError(DomainError):
    """A playlist or item id that is not in the collection."""

    def __init__(self, entity_type: str, identifier: str, message: str | None = None) -> None:
        super().__init__(message or f"{entity_type} '{identifier}' does not exist", code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class BusinessRuleViolationError(DomainError):
    def __init__(self, rule: str, message: str | None = None) -> None:
        super().__init__(message or f"Rule {rule} violated", code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """A session state transition the state machine does not allow."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        super().__init__(message or f"'{operation}' is not allowed while {current_state}", code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class SessionError(DomainError):
    """The media engine failed to load or decode the current item.

    Terminal for the session. Never raised across the session service boundary;
    the message is stored on the session and shown through snapshots.
    """

    def __init__(self, message: str, item_id: str | None = None) -> None:
        super().__init__(message, code="SESSION_ERROR")
        self.item_id = item_id


class PersistenceError(DomainError):
    """A stored collection could not be read, decoded or written."""

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Could not persist '{key}'", code="PERSISTENCE_ERROR")
        self.key = key
