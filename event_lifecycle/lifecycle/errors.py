"""Errors raised by the lifecycle executor.

InvalidTransitionError, EventNotFoundError and TransitionConflictError are
deterministic: repeating the same call fails the same way. TransientStorageError
comes from the database layer and is safe to retry.
"""

from ..db.db_core import TransientStorageError


class LifecycleError(Exception):
    """Base exception for lifecycle outcomes reported to callers."""
    pass


class InvalidTransitionError(LifecycleError):
    """The requested status change is not an edge of the status graph."""

    def __init__(self, current_status, target_status):
        self.current_status = str(current_status)
        self.target_status = str(target_status)
        super().__init__(
            f"Invalid state transition from {self.current_status} to {self.target_status}"
        )


class EventNotFoundError(LifecycleError):
    """The referenced event does not exist."""

    def __init__(self, event_id):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class TransitionConflictError(LifecycleError):
    """The event is no longer in the status the caller expected."""

    def __init__(self, event_id, expected_status, actual_status):
        self.event_id = event_id
        self.expected_status = str(expected_status)
        self.actual_status = str(actual_status)
        super().__init__(
            f"Event {event_id} is {self.actual_status}, expected {self.expected_status}"
        )


class NotReadyToPublishError(LifecycleError):
    """The event lacks required fields for a publication status."""

    def __init__(self, event_id, missing_fields):
        self.event_id = event_id
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing fields: {', '.join(self.missing_fields)}")


__all__ = [
    'LifecycleError',
    'InvalidTransitionError',
    'EventNotFoundError',
    'TransitionConflictError',
    'NotReadyToPublishError',
    'TransientStorageError',
]
