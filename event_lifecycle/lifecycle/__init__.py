"""Event lifecycle state machine.

This module exposes the public interface of the lifecycle package.
"""

from .states import ALLOWED_TRANSITIONS, INITIAL_STATES, allowed_targets, can_transition
from .validation import (
    PUBLISH_GATED_STATES,
    REQUIRED_FIELDS,
    PublishReadiness,
    check_publish_readiness,
)
from .errors import (
    EventNotFoundError,
    InvalidTransitionError,
    LifecycleError,
    NotReadyToPublishError,
    TransientStorageError,
    TransitionConflictError,
)
from .executor import SYSTEM_ACTOR, transition, transition_event
from .service import get_event, get_publish_readiness, get_state_history, publish_status

__all__ = [
    # Status graph
    'ALLOWED_TRANSITIONS',
    'INITIAL_STATES',
    'allowed_targets',
    'can_transition',

    # Readiness
    'PUBLISH_GATED_STATES',
    'REQUIRED_FIELDS',
    'PublishReadiness',
    'check_publish_readiness',

    # Exceptions
    'LifecycleError',
    'InvalidTransitionError',
    'EventNotFoundError',
    'TransitionConflictError',
    'NotReadyToPublishError',
    'TransientStorageError',

    # Execution
    'SYSTEM_ACTOR',
    'transition',
    'transition_event',

    # Queries and bulk actions
    'get_event',
    'get_publish_readiness',
    'get_state_history',
    'publish_status',
]
