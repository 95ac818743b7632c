"""Transactional execution of event status changes.

A transition is a conditioned status update plus one history insert, both on
the same session. `transition_event` works inside a transaction the caller
owns; `transition` opens and commits that transaction itself.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..db import db
from ..models.event import Event, EventStatus
from ..models.state_history import EventStateHistory
from ..utils.timezone import now_utc
from .errors import EventNotFoundError, InvalidTransitionError, TransitionConflictError
from .states import StatusLike, can_transition

logger = logging.getLogger(__name__)

# Actor recorded for automated changes
SYSTEM_ACTOR = 'system'


def transition_event(
    session: Session,
    event_id: str,
    current_status: StatusLike,
    new_status: StatusLike,
    actor: str = SYSTEM_ACTOR,
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[Event]:
    """
    Move an event from `current_status` to `new_status` and log the change.

    Must run inside a transaction: the caller commits or rolls back both the
    status update and the history row.

    Args:
        session: Session bound to the open transaction
        event_id: Id of the event to change
        current_status: The status the caller believes the event has
        new_status: The requested status
        actor: Who performs the change
        metadata: Opaque data stored verbatim with the history row

    Returns:
        The updated Event, or None when the status is unchanged

    Raises:
        ValueError: If either status is not an EventStatus value
        InvalidTransitionError: If the graph has no such edge
        EventNotFoundError: If no event has this id
        TransitionConflictError: If the event's stored status is not current_status
    """
    current_status = EventStatus(current_status)
    new_status = EventStatus(new_status)

    if current_status == new_status:
        return None

    if not can_transition(current_status, new_status):
        logger.warning(f"Rejected transition of event {event_id}: {current_status} -> {new_status}")
        raise InvalidTransitionError(current_status, new_status)

    now = now_utc()
    result = session.execute(
        update(Event)
        .where(Event.id == event_id, Event.status == current_status.value)
        .values(status=new_status.value, updated_at=now)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        actual = session.execute(
            select(Event.status).where(Event.id == event_id)
        ).scalar_one_or_none()
        if actual is None:
            raise EventNotFoundError(event_id)
        logger.warning(
            f"Stale transition of event {event_id}: expected {current_status}, found {actual}"
        )
        raise TransitionConflictError(event_id, current_status, actual)

    session.add(EventStateHistory(
        event_id=event_id,
        previous_status=current_status.value,
        new_status=new_status.value,
        actor=actor,
        transition_metadata=metadata if metadata is not None else {},
        created_at=now,
    ))
    session.flush()

    return session.get(Event, event_id, populate_existing=True)


def transition(
    event_id: str,
    current_status: StatusLike,
    new_status: StatusLike,
    actor: str = SYSTEM_ACTOR,
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Execute one status change in its own transaction.

    Returns:
        The updated event as a dict, or None when the status is unchanged

    Raises:
        InvalidTransitionError, EventNotFoundError, TransitionConflictError:
            deterministic outcomes, nothing was written
        TransientStorageError: the store failed, nothing was written; safe to retry
    """
    if EventStatus(current_status) == EventStatus(new_status):
        return None

    with db.session() as session:
        event = transition_event(session, event_id, current_status, new_status, actor, metadata)
        updated = event.to_dict()

    logger.info(f"Event {event_id} moved {current_status} -> {new_status} by {actor}")
    return updated
