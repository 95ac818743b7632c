"""Read-side queries and the bulk status action used by the admin."""

import logging
from typing import Any, Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import db, execute_in_transaction
from ..db.db_core import TransientStorageError
from ..models.event import Event, EventStatus
from ..models.state_history import EventStateHistory
from .errors import (
    EventNotFoundError,
    InvalidTransitionError,
    LifecycleError,
    NotReadyToPublishError,
)
from .executor import SYSTEM_ACTOR, transition_event
from .states import StatusLike, can_transition
from .validation import PUBLISH_GATED_STATES, PublishReadiness, check_publish_readiness

logger = logging.getLogger(__name__)


def _load_event(session: Session, event_id: str) -> Event:
    event = session.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def get_event(event_id: str) -> Dict[str, Any]:
    """Return the event as a dict or raise EventNotFoundError."""
    with db.session() as session:
        return _load_event(session, event_id).to_dict()


def get_publish_readiness(event_id: str) -> PublishReadiness:
    """Run the readiness check against the stored event."""
    with db.session() as session:
        return check_publish_readiness(_load_event(session, event_id))


def get_state_history(event_id: str, newest_first: bool = True) -> List[Dict[str, Any]]:
    """
    Return the status history of an event ordered by its sequence.

    Raises:
        EventNotFoundError: If the event does not exist
    """
    order = EventStateHistory.id.desc() if newest_first else EventStateHistory.id.asc()
    with db.session() as session:
        _load_event(session, event_id)
        rows = session.execute(
            select(EventStateHistory)
            .where(EventStateHistory.event_id == event_id)
            .order_by(order)
        ).scalars().all()
        return [row.to_dict() for row in rows]


def _publish_one(session: Session, event_id: str, status: EventStatus, actor: str) -> None:
    event = _load_event(session, event_id)
    current = EventStatus(event.status)

    if current == status:
        return

    if not can_transition(current, status):
        raise InvalidTransitionError(current, status)

    if status in PUBLISH_GATED_STATES:
        readiness = check_publish_readiness(event)
        if not readiness.ready:
            raise NotReadyToPublishError(event_id, readiness.missing_fields)

    transition_event(session, event_id, current, status, actor)


def publish_status(
    event_ids: Iterable[str],
    status: StatusLike,
    actor: str = SYSTEM_ACTOR,
) -> Dict[str, List[Any]]:
    """
    Move several events to one status, reporting the outcome per event.

    Each event runs in its own transaction, so a failure for one id never
    undoes another. Moves into READY_TO_PUBLISH or PUBLISHED additionally
    require the event to pass the readiness check.

    Args:
        event_ids: Events to change
        status: Target status for all of them
        actor: Who performs the change

    Returns:
        {'success': [ids], 'failed': [{'id': ..., 'error': ...}]}
    """
    status = EventStatus(status)
    results = {'success': [], 'failed': []}

    for event_id in event_ids:
        try:
            execute_in_transaction(_publish_one, event_id, status, actor)
        except (LifecycleError, TransientStorageError) as e:
            logger.warning(f"Could not move event {event_id} to {status}: {e}")
            results['failed'].append({'id': event_id, 'error': str(e)})
        else:
            results['success'].append(event_id)

    logger.info(
        f"Bulk move to {status} by {actor}: "
        f"{len(results['success'])} succeeded, {len(results['failed'])} failed"
    )
    return results
