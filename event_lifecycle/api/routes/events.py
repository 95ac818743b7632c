"""Event lifecycle router module.

Thin HTTP surface over the lifecycle package. Lifecycle and storage errors
are translated to responses by the handlers registered in `api.app`.
"""

from typing import Any, Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ...lifecycle import (
    SYSTEM_ACTOR,
    allowed_targets,
    get_event,
    get_publish_readiness,
    get_state_history,
    publish_status,
    transition,
)
from ...models.event import EventStatus

router = APIRouter(tags=["events"])


class TransitionRequest(BaseModel):
    """Body of a single status change."""
    expected_status: EventStatus
    status: EventStatus
    actor: str = SYSTEM_ACTOR
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PublishStatusRequest(BaseModel):
    """Body of a bulk status change."""
    ids: List[str] = Field(min_length=1)
    status: EventStatus
    actor: str = SYSTEM_ACTOR


@router.get("/events/{event_id}", response_model=Dict)
def read_event(event_id: str):
    """Get a single event by ID."""
    return get_event(event_id)


@router.get("/events/{event_id}/readiness", response_model=Dict)
def read_readiness(event_id: str):
    """Report which required fields an event still lacks."""
    return get_publish_readiness(event_id).to_dict()


@router.get("/events/{event_id}/history", response_model=List[Dict])
def read_history(event_id: str):
    """Get the status history of an event, newest first."""
    return get_state_history(event_id)


@router.get("/events/{event_id}/transitions", response_model=Dict)
def read_allowed_transitions(event_id: str):
    """List the statuses the event can move to next."""
    event = get_event(event_id)
    return {
        "status": event["status"],
        "allowed": sorted(status.value for status in allowed_targets(event["status"])),
    }


@router.post("/events/{event_id}/transition", response_model=Dict)
def change_status(event_id: str, request: TransitionRequest):
    """Move an event to a new status and record the change."""
    updated = transition(
        event_id,
        request.expected_status,
        request.status,
        actor=request.actor,
        metadata=request.metadata,
    )
    return {"changed": updated is not None, "event": updated}


@router.post("/events/publish-status", response_model=Dict)
def change_status_bulk(request: PublishStatusRequest):
    """Move several events to one status, reporting per-event results."""
    return publish_status(request.ids, request.status, actor=request.actor)
