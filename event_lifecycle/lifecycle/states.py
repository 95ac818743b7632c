"""Allowed status graph for events.

Pure decision logic, no I/O. The graph has cycles (CANCELED and REJECTED can
return to PENDING_DETAILS) and the two draft states are only ever entered at
creation.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Union

from ..models.event import EventStatus

StatusLike = Union[EventStatus, str]

INITIAL_STATES: FrozenSet[EventStatus] = frozenset({
    EventStatus.DRAFT_SCRAPED,
    EventStatus.DRAFT_MANUAL,
})

ALLOWED_TRANSITIONS: Mapping[EventStatus, FrozenSet[EventStatus]] = MappingProxyType({
    EventStatus.DRAFT_SCRAPED: frozenset({EventStatus.PENDING_DETAILS, EventStatus.REJECTED}),
    EventStatus.DRAFT_MANUAL: frozenset({EventStatus.PENDING_DETAILS, EventStatus.REJECTED}),
    EventStatus.PENDING_DETAILS: frozenset({
        EventStatus.READY_TO_PUBLISH,
        EventStatus.CANCELED,
        EventStatus.REJECTED,
    }),
    EventStatus.READY_TO_PUBLISH: frozenset({
        EventStatus.PUBLISHED,
        EventStatus.CANCELED,
        EventStatus.PENDING_DETAILS,
    }),
    EventStatus.PUBLISHED: frozenset({EventStatus.CANCELED}),
    EventStatus.CANCELED: frozenset({EventStatus.PENDING_DETAILS}),
    EventStatus.REJECTED: frozenset({EventStatus.PENDING_DETAILS}),
})


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    """Return True if an event at `current` may move to `target`.

    Staying in the same status is always allowed and is a no-op.
    """
    current, target = EventStatus(current), EventStatus(target)
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def allowed_targets(current: StatusLike) -> FrozenSet[EventStatus]:
    """Statuses reachable from `current` in one step."""
    return ALLOWED_TRANSITIONS[EventStatus(current)]
