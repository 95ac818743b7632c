"""Publication readiness check."""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping

from ..models.event import EventStatus

# Order matters: missing fields are reported in this order
REQUIRED_FIELDS = ('title', 'date', 'start_time', 'venue_name', 'venue_city')

# Targets that callers should gate on readiness before requesting
PUBLISH_GATED_STATES: FrozenSet[EventStatus] = frozenset({
    EventStatus.READY_TO_PUBLISH,
    EventStatus.PUBLISHED,
})


@dataclass(frozen=True)
class PublishReadiness:
    """Result of a readiness check."""
    ready: bool
    missing_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {'ready': self.ready, 'missing_fields': list(self.missing_fields)}


def _field_value(event: Any, name: str) -> Any:
    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_publish_readiness(event: Any) -> PublishReadiness:
    """
    Check whether an event carries enough data to be published.

    Accepts an Event model or any mapping of field values. The artist list is
    not required.

    Args:
        event: The event to check

    Returns:
        PublishReadiness with the missing required fields in their fixed order
    """
    missing = [name for name in REQUIRED_FIELDS if _is_missing(_field_value(event, name))]
    return PublishReadiness(ready=not missing, missing_fields=missing)
