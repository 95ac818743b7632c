"""Event model definition."""

import uuid
from enum import Enum
from typing import Any, Dict

from sqlalchemy import JSON, CheckConstraint, Column, Date, DateTime, String, Text, Time

from .base import Base
from ..utils.timezone import ensure_utc, now_utc


class EventStatus(str, Enum):
    """Lifecycle states an event can occupy."""
    DRAFT_SCRAPED = "DRAFT_SCRAPED"
    DRAFT_MANUAL = "DRAFT_MANUAL"
    REJECTED = "REJECTED"
    PENDING_DETAILS = "PENDING_DETAILS"
    READY_TO_PUBLISH = "READY_TO_PUBLISH"
    PUBLISHED = "PUBLISHED"
    CANCELED = "CANCELED"

    def __str__(self) -> str:
        return self.value


_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in EventStatus)


def _new_event_id() -> str:
    return str(uuid.uuid4())


class Event(Base):
    """
    Event model representing a candidate or published event.

    Content fields are written by the ingestion and editing paths. The status
    column is only changed through the lifecycle executor.

    Fields:
        id: Unique identifier (UUID string, immutable)
        status: Current lifecycle state, one of EventStatus
        title: Event title
        date: Calendar date of the event
        start_time: When the event starts
        end_time: When the event ends (optional)
        venue_name: Name of the venue
        venue_city: City of the venue
        description: Event description (optional)
        content_url: URL to the event's source page (optional)
        flyer_front: URL to the event's primary image (optional)
        artists: List of performing artist names (optional)
        created_at: When this event was first created in our database
        updated_at: When this event was last modified, status changes included
    """
    __tablename__ = 'events'
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name='ck_events_status'),
    )

    id = Column(String(36), primary_key=True, default=_new_event_id)
    status = Column(String(32), nullable=False, default=EventStatus.DRAFT_MANUAL.value, index=True)

    title = Column(String, nullable=True)
    date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    venue_name = Column(String, nullable=True)
    venue_city = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    content_url = Column(String, nullable=True)
    flyer_front = Column(String, nullable=True)
    artists = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'status': self.status,
            'title': self.title,
            'date': self.date,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'venue_name': self.venue_name,
            'venue_city': self.venue_city,
            'description': self.description,
            'content_url': self.content_url,
            'flyer_front': self.flyer_front,
            'artists': self.artists or [],
            'created_at': ensure_utc(self.created_at),
            'updated_at': ensure_utc(self.updated_at),
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, title={self.title}, status={self.status})"
