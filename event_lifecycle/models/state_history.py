"""Model for the append-only log of event status changes."""

from typing import Any, Dict

from sqlalchemy import JSON, BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy import event as sa_event
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base
from ..utils.timezone import ensure_utc, now_utc


class ImmutableRecordError(Exception):
    """Raised when code tries to modify or remove a persisted history row."""
    pass


class EventStateHistory(Base):
    """
    One executed status change of an event.

    Rows are written by the lifecycle executor in the same transaction as the
    status update and are never modified afterwards. The autoincrement id is
    the per-table sequence that orders the log.

    Fields:
        id: Monotonic sequence number (auto-generated)
        event_id: The event whose status changed
        previous_status: Status before the change
        new_status: Status after the change
        actor: Who or what performed the change ('system' for automated changes)
        transition_metadata: Caller-supplied data stored verbatim (column 'metadata')
        created_at: When the change was recorded
    """
    __tablename__ = 'event_state_history'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    event_id = Column(String(36), ForeignKey('events.id'), nullable=False, index=True)
    previous_status = Column(String(32), nullable=False)
    new_status = Column(String(32), nullable=False)
    actor = Column(String, nullable=False)
    transition_metadata = Column('metadata', JSON().with_variant(JSONB(), 'postgresql'), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'event_id': self.event_id,
            'previous_status': self.previous_status,
            'new_status': self.new_status,
            'actor': self.actor,
            'metadata': self.transition_metadata or {},
            'created_at': ensure_utc(self.created_at),
        }

    def __str__(self) -> str:
        """String representation."""
        return (
            f"EventStateHistory(id={self.id}, event_id={self.event_id}, "
            f"{self.previous_status} -> {self.new_status}, actor={self.actor})"
        )


@sa_event.listens_for(EventStateHistory, 'before_update')
def _refuse_update(mapper, connection, target):
    raise ImmutableRecordError(f"History row {target.id} is append-only and cannot be updated")


@sa_event.listens_for(EventStateHistory, 'before_delete')
def _refuse_delete(mapper, connection, target):
    raise ImmutableRecordError(f"History row {target.id} is append-only and cannot be deleted")
