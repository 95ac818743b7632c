"""Models package initialization."""

from .base import Base
from .event import Event, EventStatus
from .state_history import EventStateHistory, ImmutableRecordError

__all__ = ['Base', 'Event', 'EventStatus', 'EventStateHistory', 'ImmutableRecordError']
