"""
Test configuration and fixtures for the event lifecycle package.
"""

import os

# Must be set before the package creates its global database instance
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime, time, timezone

import pytest
from sqlalchemy import func, select

from event_lifecycle.db import db, DatabaseConfig
from event_lifecycle.models import Event, EventStateHistory, EventStatus

# Timestamp every fixture event starts with, well before any test runs
CREATED_AT = datetime(2020, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def database(tmp_path):
    """Bind the global database to a fresh SQLite file for each test."""
    db.configure(DatabaseConfig(database_url=f"sqlite:///{tmp_path / 'events.db'}"))
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def complete_event_fields():
    """Content that passes the publication readiness check."""
    return {
        "title": "Warehouse Night",
        "date": date(2025, 1, 1),
        "start_time": time(20, 0),
        "end_time": time(23, 30),
        "venue_name": "Test Venue",
        "venue_city": "Berlin",
        "description": "A test event",
        "artists": ["DJ One"],
    }


@pytest.fixture
def make_event(database, complete_event_fields):
    """Insert an event and return its id."""
    def _make(status=EventStatus.DRAFT_SCRAPED, **fields):
        data = dict(complete_event_fields)
        data.update(fields)
        with database.session() as session:
            event = Event(
                status=EventStatus(status).value,
                created_at=CREATED_AT,
                updated_at=CREATED_AT,
                **data,
            )
            session.add(event)
            session.flush()
            return event.id
    return _make


@pytest.fixture
def load_event(database):
    """Read an event back as a dict, or None."""
    def _load(event_id):
        with database.session() as session:
            event = session.get(Event, event_id)
            return event.to_dict() if event else None
    return _load


@pytest.fixture
def history_count(database):
    """Count history rows, optionally for one event."""
    def _count(event_id=None):
        query = select(func.count(EventStateHistory.id))
        if event_id is not None:
            query = query.where(EventStateHistory.event_id == event_id)
        with database.session() as session:
            return session.execute(query).scalar_one()
    return _count


@pytest.fixture
def unreachable_database(database, tmp_path):
    """Point the global database at a SQLite file whose directory does not exist."""
    database.configure(DatabaseConfig(
        database_url=f"sqlite:///{tmp_path / 'missing-dir' / 'events.db'}"
    ))
    return database
