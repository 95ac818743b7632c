"""
Tests for lifecycle queries and bulk status changes.
"""

import pytest

from event_lifecycle.lifecycle import (
    EventNotFoundError,
    get_event,
    get_publish_readiness,
    get_state_history,
    publish_status,
)
from event_lifecycle.models.event import EventStatus

S = EventStatus


class TestQueries:
    """Test cases for read-side helpers."""

    def test_get_event(self, make_event):
        event_id = make_event(S.DRAFT_MANUAL, title="Open Air")

        event = get_event(event_id)

        assert event["id"] == event_id
        assert event["title"] == "Open Air"
        assert event["status"] == "DRAFT_MANUAL"
        assert event["artists"] == ["DJ One"]

    def test_get_event_unknown(self):
        with pytest.raises(EventNotFoundError):
            get_event("nope")

    def test_readiness_of_stored_event(self, make_event):
        event_id = make_event(S.PENDING_DETAILS, date=None, venue_city=None)

        readiness = get_publish_readiness(event_id)

        assert readiness.ready is False
        assert readiness.missing_fields == ["date", "venue_city"]

    def test_history_of_unknown_event(self):
        with pytest.raises(EventNotFoundError):
            get_state_history("nope")

    def test_history_of_untouched_event_is_empty(self, make_event):
        assert get_state_history(make_event()) == []


class TestPublishStatus:
    """Test cases for the bulk status action."""

    def test_moves_every_eligible_event(self, make_event, load_event, history_count):
        ids = [make_event(S.READY_TO_PUBLISH) for _ in range(3)]

        results = publish_status(ids, S.PUBLISHED, actor="alice")

        assert results == {"success": ids, "failed": []}
        assert all(load_event(event_id)["status"] == "PUBLISHED" for event_id in ids)
        assert history_count() == 3

    def test_reports_failures_per_event(self, make_event, load_event, history_count):
        ready = make_event(S.READY_TO_PUBLISH)
        already = make_event(S.PUBLISHED)
        illegal = make_event(S.PENDING_DETAILS)
        incomplete = make_event(S.READY_TO_PUBLISH, venue_name=None)

        results = publish_status([ready, already, illegal, "missing", incomplete], "PUBLISHED", "alice")

        assert results["success"] == [ready, already]
        failed = {entry["id"]: entry["error"] for entry in results["failed"]}
        assert set(failed) == {illegal, "missing", incomplete}
        assert "Invalid state transition from PENDING_DETAILS to PUBLISHED" in failed[illegal]
        assert "not found" in failed["missing"]
        assert failed[incomplete] == "Missing fields: venue_name"

        assert load_event(illegal)["status"] == "PENDING_DETAILS"
        assert load_event(incomplete)["status"] == "READY_TO_PUBLISH"
        assert history_count(ready) == 1
        assert history_count() == 1

    def test_readiness_not_required_for_other_targets(self, make_event, load_event):
        event_id = make_event(S.PENDING_DETAILS, title=None)

        results = publish_status([event_id], S.CANCELED)

        assert results["success"] == [event_id]
        assert load_event(event_id)["status"] == "CANCELED"

    def test_readiness_required_for_ready_to_publish(self, make_event):
        event_id = make_event(S.PENDING_DETAILS, start_time=None)

        results = publish_status([event_id], S.READY_TO_PUBLISH)

        assert results["failed"] == [{"id": event_id, "error": "Missing fields: start_time"}]

    def test_storage_failure_only_affects_its_event(self, make_event, load_event, history_count):
        event_id = make_event(S.DRAFT_SCRAPED)

        # actor is NOT NULL, every attempt fails while inserting history
        results = publish_status([event_id], S.PENDING_DETAILS, actor=None)

        assert results["success"] == []
        assert results["failed"][0]["id"] == event_id
        assert load_event(event_id)["status"] == "DRAFT_SCRAPED"
        assert history_count() == 0

    def test_unknown_target_status(self, make_event):
        with pytest.raises(ValueError):
            publish_status([make_event()], "ARCHIVED")


class TestPublishStatusUnreachableStore:
    """Test cases for bulk changes when the store cannot be opened."""

    def test_every_id_is_reported_as_failed(self, unreachable_database):
        results = publish_status(["a", "b"], S.PENDING_DETAILS)

        assert results["success"] == []
        assert [entry["id"] for entry in results["failed"]] == ["a", "b"]
