"""
Tests for the HTTP surface of the lifecycle package.
"""

import pytest
from fastapi.testclient import TestClient

from event_lifecycle.api.app import app
from event_lifecycle.db import TransientStorageError
from event_lifecycle.models.event import EventStatus

S = EventStatus


@pytest.fixture
def client(database):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:

    def test_health_check(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "development"


class TestReadEndpoints:
    """Test cases for event, readiness, transitions and history reads."""

    def test_get_event(self, client, make_event):
        event_id = make_event(S.DRAFT_SCRAPED)

        response = client.get(f"/api/events/{event_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == event_id
        assert body["status"] == "DRAFT_SCRAPED"
        assert body["date"] == "2025-01-01"
        assert body["start_time"] == "20:00:00"

    def test_get_unknown_event(self, client):
        response = client.get("/api/events/unknown")

        assert response.status_code == 404
        assert response.json()["error"] == "EventNotFoundError"

    def test_readiness(self, client, make_event):
        event_id = make_event(S.PENDING_DETAILS, title="", venue_city=None)

        response = client.get(f"/api/events/{event_id}/readiness")

        assert response.status_code == 200
        assert response.json() == {"ready": False, "missing_fields": ["title", "venue_city"]}

    def test_allowed_transitions(self, client, make_event):
        event_id = make_event(S.PENDING_DETAILS)

        response = client.get(f"/api/events/{event_id}/transitions")

        assert response.status_code == 200
        assert response.json() == {
            "status": "PENDING_DETAILS",
            "allowed": ["CANCELED", "READY_TO_PUBLISH", "REJECTED"],
        }

    def test_history(self, client, make_event):
        event_id = make_event(S.DRAFT_SCRAPED)
        client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "DRAFT_SCRAPED", "status": "PENDING_DETAILS", "actor": "reviewer1",
        })
        client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "PENDING_DETAILS", "status": "CANCELED", "actor": "reviewer2",
        })

        response = client.get(f"/api/events/{event_id}/history")

        assert response.status_code == 200
        assert [row["actor"] for row in response.json()] == ["reviewer2", "reviewer1"]


class TestTransitionEndpoint:
    """Test cases for POST /api/events/{id}/transition."""

    def test_successful_transition(self, client, make_event, history_count):
        event_id = make_event(S.DRAFT_SCRAPED)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "DRAFT_SCRAPED",
            "status": "PENDING_DETAILS",
            "actor": "reviewer1",
            "metadata": {"note": "looks legit"},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["changed"] is True
        assert body["event"]["status"] == "PENDING_DETAILS"
        assert history_count(event_id) == 1

    def test_noop_transition(self, client, make_event, history_count):
        event_id = make_event(S.PUBLISHED)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "PUBLISHED", "status": "PUBLISHED",
        })

        assert response.status_code == 200
        assert response.json() == {"changed": False, "event": None}
        assert history_count() == 0

    def test_invalid_transition_is_400(self, client, make_event):
        event_id = make_event(S.PENDING_DETAILS)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "PENDING_DETAILS", "status": "PUBLISHED",
        })

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "InvalidTransitionError"
        assert body["current_status"] == "PENDING_DETAILS"
        assert body["target_status"] == "PUBLISHED"

    def test_unknown_event_is_404(self, client):
        response = client.post("/api/events/missing/transition", json={
            "expected_status": "DRAFT_SCRAPED", "status": "PENDING_DETAILS",
        })

        assert response.status_code == 404

    def test_stale_expected_status_is_409(self, client, make_event):
        event_id = make_event(S.CANCELED)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "PUBLISHED", "status": "CANCELED",
        })

        assert response.status_code == 409
        assert response.json()["actual_status"] == "CANCELED"

    def test_unknown_status_is_422(self, client, make_event):
        event_id = make_event(S.DRAFT_SCRAPED)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "DRAFT_SCRAPED", "status": "ARCHIVED",
        })

        assert response.status_code == 422

    def test_storage_failure_is_503_with_retry_after(self, client, make_event, monkeypatch):
        event_id = make_event(S.DRAFT_SCRAPED)

        def failing_transition(*args, **kwargs):
            raise TransientStorageError("connection reset")

        monkeypatch.setattr("event_lifecycle.api.routes.events.transition", failing_transition)

        response = client.post(f"/api/events/{event_id}/transition", json={
            "expected_status": "DRAFT_SCRAPED", "status": "PENDING_DETAILS",
        })

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"


class TestPublishStatusEndpoint:
    """Test cases for POST /api/events/publish-status."""

    def test_bulk_publish(self, client, make_event):
        ready = make_event(S.READY_TO_PUBLISH)
        draft = make_event(S.DRAFT_MANUAL)

        response = client.post("/api/events/publish-status", json={
            "ids": [ready, draft], "status": "PUBLISHED", "actor": "alice",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] == [ready]
        assert [entry["id"] for entry in body["failed"]] == [draft]

    def test_empty_id_list_is_422(self, client):
        response = client.post("/api/events/publish-status", json={"ids": [], "status": "PUBLISHED"})

        assert response.status_code == 422
