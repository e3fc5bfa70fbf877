"""Tests for the dashboard API."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from screen_time.config import TrackerSettings
from screen_time.tracker import UsageTracker
from screen_time.webapp import create_app


@pytest.fixture()
def tracker(clock, foreground, tmp_path):
    foreground.name = "Editor"
    return UsageTracker(
        TrackerSettings(),
        foreground=foreground,
        clock=clock,
        temp_dir=tmp_path,
    )


@pytest.fixture()
def client(tracker):
    app = create_app(tracker=tracker, start_tracking=False)
    with TestClient(app) as test_client:
        yield test_client


def test_status(client):
    body = client.get("/api/status").json()
    assert body["state"] == "idle"
    assert body["history_path"] is None
    assert body["tick_seconds"] == 1.0
    assert body["refresh_seconds"] == 300.0


def test_applications_sorted_by_time(client, tracker, foreground):
    for _ in range(3):
        tracker.tick()
    foreground.name = "Terminal"
    for _ in range(65):
        tracker.tick()

    body = client.get("/api/applications").json()
    assert [entry["name"] for entry in body["applications"]] == ["Terminal", "Editor"]
    assert body["applications"][0]["display"] == "1m 5s"


def test_history_source_and_refresh(client, history_factory, clock):
    path = history_factory(
        [
            ("https://a.com/", clock.now - timedelta(minutes=10), 0),
            ("https://b.com/", clock.now - timedelta(minutes=9), 0),
            ("https://a.com/", clock.now - timedelta(minutes=8), 0),
            ("https://c.com/", clock.now - timedelta(minutes=5), 0),
        ]
    )
    response = client.put("/api/history-source", json={"path": str(path)})
    assert response.status_code == 200
    assert [entry["domain"] for entry in response.json()["websites"]] == ["a.com", "b.com"]

    body = client.get("/api/websites").json()
    assert body["window_hours"] == 24.0
    assert body["websites"][0] == {"domain": "a.com", "seconds": 240.0, "display": "4m"}

    refreshed = client.post("/api/refresh").json()
    assert refreshed["websites"] == body["websites"]


def test_missing_history_source_is_rejected(client, tmp_path):
    response = client.put("/api/history-source", json={"path": str(tmp_path / "nope")})
    assert response.status_code == 400


def test_blank_history_source_is_rejected(client):
    response = client.put("/api/history-source", json={"path": "  "})
    assert response.status_code == 400


def test_startup_with_history_source_shows_websites(clock, foreground, history_factory, tmp_path):
    path = history_factory(
        [
            ("https://a.com/", clock.now - timedelta(minutes=10), 0),
            ("https://b.com/", clock.now - timedelta(minutes=9), 0),
        ]
    )
    tracker = UsageTracker(
        TrackerSettings(),
        foreground=foreground,
        history_path=path,
        clock=clock,
        temp_dir=tmp_path,
    )
    with TestClient(create_app(tracker=tracker, start_tracking=True)) as test_client:
        body = test_client.get("/api/websites").json()
        assert body["websites"] == [{"domain": "a.com", "seconds": 60.0, "display": "1m"}]
        assert test_client.get("/api/status").json()["state"] == "tracking"
    assert tracker.state.value == "idle"
