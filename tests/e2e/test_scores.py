"""End-to-end tests for Fun Score endpoints."""

from datetime import timedelta

import pytest
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from crew.domain.model.common import utc_now
from crew.interface.api.app import create_app
from tests.conftest import bearer, register
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client with test container."""
    return TestClient(create_app(build_test_container(None, FastapiProvider())))


@pytest.fixture
def crew(client):
    alice, alice_user = register(client, "Alice", "alice@example.com")
    bob, bob_user = register(client, "Bob", "bob@example.com")
    group = client.post("/groups", json={"name": "Hikers"}, headers=bearer(alice))
    group = group.json()["data"]
    client.post(
        "/groups/join", json={"invite_code": group["invite_code"]}, headers=bearer(bob)
    )
    return {
        "alice": alice,
        "bob": bob,
        "alice_id": alice_user["id"],
        "bob_id": bob_user["id"],
        "group_id": group["id"],
    }


class TestScoreEndpoints:
    """End-to-end tests for scores and leaderboards."""

    def test_leaderboard_starts_empty_then_lazy_default(self, client, crew):
        # Arrange
        group_id = crew["group_id"]
        headers = bearer(crew["alice"])

        # Act
        empty = client.get(f"/scores/leaderboard/{group_id}", headers=headers)
        score = client.get(
            f"/scores/user/{crew['alice_id']}", params={"group_id": group_id}, headers=headers
        )
        board = client.get(f"/scores/leaderboard/{group_id}", headers=headers)

        # Assert
        assert empty.json()["data"] == []
        assert score.status_code == 200
        assert score.json()["data"]["score"] == 500
        assert score.json()["data"]["tier"] == "Poor"
        entries = board.json()["data"]
        assert len(entries) == 1
        assert entries[0]["rank"] == 1
        assert entries[0]["user_id"] == crew["alice_id"]
        assert entries[0]["score"] == 500
        assert entries[0]["user"]["name"] == "Alice"

    def test_overall_score_without_records(self, client, crew):
        response = client.get(
            f"/scores/user/{crew['bob_id']}", headers=bearer(crew["alice"])
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["score"] == 500
        assert data["group_count"] == 0

    def test_check_in_shows_up_in_history(self, client, crew):
        # Arrange
        event = client.post(
            "/events",
            json={
                "title": "Pub quiz",
                "date_time": (utc_now() + timedelta(hours=1)).isoformat(),
                "location": {"name": "The Crown"},
                "group_id": crew["group_id"],
            },
            headers=bearer(crew["alice"]),
        ).json()["data"]
        client.put(
            f"/events/{event['id']}/rsvp", json={"status": "going"}, headers=bearer(crew["bob"])
        )
        client.post(f"/events/{event['id']}/checkin", headers=bearer(crew["bob"]))

        # Act
        history = client.get(
            f"/scores/history/{crew['bob_id']}",
            params={"group_id": crew["group_id"]},
            headers=bearer(crew["alice"]),
        )
        board = client.get(
            f"/scores/leaderboard/{crew['group_id']}", headers=bearer(crew["alice"])
        )

        # Assert
        data = history.json()["data"]
        assert data["current_score"] == 510
        assert [(h["change"], h["reason"]) for h in data["history"]] == [
            (10, "Checked in: Pub quiz")
        ]
        assert board.json()["data"][0]["user_id"] == crew["bob_id"]
        assert board.json()["data"][0]["score"] == 510

    def test_history_requires_group_id(self, client, crew):
        response = client.get(
            f"/scores/history/{crew['bob_id']}", headers=bearer(crew["alice"])
        )

        assert response.status_code == 400

    def test_non_member_cannot_read_group_scores(self, client, crew):
        carol, _ = register(client, "Carol", "carol@example.com")

        board = client.get(f"/scores/leaderboard/{crew['group_id']}", headers=bearer(carol))
        score = client.get(
            f"/scores/user/{crew['alice_id']}",
            params={"group_id": crew["group_id"]},
            headers=bearer(carol),
        )

        assert board.status_code == 403
        assert score.status_code == 403

    def test_recalculate(self, client, crew):
        response = client.post(
            f"/scores/recalculate/{crew['group_id']}", headers=bearer(crew["bob"])
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Scores recalculated"
        assert {s["user_id"] for s in response.json()["data"]} == {
            crew["alice_id"],
            crew["bob_id"],
        }
