"""Tests for the signal, mindshare and leaderboard endpoints."""

from unittest.mock import MagicMock

from arc_scoring.api.dependencies import get_mindshare_service
from arc_scoring.errors import ConfigurationError, InvariantViolationError

NOW = "2026-03-10T12:00:00Z"


def _post(post_id: str, author_id: str = "alice", **kwargs) -> dict:
    body = {
        "post_id": post_id,
        "author_id": author_id,
        "project_id": "proj_a",
        "created_at": "2026-03-10T11:00:00Z",
    }
    body.update(kwargs)
    return body


class TestSignalRoute:
    """Tests for POST /signal/score."""

    def test_scores_posts(self, client):
        response = client.post(
            "/signal/score",
            json={
                "posts": [_post("p1", content_type="thread", likes=500, reposts=40)],
                "window": "7d",
                "now": NOW,
                "smart_followers_count": 4,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert 0 < data["signal_score"] <= 100
        assert data["trust_band"] in {"A", "B", "C", "D"}
        assert data["post_count"] == 1
        assert data["smart_followers_count"] == 4
        assert data["authenticity_multiplier"] == 1.0

    def test_no_posts(self, client):
        response = client.post("/signal/score", json={"now": NOW})
        assert response.status_code == 200
        assert response.json()["signal_score"] == 0.0
        assert response.json()["trust_band"] == "D"

    def test_invalid_sentiment_rejected(self, client):
        response = client.post("/signal/score", json={"posts": [_post("p1", sentiment=2.0)]})
        assert response.status_code == 422

    def test_naive_timestamp_rejected(self, client):
        response = client.post(
            "/signal/score",
            json={"posts": [_post("p1", created_at="2026-03-10T11:00:00")], "now": NOW},
        )
        assert response.status_code == 422
        assert "timezone-aware" in response.json()["detail"]

    def test_unknown_window_rejected(self, client):
        response = client.post("/signal/score", json={"window": "90d"})
        assert response.status_code == 422


class TestMindshareRoute:
    """Tests for POST /mindshare/normalize."""

    def test_normalizes(self, client):
        response = client.post(
            "/mindshare/normalize",
            json={
                "window": "24h",
                "projects": [
                    {"project_id": "a", "post_count": 10, "total_engagement": 100},
                    {"project_id": "b", "post_count": 10, "total_engagement": 100},
                    {"project_id": "c", "post_count": 10, "total_engagement": 100},
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_bps"] == 10000
        assert data["mindshare_bps"] == {"a": 3334, "b": 3333, "c": 3333}

    def test_empty(self, client):
        response = client.post("/mindshare/normalize", json={"projects": []})
        assert response.status_code == 200
        assert response.json()["total_bps"] == 0

    def test_duplicate_project(self, client):
        response = client.post(
            "/mindshare/normalize",
            json={"projects": [{"project_id": "a"}, {"project_id": "a"}]},
        )
        assert response.status_code == 422

    def test_configuration_error_maps_to_422(self, client):
        def _broken():
            raise ConfigurationError("Mindshare weights must sum to 1.0, got 1.3")

        client.app.dependency_overrides[get_mindshare_service] = _broken
        response = client.post("/mindshare/normalize", json={"projects": []})
        assert response.status_code == 422
        assert response.json()["error_type"] == "configuration"

    def test_invariant_violation_is_sanitized(self, client):
        service = MagicMock()
        service.normalize_mindshare.side_effect = InvariantViolationError("bps sum to 9999")
        client.app.dependency_overrides[get_mindshare_service] = lambda: service

        response = client.post("/mindshare/normalize", json={"projects": [{"project_id": "a"}]})

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Scoring invariant violated",
            "error_type": "invariant",
        }


class TestLeaderboardRoute:
    """Tests for POST /leaderboard."""

    def test_builds_leaderboard(self, client):
        response = client.post(
            "/leaderboard",
            json={
                "posts": [
                    _post("p1", author_id="alice", likes=100),
                    _post("p2", author_id="bob", likes=120),
                ],
                "participants": [
                    {
                        "account_id": "alice",
                        "project_id": "proj_a",
                        "arena_id": "arena_1",
                        "follow_verified": True,
                        "approval_state": "approved",
                    }
                ],
                "arena": {"arena_id": "arena_1", "project_id": "proj_a"},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [e["account_id"] for e in data["entries"]] == ["alice", "bob"]
        assert data["entries"][0]["final_score"] == 150
        assert data["entries"][0]["rank"] == 1
        assert data["entries"][1]["is_auto_tracked"] is True

    def test_invalid_arena(self, client):
        response = client.post(
            "/leaderboard",
            json={
                "arena": {
                    "arena_id": "arena_1",
                    "project_id": "proj_a",
                    "starts_at": "2026-03-10T00:00:00Z",
                    "ends_at": "2026-03-01T00:00:00Z",
                }
            },
        )
        assert response.status_code == 422
