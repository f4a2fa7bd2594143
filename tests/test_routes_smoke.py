"""Smoke tests for API routes."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from english_progress_tracker.api.routes import router
from english_progress_tracker.config import Settings
from english_progress_tracker.services.progress import ProgressService


@pytest.fixture
def service(tmp_path):
    return ProgressService(Settings(data_dir=tmp_path))


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(router)
    with patch("english_progress_tracker.api.routes.get_service", return_value=service):
        with TestClient(app) as c:
            yield c


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestProgress:
    def test_progress_created_on_first_fetch(self, client):
        response = client.get("/api/users/user_1/progress")
        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "user_1"
        assert data["current_streak"] == 0
        assert data["last_practice_date"].startswith("1970-01-01")

    def test_invalid_user_id(self, client):
        response = client.get("/api/users/bad.id!/progress")
        assert response.status_code == 400

    def test_practice_completion(self, client):
        response = client.post("/api/users/user_1/practice", json={"amount": 500})
        assert response.status_code == 200
        data = response.json()
        assert data["record"]["daily_speaking_seconds"] == 50
        assert data["record"]["current_streak"] == 1
        assert data["milestone"] == 0
        assert data["daily_challenge_due"] is True

    def test_vocabulary_practice(self, client):
        response = client.post("/api/users/user_1/practice", json={"is_vocabulary": True})
        assert response.json()["record"]["daily_vocab_learned"] == 1

    def test_daily_summary(self, client):
        client.post("/api/users/user_1/practice", json={"amount": 3000})
        response = client.get("/api/users/user_1/progress/today")
        assert response.status_code == 200
        assert response.json()["speaking_percent"] == 50.0

    def test_practice_rejects_bad_body(self, client):
        response = client.post("/api/users/user_1/practice", json={"amount": "lots"})
        assert response.status_code == 422

    def test_practice_rejects_infinite_amount(self, client):
        for _ in range(5):
            client.post("/api/users/user_1/practice", json={"is_vocabulary": True})
        response = client.post(
            "/api/users/user_1/practice",
            content='{"amount": 1e400}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
        record = client.get("/api/users/user_1/progress").json()
        assert record["daily_speaking_seconds"] == 0
        assert record["daily_streak_awarded"] is False


class TestSessions:
    def test_record_and_list(self, client):
        response = client.post(
            "/api/users/user_2/sessions",
            json={"mode": "speaking", "score": 90, "prompt": "Describe your town"},
        )
        assert response.status_code == 200
        assert response.json()["record"]["daily_speaking_seconds"] == 9

        listed = client.get("/api/users/user_2/sessions").json()
        assert len(listed) == 1
        assert listed[0]["mode"] == "speaking"
        assert listed[0]["prompt"] == "Describe your town"

    def test_nan_score_rejected(self, client):
        response = client.post(
            "/api/users/user_2/sessions",
            content='{"mode": "speaking", "score": NaN}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert client.get("/api/users/user_2/sessions").json() == []

    def test_unknown_mode(self, client):
        response = client.post("/api/users/user_2/sessions", json={"mode": "dancing"})
        assert response.status_code == 422

    def test_bad_limit(self, client):
        assert client.get("/api/users/user_2/sessions?limit=0").status_code == 400


class TestMilestoneAndChallenge:
    def test_acknowledge_milestone(self, client):
        response = client.post("/api/users/user_3/milestone/acknowledge")
        assert response.status_code == 200
        assert response.json()["milestone_achieved"] == 0

    def test_daily_challenge_flow(self, client):
        assert client.get("/api/users/user_3/daily-challenge").json() == {"due": True}
        assert client.post("/api/users/user_3/daily-challenge/close").status_code == 200
        assert client.get("/api/users/user_3/daily-challenge").json() == {"due": False}


class TestProfile:
    def test_update_goal_and_difficulty(self, client):
        response = client.patch(
            "/api/users/user_4/profile",
            json={"learning_goal": "Pass TOEIC", "difficulty_level": "Intermediate"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["learning_goal"] == "Pass TOEIC"
        assert data["difficulty_level"] == "Intermediate"

    def test_invalid_difficulty(self, client):
        response = client.patch("/api/users/user_4/profile", json={"difficulty_level": "Expert"})
        assert response.status_code == 422


class TestVocabulary:
    def test_save_list_delete(self, client):
        response = client.post(
            "/api/users/user_5/vocabulary",
            json={"word": "meticulous", "synonyms": ["careful"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["record"]["words_learned"] == 1
        word_id = data["word_id"]

        words = client.get("/api/users/user_5/vocabulary").json()
        assert [w["word"] for w in words] == ["meticulous"]

        assert client.delete(f"/api/users/user_5/vocabulary/{word_id}").status_code == 200
        assert client.get("/api/users/user_5/vocabulary").json() == []

    def test_delete_missing_word(self, client):
        response = client.delete("/api/users/user_5/vocabulary/missing")
        assert response.status_code == 404
