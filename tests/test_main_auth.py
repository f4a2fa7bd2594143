"""Tests for the optional X-App-Secret middleware."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from english_progress_tracker import main
from english_progress_tracker.config import Settings
from english_progress_tracker.services.progress import ProgressService


@pytest.fixture
def client(tmp_path):
    service = ProgressService(Settings(data_dir=tmp_path))
    with patch("english_progress_tracker.api.routes.get_service", return_value=service):
        with TestClient(main.app) as c:
            yield c


class TestAuthEnabled:
    @pytest.fixture(autouse=True)
    def secret(self, monkeypatch):
        monkeypatch.setattr(main.settings, "app_secret", "s3cret")

    def test_missing_header_rejected(self, client):
        response = client.get("/api/users/user_1/progress")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_wrong_header_rejected(self, client):
        response = client.get("/api/users/user_1/progress", headers={"X-App-Secret": "nope"})
        assert response.status_code == 401

    def test_correct_header_accepted(self, client):
        response = client.get("/api/users/user_1/progress", headers={"X-App-Secret": "s3cret"})
        assert response.status_code == 200
        assert response.json()["user_id"] == "user_1"

    def test_health_open_without_header(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthDisabled:
    def test_no_secret_means_no_check(self, client, monkeypatch):
        monkeypatch.setattr(main.settings, "app_secret", None)
        response = client.get("/api/users/user_1/progress")
        assert response.status_code == 200
