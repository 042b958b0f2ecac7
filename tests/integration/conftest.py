"""
Integration test fixtures for the Task Board API.

Provides fixtures specific to integration testing:
- FastAPI test client backed by an isolated database
- Request headers identifying the test users
"""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# API Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def test_client(board_db: Path) -> Generator:
    """TestClient for the board API; every store call goes to the temp database."""
    from fastapi.testclient import TestClient

    from taskboard.api.main import app

    with patch.dict("taskboard.api.auth.api_config", {"require_auth": True, "user_header": "X-User-Id"}):
        with TestClient(app) as client:
            yield client


@pytest.fixture
def auth_headers(mock_user_id: str) -> dict:
    return {"X-User-Id": mock_user_id}


@pytest.fixture
def other_headers(other_user_id: str) -> dict:
    return {"X-User-Id": other_user_id}


@pytest.fixture
def api(test_client, auth_headers):
    """Small helpers for building a board through the API."""

    class Api:
        def task(self, title, headers=auth_headers, **fields):
            response = test_client.post("/api/tasks", json={"title": title, **fields}, headers=headers)
            assert response.status_code == 201, response.text
            return response.json()

        def category(self, name, headers=auth_headers):
            response = test_client.post("/api/categories", json={"name": name}, headers=headers)
            assert response.status_code == 201, response.text
            return response.json()

        def order(self, headers=auth_headers, **params):
            response = test_client.get("/api/tasks", params=params, headers=headers)
            assert response.status_code == 200, response.text
            return [t["id"] for t in response.json()["tasks"]]

    return Api()
