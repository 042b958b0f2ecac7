"""Shared test fixtures for Task Board tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- Standard test user IDs and task data

Usage:
    def test_something(board_db):
        # every store connection in this test goes to a throwaway database
        ...
"""

import os
import sqlite3
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "taskboard"


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def board_db(temp_db: Path) -> Generator[Path, None, None]:
    """Point the board store at the temporary database and create its tables."""
    with patch("taskboard.tasks.store.DB_PATH", temp_db):
        from taskboard.tasks import store

        conn = store.get_connection()
        conn.close()

        yield temp_db


@pytest.fixture
def db_snapshot(board_db: Path):
    """Return a callable that dumps every board table, for before/after comparisons."""

    def snapshot() -> dict:
        conn = sqlite3.connect(str(board_db))
        conn.row_factory = sqlite3.Row
        try:
            return {
                table: [dict(row) for row in conn.execute(f"SELECT * FROM {table} ORDER BY id")]
                for table in ("users", "categories", "tasks", "task_interactions")
            }
        finally:
            conn.close()

    return snapshot


@pytest.fixture
def set_positions(board_db: Path):
    """Return a callable that forces raw positions, for crowding scenarios."""

    def apply(table: str, positions: dict) -> None:
        conn = sqlite3.connect(str(board_db))
        for entity_id, position in positions.items():
            conn.execute(f"UPDATE {table} SET position = ? WHERE id = ?", (position, entity_id))
        conn.commit()
        conn.close()

    return apply


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


@pytest.fixture
def other_user_id() -> str:
    """A second user who must never see the first user's board."""
    return "intruder_456"


# ─────────────────────────────────────────────────────────────────────────────
# Task Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_task() -> dict:
    """Sample task data for testing.

    Returns:
        dict with task fields
    """
    return {
        "title": "Buy ingredients for chicken noodle soup",
        "description": "Carrots, celery, chicken, noodles",
        "status": "TODO",
        "due_date": "2026-01-15T18:00:00",
    }
