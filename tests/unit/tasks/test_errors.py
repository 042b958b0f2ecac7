"""Tests for taskboard/tasks/errors.py"""

import sqlite3

import pytest

from taskboard.tasks.errors import (
    AuthorizationError,
    ErrorKind,
    InternalError,
    PositionError,
    TaskboardError,
    ValidationError,
    with_error_handling,
    wrap_store_error,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        "error_class, kind",
        [
            (ValidationError, ErrorKind.VALIDATION),
            (AuthorizationError, ErrorKind.AUTHORIZATION),
            (PositionError, ErrorKind.POSITION),
            (InternalError, ErrorKind.INTERNAL),
        ],
    )
    def test_each_class_carries_its_kind(self, error_class, kind):
        error = error_class("boom")

        assert error.kind is kind
        assert isinstance(error, TaskboardError)

    def test_to_dict(self):
        assert PositionError("Reference task not found").to_dict() == {
            "success": False,
            "error": "Reference task not found",
            "kind": "position",
        }


class TestWrapStoreError:
    def test_integrity_error(self):
        error = wrap_store_error(sqlite3.IntegrityError("UNIQUE constraint failed: tasks.id"))

        assert error.kind is ErrorKind.INTERNAL
        assert "UNIQUE" not in error.message

    def test_operational_error(self):
        error = wrap_store_error(sqlite3.OperationalError("database is locked"))

        assert error.message == "Database is unavailable, please retry"

    def test_anything_else(self):
        assert wrap_store_error(RuntimeError("oops")).kind is ErrorKind.INTERNAL


class TestWithErrorHandling:
    def test_passes_results_through(self):
        @with_error_handling
        def ok():
            return 42

        assert ok() == 42

    def test_typed_errors_pass_unchanged(self):
        @with_error_handling
        def fails():
            raise PositionError("Reference task not found")

        with pytest.raises(PositionError):
            fails()

    def test_store_errors_become_internal(self):
        @with_error_handling
        def fails():
            raise sqlite3.OperationalError("disk I/O error")

        with pytest.raises(InternalError) as exc_info:
            fails()

        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
