"""
Error taxonomy for board operations.

Every failure that leaves a board operation is one of four tagged kinds.
Callers dispatch on ``error.kind`` rather than on the concrete class:

    VALIDATION     malformed input, surfaced verbatim
    AUTHORIZATION  entity missing or owned by someone else (never distinguished)
    POSITION       an ordering reference could not be resolved, or a rebalance failed
    INTERNAL       anything the store raised that we did not classify
"""

import functools
import logging
import sqlite3
from enum import Enum
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ErrorKind(str, Enum):
    """Closed set of error categories."""

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    POSITION = "position"
    INTERNAL = "internal"


class TaskboardError(Exception):
    """Base class for all typed board errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message, "kind": self.kind.value}


class ValidationError(TaskboardError):
    kind = ErrorKind.VALIDATION


class AuthorizationError(TaskboardError):
    kind = ErrorKind.AUTHORIZATION


class PositionError(TaskboardError):
    kind = ErrorKind.POSITION


class InternalError(TaskboardError):
    kind = ErrorKind.INTERNAL


def wrap_store_error(error: Exception) -> InternalError:
    """Translate a store failure into an InternalError without leaking detail."""
    if isinstance(error, sqlite3.IntegrityError):
        logger.error(f"Constraint violation: {error}")
        return InternalError("Constraint violation while saving changes")
    if isinstance(error, sqlite3.OperationalError):
        logger.error(f"Database unavailable: {error}")
        return InternalError("Database is unavailable, please retry")
    if isinstance(error, sqlite3.Error):
        logger.error(f"Database error ({type(error).__name__}): {error}")
        return InternalError("Database error")
    logger.error(f"Unexpected error ({type(error).__name__}): {error}", exc_info=error)
    return InternalError("An unexpected error occurred")


def with_error_handling(func: F) -> F:
    """
    Let typed board errors through; wrap everything else as InternalError.

    Usage:
        @with_error_handling
        def delete_task(user_id, task_id): ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TaskboardError as e:
            logger.info(f"{func.__name__} failed ({e.kind.value}): {e.message}")
            raise
        except Exception as e:
            raise wrap_store_error(e) from e

    return wrapper  # type: ignore[return-value]


__all__ = [
    "ErrorKind",
    "TaskboardError",
    "ValidationError",
    "AuthorizationError",
    "PositionError",
    "InternalError",
    "wrap_store_error",
    "with_error_handling",
]
