"""
Ownership and input guards.

Every mutating board operation calls these before touching the store. The
ownership checks run on the caller's connection so that, inside a
transaction, the entity cannot disappear between the check and the write.
"""

import sqlite3
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from . import (
    CATEGORY_NAME_MAX_LENGTH,
    DELETE_MODES,
    DESCRIPTION_MAX_LENGTH,
    TASK_STATUSES,
    TITLE_MAX_LENGTH,
)
from .errors import AuthorizationError, ValidationError
from .store import find_owned


def validate_title(title: Optional[str]) -> str:
    """Return the trimmed title; length limits apply after trimming."""
    title = (title or "").strip()
    if not title or len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be between 1 and {TITLE_MAX_LENGTH} characters")
    return title


def validate_description(description: Optional[str]) -> Optional[str]:
    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters")
    return description


def validate_status(status: str) -> str:
    if status not in TASK_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {TASK_STATUSES}")
    return status


def validate_due_date(due_date: Union[str, date, datetime, None]) -> Optional[str]:
    """Normalize a due date to an ISO-8601 string, or None."""
    if due_date is None or due_date == "":
        return None
    if isinstance(due_date, datetime):
        return due_date.isoformat()
    if isinstance(due_date, date):
        return datetime(due_date.year, due_date.month, due_date.day).isoformat()
    if isinstance(due_date, str):
        try:
            return datetime.fromisoformat(due_date).isoformat()
        except ValueError:
            pass
    raise ValidationError("Invalid due date format")


def validate_category_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name or len(name) > CATEGORY_NAME_MAX_LENGTH:
        raise ValidationError(f"Category name must be between 1 and {CATEGORY_NAME_MAX_LENGTH} characters")
    return name


def validate_delete_mode(mode: str) -> str:
    if mode not in DELETE_MODES:
        raise ValidationError(f"Invalid delete mode. Must be one of: {DELETE_MODES}")
    return mode


def require_user_id(user_id: Optional[str]) -> str:
    if not user_id:
        raise ValidationError("User ID is required")
    return user_id


def verify_task_ownership(conn: sqlite3.Connection, user_id: str, task_id: str) -> Dict[str, Any]:
    task = find_owned(conn, "tasks", task_id, user_id)
    if not task:
        raise AuthorizationError("Task not found or unauthorized")
    return task


def verify_category_ownership(conn: sqlite3.Connection, user_id: str, category_id: str) -> Dict[str, Any]:
    category = find_owned(conn, "categories", category_id, user_id)
    if not category:
        raise AuthorizationError("Category not found or unauthorized")
    return category


__all__ = [
    "validate_title",
    "validate_description",
    "validate_status",
    "validate_due_date",
    "validate_category_name",
    "validate_delete_mode",
    "require_user_id",
    "verify_task_ownership",
    "verify_category_ownership",
]
