"""
Tool: Task Manager
Purpose: CRUD operations for board tasks

This provides task lifecycle management for a user's board:
- Create tasks at the end of the user's ordering
- Edit title, description, status, due date and category
- Delete tasks (and their interaction history)
- Record interactions such as LLM suggestions

Edits never touch ``position``; only the reorder tool moves tasks.

Usage:
    python -m taskboard.tasks.manager --action create --user alice --title "Buy groceries"
    python -m taskboard.tasks.manager --action list --user alice
    python -m taskboard.tasks.manager --action get --user alice --task-id abc123
    python -m taskboard.tasks.manager --action update --user alice --task-id abc123 --status IN_PROGRESS
    python -m taskboard.tasks.manager --action move --user alice --task-id abc123 --after-id def456
    python -m taskboard.tasks.manager --action delete --user alice --task-id abc123

Dependencies:
    - sqlite3 (stdlib)

Output:
    JSON result with success status and data
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from taskboard.ordering.allocator import next_position

from . import INTERACTION_TYPES, TASK_STATUSES
from .categories import ensure_default_category
from .errors import AuthorizationError, TaskboardError, ValidationError, with_error_handling
from .guards import (
    require_user_id,
    validate_description,
    validate_due_date,
    validate_status,
    validate_title,
    verify_category_ownership,
    verify_task_ownership,
)
from .store import (
    delete_row,
    generate_id,
    insert_row,
    last_position,
    row_to_dict,
    transaction,
    update_fields,
)

logger = logging.getLogger(__name__)

# Marks an update_task argument the caller did not pass
UNSET: Any = object()


@with_error_handling
def create_task(
    user_id: str,
    title: str,
    description: Optional[str] = None,
    status: str = "TODO",
    due_date: Union[str, datetime, None] = None,
    category_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a new task at the end of the user's board.

    Args:
        user_id: User who owns the task
        title: 1-255 characters
        description: Up to 1000 characters
        status: TODO, IN_PROGRESS or COMPLETED
        due_date: ISO-8601 string or datetime
        category_id: Category to file under; the default category when omitted

    Returns:
        The new task row
    """
    require_user_id(user_id)
    title = validate_title(title)
    validate_description(description)
    validate_status(status)
    due = validate_due_date(due_date)

    with transaction() as conn:
        if category_id:
            verify_category_ownership(conn, user_id, category_id)
        else:
            category_id = ensure_default_category(conn, user_id)["id"]

        task = insert_row(conn, "tasks", {
            "id": generate_id(),
            "user_id": user_id,
            "title": title,
            "description": description,
            "status": status,
            "due_date": due,
            "category_id": category_id,
            "position": next_position(last_position(conn, "tasks", user_id)),
        })

    logger.info(f"Created task {task['id']} at position {task['position']}")
    return task


@with_error_handling
def get_tasks(
    user_id: str,
    category_id: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    List a user's tasks in board order.

    Args:
        user_id: User whose tasks to list
        category_id: Only tasks in this category (a filtered view of the same order)
        status: Only tasks with this status

    Returns:
        Task rows with ``category_name``, ascending by position
    """
    if status:
        validate_status(status)

    conditions = ["t.user_id = ?"]
    params: List[Any] = [user_id]
    if category_id:
        conditions.append("t.category_id = ?")
        params.append(category_id)
    if status:
        conditions.append("t.status = ?")
        params.append(status)

    with transaction() as conn:
        cursor = conn.execute(f"""
            SELECT t.*, c.name AS category_name
            FROM tasks t
            LEFT JOIN categories c ON c.id = t.category_id
            WHERE {" AND ".join(conditions)}
            ORDER BY t.position ASC, t.id ASC
        """, params)
        return [row_to_dict(row) for row in cursor.fetchall()]


@with_error_handling
def get_task(user_id: str, task_id: str, include_interactions: bool = False) -> Dict[str, Any]:
    """
    Get a task the user owns.

    Args:
        user_id: Requesting user
        task_id: Task ID to fetch
        include_interactions: Attach the task's interaction history

    Returns:
        The task row
    """
    with transaction() as conn:
        task = verify_task_ownership(conn, user_id, task_id)
        if include_interactions:
            cursor = conn.execute(
                "SELECT * FROM task_interactions WHERE task_id = ? ORDER BY created_at",
                (task_id,),
            )
            task["interactions"] = [row_to_dict(row) for row in cursor.fetchall()]
    return task


@with_error_handling
def update_task(
    user_id: str,
    task_id: str,
    title: Any = UNSET,
    description: Any = UNSET,
    status: Any = UNSET,
    due_date: Any = UNSET,
    category_id: Any = UNSET,
) -> Dict[str, Any]:
    """
    Update any subset of a task's fields. ``position`` is never changed here.

    Omitted arguments are left alone. ``None`` clears ``description`` or
    ``due_date``; title, status and category cannot be cleared.

    Returns:
        The updated task row
    """
    fields: Dict[str, Any] = {}

    if title is not UNSET:
        fields["title"] = validate_title(title)
    if description is not UNSET:
        fields["description"] = validate_description(description)
    if status is not UNSET:
        fields["status"] = validate_status(status)
    if due_date is not UNSET:
        fields["due_date"] = validate_due_date(due_date)
    if category_id is not UNSET:
        if not category_id:
            raise ValidationError("Category ID is required")
        fields["category_id"] = category_id

    if not fields:
        raise ValidationError("No fields to update")

    with transaction() as conn:
        verify_task_ownership(conn, user_id, task_id)
        if "category_id" in fields:
            verify_category_ownership(conn, user_id, category_id)

        task = update_fields(conn, "tasks", task_id, fields)

    logger.debug(f"Updated task {task_id}: {sorted(fields)}")
    return task


def update_task_title(user_id: str, task_id: str, title: str) -> Dict[str, Any]:
    return update_task(user_id, task_id, title=title)


def update_task_description(user_id: str, task_id: str, description: str) -> Dict[str, Any]:
    return update_task(user_id, task_id, description=description)


def update_task_status(user_id: str, task_id: str, status: str) -> Dict[str, Any]:
    return update_task(user_id, task_id, status=status)


def update_task_category(user_id: str, task_id: str, category_id: str) -> Dict[str, Any]:
    return update_task(user_id, task_id, category_id=category_id)


@with_error_handling
def delete_task(user_id: str, task_id: str) -> Dict[str, Any]:
    """
    Delete a task and its interaction history.

    Returns:
        The deleted task row
    """
    with transaction() as conn:
        task = verify_task_ownership(conn, user_id, task_id)
        # Cascading delete handles interactions
        if not delete_row(conn, "tasks", task_id):
            raise AuthorizationError("Task not found or unauthorized")

    logger.info(f"Deleted task {task_id}")
    return task


@with_error_handling
def record_interaction(user_id: str, task_id: str, interaction_type: str, content: str) -> Dict[str, Any]:
    """Store an interaction (LLM suggestion, analysis, user feedback) against a task."""
    if interaction_type not in INTERACTION_TYPES:
        raise ValidationError(f"Invalid interaction type. Must be one of: {INTERACTION_TYPES}")

    with transaction() as conn:
        verify_task_ownership(conn, user_id, task_id)
        return insert_row(conn, "task_interactions", {
            "id": generate_id(),
            "task_id": task_id,
            "type": interaction_type,
            "content": content,
        })


def main():
    from taskboard.ordering.reorder import move_task

    parser = argparse.ArgumentParser(description="Task Manager - board task CRUD operations")
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "list", "get", "update", "delete", "move"],
        help="Action to perform",
    )

    # Task identification
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--task-id", help="Task ID for operations")

    # Task creation/update
    parser.add_argument("--title", help="Task title")
    parser.add_argument("--description", help="Task description")
    parser.add_argument("--status", choices=TASK_STATUSES, help="Task status")
    parser.add_argument("--due", help="Due date (ISO format)")
    parser.add_argument("--category-id", help="Category ID")

    # Moves
    parser.add_argument("--before-id", help="Task that should sort right before")
    parser.add_argument("--after-id", help="Task that should sort right after")

    args = parser.parse_args()

    if args.action in ("get", "update", "delete", "move") and not args.task_id:
        print(json.dumps({"success": False, "error": f"--task-id required for {args.action}"}))
        sys.exit(1)

    try:
        if args.action == "create":
            data = create_task(
                user_id=args.user,
                title=args.title,
                description=args.description,
                status=args.status or "TODO",
                due_date=args.due,
                category_id=args.category_id,
            )
        elif args.action == "list":
            data = get_tasks(args.user, category_id=args.category_id, status=args.status)
        elif args.action == "get":
            data = get_task(args.user, args.task_id, include_interactions=True)
        elif args.action == "update":
            changes = {
                "title": args.title,
                "description": args.description,
                "status": args.status,
                "due_date": args.due,
                "category_id": args.category_id,
            }
            data = update_task(args.user, args.task_id, **{k: v for k, v in changes.items() if v is not None})
        elif args.action == "delete":
            data = delete_task(args.user, args.task_id)
        else:
            data = move_task(args.user, args.task_id, args.before_id, args.after_id, args.category_id)
        result = {"success": True, "data": data}
    except TaskboardError as e:
        result = e.to_dict()

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
