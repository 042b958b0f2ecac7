"""
Tool: Category Manager
Purpose: CRUD operations for board categories

Every user has exactly one default category. It is created lazily the first
time anything needs it, sorts ahead of the user's other categories, and can
never be deleted. Deleting any other category either moves its tasks into a
target category (the default one unless told otherwise) or deletes them.

Usage:
    python -m taskboard.tasks.categories --action create --user alice --name "Errands"
    python -m taskboard.tasks.categories --action list --user alice
    python -m taskboard.tasks.categories --action update --user alice --category-id abc123 --name "Chores"
    python -m taskboard.tasks.categories --action delete --user alice --category-id abc123 --mode move
    python -m taskboard.tasks.categories --action move --user alice --category-id abc123 --before-id def456

Dependencies:
    - sqlite3 (stdlib)

Output:
    JSON result with success status and data
"""

import argparse
import json
import logging
import sqlite3
import sys
from typing import Any, Dict, List, Optional

from taskboard.ordering.allocator import allocate, next_position

from . import DEFAULT_CATEGORY_NAME, DELETE_MODES
from .errors import TaskboardError, ValidationError, with_error_handling
from .guards import (
    require_user_id,
    validate_category_name,
    validate_delete_mode,
    verify_category_ownership,
)
from .store import (
    delete_row,
    first_position,
    generate_id,
    insert_row,
    last_position,
    list_ordered,
    now_iso,
    row_to_dict,
    transaction,
    update_fields,
)

logger = logging.getLogger(__name__)


def ensure_default_category(conn: sqlite3.Connection, user_id: str) -> Dict[str, Any]:
    """Return the user's default category, creating it at the head of the scope if absent."""
    cursor = conn.execute(
        "SELECT * FROM categories WHERE user_id = ? AND is_default = 1", (user_id,)
    )
    default = row_to_dict(cursor.fetchone())
    if default:
        return default

    position = allocate(None, first_position(conn, "categories", user_id)).position
    default = insert_row(conn, "categories", {
        "id": generate_id(),
        "user_id": user_id,
        "name": DEFAULT_CATEGORY_NAME,
        "position": position,
        "is_default": 1,
    })
    logger.info(f"Created default category {default['id']} for user {user_id}")
    return default


@with_error_handling
def get_default_category_id(user_id: str) -> str:
    with transaction() as conn:
        return ensure_default_category(conn, user_id)["id"]


@with_error_handling
def create_category(user_id: str, name: str, is_default: bool = False) -> Dict[str, Any]:
    """
    Create a category at the end of the user's category order.

    Args:
        user_id: Owner
        name: 1-255 characters
        is_default: Make this the default category (only if the user has none yet)

    Returns:
        The new category row
    """
    require_user_id(user_id)
    name = validate_category_name(name)

    with transaction() as conn:
        if is_default:
            existing = conn.execute(
                "SELECT id FROM categories WHERE user_id = ? AND is_default = 1", (user_id,)
            ).fetchone()
            if existing:
                raise ValidationError("A default category already exists")

        category = insert_row(conn, "categories", {
            "id": generate_id(),
            "user_id": user_id,
            "name": name,
            "position": next_position(last_position(conn, "categories", user_id)),
            "is_default": 1 if is_default else 0,
        })

    logger.info(f"Created category {category['id']} for user {user_id}")
    return category


@with_error_handling
def get_categories(user_id: str, include_tasks: bool = True) -> List[Dict[str, Any]]:
    """
    List the user's categories in display order, creating the default one if needed.

    Args:
        user_id: Owner
        include_tasks: Attach each category's tasks (in position order) as ``tasks``

    Returns:
        Category rows ordered by position
    """
    with transaction() as conn:
        ensure_default_category(conn, user_id)
        categories = list_ordered(conn, "categories", user_id)

        if include_tasks:
            by_category: Dict[str, List[Dict[str, Any]]] = {c["id"]: [] for c in categories}
            for task in list_ordered(conn, "tasks", user_id):
                by_category.setdefault(task["category_id"], []).append(task)
            for category in categories:
                category["tasks"] = by_category[category["id"]]

    return categories


@with_error_handling
def get_category(user_id: str, category_id: str) -> Dict[str, Any]:
    with transaction() as conn:
        return verify_category_ownership(conn, user_id, category_id)


@with_error_handling
def update_category(
    user_id: str,
    category_id: str,
    name: Optional[str] = None,
    is_default: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Rename a category and/or make it the default one.

    Setting ``is_default`` transfers the flag from the current default.
    Clearing it on the default category is refused: there must always be one.
    Never touches ``position``.
    """
    if name is None and is_default is None:
        raise ValidationError("No fields to update")
    if name is not None:
        name = validate_category_name(name)

    with transaction() as conn:
        category = verify_category_ownership(conn, user_id, category_id)

        fields: Dict[str, Any] = {}
        if name is not None:
            fields["name"] = name

        if is_default and not category["is_default"]:
            conn.execute(
                "UPDATE categories SET is_default = 0, updated_at = ? WHERE user_id = ? AND is_default = 1",
                (now_iso(), user_id),
            )
            fields["is_default"] = 1
        elif is_default is False and category["is_default"]:
            raise ValidationError("Cannot unset the default category; make another category the default instead")

        if not fields:
            return category
        category = update_fields(conn, "categories", category_id, fields)

    return category


@with_error_handling
def delete_category(
    user_id: str,
    category_id: str,
    mode: str = "move",
    target_category_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Delete a category after relocating or deleting its tasks.

    Args:
        user_id: Owner
        category_id: Category to delete (never the default one)
        mode: "move" to relocate tasks, "delete_all" to delete them with the category
        target_category_id: Destination for "move"; the default category when omitted

    Returns:
        dict with the deleted category, mode, destination and number of tasks affected
    """
    validate_delete_mode(mode)

    with transaction() as conn:
        category = verify_category_ownership(conn, user_id, category_id)
        if category["is_default"]:
            raise ValidationError("Cannot delete default category")

        destination = None
        if mode == "move":
            if target_category_id:
                if target_category_id == category_id:
                    raise ValidationError("Cannot move tasks into the category being deleted")
                destination = verify_category_ownership(conn, user_id, target_category_id)["id"]
            else:
                destination = ensure_default_category(conn, user_id)["id"]

            cursor = conn.execute(
                "UPDATE tasks SET category_id = ?, updated_at = ? WHERE category_id = ? AND user_id = ?",
                (destination, now_iso(), category_id, user_id),
            )
        else:
            cursor = conn.execute(
                "DELETE FROM tasks WHERE category_id = ? AND user_id = ?", (category_id, user_id)
            )
        affected = cursor.rowcount

        delete_row(conn, "categories", category_id)

    logger.info(f"Deleted category {category_id} ({mode}, {affected} tasks)")
    return {
        "category": category,
        "mode": mode,
        "target_category_id": destination,
        "tasks_affected": affected,
    }


def main():
    from taskboard.ordering.reorder import move_category

    parser = argparse.ArgumentParser(description="Category Manager - board category CRUD operations")
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "list", "get", "update", "delete", "move", "default"],
        help="Action to perform",
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--category-id", help="Category ID for operations")
    parser.add_argument("--name", help="Category name")
    parser.add_argument("--default", action="store_true", help="Make this the default category")
    parser.add_argument("--mode", choices=DELETE_MODES, default="move", help="What to do with tasks on delete")
    parser.add_argument("--target-id", help="Destination category for moved tasks")
    parser.add_argument("--before-id", help="Category that should sort right before")
    parser.add_argument("--after-id", help="Category that should sort right after")
    parser.add_argument("--no-tasks", action="store_true", help="Omit tasks when listing")

    args = parser.parse_args()

    if args.action in ("get", "update", "delete", "move") and not args.category_id:
        print(json.dumps({"success": False, "error": f"--category-id required for {args.action}"}))
        sys.exit(1)

    try:
        if args.action == "create":
            data = create_category(args.user, args.name, is_default=args.default)
        elif args.action == "list":
            data = get_categories(args.user, include_tasks=not args.no_tasks)
        elif args.action == "get":
            data = get_category(args.user, args.category_id)
        elif args.action == "update":
            data = update_category(args.user, args.category_id, name=args.name, is_default=args.default or None)
        elif args.action == "delete":
            data = delete_category(args.user, args.category_id, mode=args.mode, target_category_id=args.target_id)
        elif args.action == "move":
            data = move_category(args.user, args.category_id, args.before_id, args.after_id)
        else:
            data = {"category_id": get_default_category_id(args.user)}
        result = {"success": True, "data": data}
    except TaskboardError as e:
        result = e.to_dict()

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
