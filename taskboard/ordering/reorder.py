"""
Tool: Reorder
Purpose: Atomically move a task or category to a new slot in its user's board

A move names the entity, optionally the entity that should end up right
before it and/or right after it, and (for tasks) optionally a new category.
The whole move runs in one store transaction:

    verify ownership -> load sibling set -> allocate
        ok              -> write -> commit
        needs rebalance -> rebalance scope -> allocate again -> write -> commit
        any error       -> rollback, typed error

Neighbor positions are always read from the freshly loaded sibling set, never
from the client. Neighbors are resolved against the user's whole scope: a
slot "after B" lies between B and B's successor in the global order even if
the client only sees one category column.

Usage:
    python -m taskboard.ordering.reorder --user alice --task-id abc123 --after-id def456
    python -m taskboard.ordering.reorder --user alice --category-id cat1 --before-id cat2

Output:
    JSON result with success status and the moved entity
"""

import argparse
import json
import logging
import sqlite3
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from taskboard.tasks.errors import AuthorizationError, PositionError, TaskboardError, with_error_handling
from taskboard.tasks.guards import verify_category_ownership, verify_task_ownership
from taskboard.tasks.store import list_ordered, transaction, update_fields

from .allocator import allocate
from .rebalancer import persist_rebalance, rebalance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderScope:
    """One kind of per-user ordered collection."""

    table: str
    label: str


TASK_SCOPE = OrderScope(table="tasks", label="task")
CATEGORY_SCOPE = OrderScope(table="categories", label="category")


def _index_of(siblings: List[Dict[str, Any]], entity_id: str, scope: OrderScope) -> int:
    for index, sibling in enumerate(siblings):
        if sibling["id"] == entity_id:
            return index
    raise PositionError(f"Reference {scope.label} not found")


def resolve_bounds(
    siblings: List[Dict[str, Any]],
    before_id: Optional[str],
    after_id: Optional[str],
    scope: OrderScope,
) -> Tuple[Optional[float], Optional[float]]:
    """
    Turn neighbor ids into the (lower, upper) positions bounding the slot.

    Args:
        siblings: The scope without the moving entity, ascending by position
        before_id: Entity that should sort right before the moved one
        after_id: Entity that should sort right after the moved one
        scope: Which collection the ids belong to (for error messages)

    Returns:
        Positions of the slot's neighbors; None marks an open end
    """
    if before_id:
        low = _index_of(siblings, before_id, scope)
        if after_id and _index_of(siblings, after_id, scope) <= low:
            raise PositionError(f"Reference {scope.label}s are out of order")
        upper = siblings[low + 1]["position"] if low + 1 < len(siblings) else None
        return siblings[low]["position"], upper

    if after_id:
        high = _index_of(siblings, after_id, scope)
        lower = siblings[high - 1]["position"] if high > 0 else None
        return lower, siblings[high]["position"]

    # No references: append to the end of the scope
    if siblings:
        return siblings[-1]["position"], None
    return None, None


def reorder_in(
    conn: sqlite3.Connection,
    scope: OrderScope,
    user_id: str,
    entity_id: str,
    before_id: Optional[str] = None,
    after_id: Optional[str] = None,
) -> float:
    """
    Compute the moved entity's new position on an open transaction.

    Rebalances the scope at most once. Sibling writes from a rebalance happen
    here; the caller writes the moved entity itself.
    """
    siblings = [s for s in list_ordered(conn, scope.table, user_id) if s["id"] != entity_id]

    lower, upper = resolve_bounds(siblings, before_id, after_id, scope)
    allocation = allocate(lower, upper)

    if allocation.needs_rebalance:
        logger.warning(
            f"Positions too close between {lower} and {upper}; rebalancing {len(siblings)} {scope.table}"
        )
        assignments = rebalance(siblings)
        persist_rebalance(conn, scope.table, assignments)

        fresh = dict(assignments)
        siblings = sorted(
            ({**s, "position": fresh[s["id"]]} for s in siblings), key=lambda s: s["position"]
        )
        lower, upper = resolve_bounds(siblings, before_id, after_id, scope)
        allocation = allocate(lower, upper)
        if allocation.needs_rebalance:
            raise PositionError("Positions too close even after rebalancing")

    return allocation.position


@with_error_handling
def move_task(
    user_id: str,
    task_id: str,
    before_id: Optional[str] = None,
    after_id: Optional[str] = None,
    category_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Move a task between two siblings, optionally into another category.

    Args:
        user_id: Requesting user; must own the task and the target category
        task_id: Task to move
        before_id: Task that should end up immediately before it
        after_id: Task that should end up immediately after it
        category_id: New category for the task

    Returns:
        The updated task row
    """
    logger.debug(f"move_task user={user_id} task={task_id} before={before_id} after={after_id} category={category_id}")

    with transaction() as conn:
        verify_task_ownership(conn, user_id, task_id)
        if category_id:
            verify_category_ownership(conn, user_id, category_id)

        position = reorder_in(conn, TASK_SCOPE, user_id, task_id, before_id, after_id)

        fields: Dict[str, Any] = {"position": position}
        if category_id:
            fields["category_id"] = category_id
        task = update_fields(conn, "tasks", task_id, fields)
        if task is None:
            raise AuthorizationError("Task not found or unauthorized")

    logger.info(f"Moved task {task_id} to position {position}")
    return task


@with_error_handling
def move_category(
    user_id: str,
    category_id: str,
    before_id: Optional[str] = None,
    after_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Move a category between two sibling categories.

    Returns:
        The updated category row
    """
    with transaction() as conn:
        verify_category_ownership(conn, user_id, category_id)

        position = reorder_in(conn, CATEGORY_SCOPE, user_id, category_id, before_id, after_id)

        category = update_fields(conn, "categories", category_id, {"position": position})
        if category is None:
            raise AuthorizationError("Category not found or unauthorized")

    logger.info(f"Moved category {category_id} to position {position}")
    return category


def main():
    parser = argparse.ArgumentParser(description="Reorder - move a task or category on a board")
    parser.add_argument("--user", required=True, help="User ID")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--task-id", help="Task to move")
    target.add_argument("--category-id", help="Category to move")
    parser.add_argument("--before-id", help="Entity that should sort right before")
    parser.add_argument("--after-id", help="Entity that should sort right after")
    parser.add_argument("--to-category", help="New category for a moved task")

    args = parser.parse_args()

    try:
        if args.task_id:
            entity = move_task(args.user, args.task_id, args.before_id, args.after_id, args.to_category)
        else:
            entity = move_category(args.user, args.category_id, args.before_id, args.after_id)
        result = {"success": True, "data": entity}
    except TaskboardError as e:
        result = e.to_dict()

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
