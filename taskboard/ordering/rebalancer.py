"""
Rebalancer: restore uniform spacing across a whole ordering scope.

Runs only inside the reorder transaction that detected the crowding, so a
half-applied rebalance is never visible to another request.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Sequence, Tuple

from taskboard.tasks.errors import PositionError
from taskboard.tasks.store import update_position

from . import GAP

logger = logging.getLogger(__name__)


def rebalance(entities: Sequence[Dict[str, Any]]) -> List[Tuple[str, float]]:
    """
    Assign evenly spaced positions, preserving relative order.

    Args:
        entities: Rows with ``id`` and ``position``; re-sorted here, ties keep input order

    Returns:
        (id, new_position) pairs: GAP, 2*GAP, 3*GAP, ...
    """
    ordered = sorted(entities, key=lambda e: e["position"])
    return [(entity["id"], (index + 1) * GAP) for index, entity in enumerate(ordered)]


def persist_rebalance(
    conn: sqlite3.Connection, table: str, assignments: Sequence[Tuple[str, float]]
) -> None:
    """Write every assignment on the caller's transaction; any missing row aborts."""
    for entity_id, position in assignments:
        if not update_position(conn, table, entity_id, position):
            raise PositionError(f"Rebalance failed: {entity_id} no longer exists")
    logger.warning(f"Rebalanced {len(assignments)} {table}")


__all__ = ["rebalance", "persist_rebalance"]
