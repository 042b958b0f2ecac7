"""Task Board - per-user tasks and categories with drag-and-drop ordering

Philosophy:
    A board is one user's tasks, grouped into categories. Display order is
    a single floating-point ``position`` per entity, so a drag-and-drop move
    only ever rewrites the moved entity (and, rarely, rebalances its scope).

Components:
    store.py: SQLite schema, connection and transaction helpers
    errors.py: Typed error taxonomy shared by every operation
    guards.py: Ownership checks and input validation
    manager.py: Task CRUD operations
    categories.py: Category CRUD and the per-user default category
    users.py: Lazy provisioning of externally authenticated users
    suggest.py: SMART task suggestions from an LLM

Usage:
    from taskboard.tasks.manager import create_task, get_tasks
    from taskboard.ordering.reorder import move_task

    task = create_task(user_id="alice", title="Buy groceries")
    move_task("alice", task["id"], after_id=other["id"])
"""

import os
from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.getenv("TASKBOARD_DB_PATH", str(PROJECT_ROOT / "data" / "taskboard.db")))
CONFIG_PATH = PROJECT_ROOT / "args" / "taskboard.yaml"

# Valid statuses
TASK_STATUSES = ("TODO", "IN_PROGRESS", "COMPLETED")
INTERACTION_TYPES = ("LLM_SUGGESTION", "LLM_ANALYSIS", "USER_FEEDBACK")

# Category deletion modes
DELETE_MODES = ("move", "delete_all")

# Field limits
TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_NAME_MAX_LENGTH = 255

DEFAULT_CATEGORY_NAME = "Default"

__all__ = [
    "PROJECT_ROOT",
    "DB_PATH",
    "CONFIG_PATH",
    "TASK_STATUSES",
    "INTERACTION_TYPES",
    "DELETE_MODES",
    "TITLE_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
    "CATEGORY_NAME_MAX_LENGTH",
    "DEFAULT_CATEGORY_NAME",
]
