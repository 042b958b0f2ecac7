"""
Tasks Route - Board Task Endpoints

Handlers are plain functions: FastAPI runs them in its threadpool, so store
locks and the LLM round trip never block the event loop.

Provides endpoints for a user's tasks:
- List tasks in board order (optionally one category column)
- Create, read, update and delete tasks
- Move a task after a drag-and-drop
- Ask for a smart (SMART-criteria) refinement of a task
"""

import logging

from fastapi import APIRouter, Depends, Query

from taskboard.api.auth import get_current_user
from taskboard.api.models import (
    MoveRequest,
    SuggestionRequest,
    TaskCreate,
    TaskListResponse,
    TaskOut,
    TaskStatus,
    TaskUpdate,
)
from taskboard.ordering.reorder import move_task
from taskboard.tasks import manager
from taskboard.tasks.suggest import SmartTaskInput, get_smart_task_suggestions

logger = logging.getLogger(__name__)


router = APIRouter()


# =============================================================================
# Suggestions (before /{task_id} routes)
# =============================================================================


@router.post("/suggestions")
def suggest_task(request: SuggestionRequest, user_id: str = Depends(get_current_user)):
    """
    Get a SMART refinement of the task being edited.

    Returns the suggestion using the camelCase keys the board UI expects.
    """
    task_input = SmartTaskInput(**request.model_dump(exclude={"task_id"}))
    suggestion = get_smart_task_suggestions(user_id, task_input, task_id=request.task_id)
    return suggestion.model_dump(by_alias=True)


# =============================================================================
# Task List / CRUD
# =============================================================================


@router.get("", response_model=TaskListResponse)
def list_tasks(
    category_id: str | None = Query(None, description="Only tasks in this category"),
    status: TaskStatus | None = Query(None, description="Filter by status"),
    user_id: str = Depends(get_current_user),
):
    """List the user's tasks in board order."""
    tasks = manager.get_tasks(
        user_id, category_id=category_id, status=status.value if status else None
    )
    return TaskListResponse(tasks=tasks, total=len(tasks))


@router.post("", response_model=TaskOut, status_code=201)
def create_task(request: TaskCreate, user_id: str = Depends(get_current_user)):
    """Create a task at the end of the board."""
    return manager.create_task(
        user_id=user_id,
        title=request.title,
        description=request.description,
        status=request.status.value,
        due_date=request.due_date,
        category_id=request.category_id,
    )


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, user_id: str = Depends(get_current_user)):
    return manager.get_task(user_id, task_id)


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, request: TaskUpdate, user_id: str = Depends(get_current_user)):
    """
    Update any subset of title, description, status, due date and category.

    Only fields present in the body are touched; an explicit null clears
    description or due date.
    """
    return manager.update_task(user_id, task_id, **request.model_dump(mode="json", exclude_unset=True))


@router.delete("/{task_id}", response_model=TaskOut)
def delete_task(task_id: str, user_id: str = Depends(get_current_user)):
    return manager.delete_task(user_id, task_id)


# =============================================================================
# Moves
# =============================================================================


@router.post("/{task_id}/move", response_model=TaskOut)
def move(task_id: str, request: MoveRequest, user_id: str = Depends(get_current_user)):
    """
    Move a task after a drag-and-drop.

    ``before_id``/``after_id`` name the tasks that should end up around it;
    ``category_id`` moves it to another column as well.
    """
    return move_task(
        user_id,
        task_id,
        before_id=request.before_id,
        after_id=request.after_id,
        category_id=request.category_id,
    )
