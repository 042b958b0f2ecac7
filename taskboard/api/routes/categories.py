"""
Categories Route - Board Column Endpoints

Provides endpoints for a user's categories:
- List categories in board order, each with its tasks
- Create, rename and re-flag the default category
- Delete a category, moving or deleting its tasks
- Move a category after a drag-and-drop
"""

from fastapi import APIRouter, Depends, Query

from taskboard.api.auth import get_current_user
from taskboard.api.models import (
    CategoryCreate,
    CategoryDeleteResponse,
    CategoryOut,
    CategoryUpdate,
    DeleteMode,
    MoveRequest,
)
from taskboard.ordering.reorder import move_category
from taskboard.tasks import categories


router = APIRouter()


@router.get("", response_model=list[CategoryOut])
def list_categories(
    include_tasks: bool = Query(True, description="Attach each category's tasks"),
    user_id: str = Depends(get_current_user),
):
    """List the user's categories in board order; creates the default one on first use."""
    return categories.get_categories(user_id, include_tasks=include_tasks)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(request: CategoryCreate, user_id: str = Depends(get_current_user)):
    return categories.create_category(user_id, request.name, is_default=request.is_default)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, user_id: str = Depends(get_current_user)):
    return categories.get_category(user_id, category_id)


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str, request: CategoryUpdate, user_id: str = Depends(get_current_user)
):
    return categories.update_category(
        user_id, category_id, name=request.name, is_default=request.is_default
    )


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
def delete_category(
    category_id: str,
    mode: DeleteMode = Query(DeleteMode.MOVE, description="Move tasks elsewhere or delete them"),
    target_category_id: str | None = Query(None, description="Destination for moved tasks"),
    user_id: str = Depends(get_current_user),
):
    """Delete a category. The default category cannot be deleted."""
    return categories.delete_category(
        user_id, category_id, mode=mode.value, target_category_id=target_category_id
    )


@router.post("/{category_id}/move", response_model=CategoryOut)
def move(category_id: str, request: MoveRequest, user_id: str = Depends(get_current_user)):
    """Move a category between two others. ``category_id`` in the body is ignored."""
    return move_category(
        user_id, category_id, before_id=request.before_id, after_id=request.after_id
    )
