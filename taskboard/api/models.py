"""
Pydantic models for Task Board API request/response types.

Length and format rules live in ``taskboard.tasks.guards`` so the API, the
CLIs and direct callers all report the same messages; these models only
describe shapes.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from taskboard.tasks.suggest import SmartTaskInput


# =============================================================================
# Enums
# =============================================================================


class TaskStatus(str, Enum):
    """Task workflow status."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class DeleteMode(str, Enum):
    """What happens to a deleted category's tasks."""

    MOVE = "move"
    DELETE_ALL = "delete_all"


# =============================================================================
# Task Models
# =============================================================================


class TaskCreate(BaseModel):
    title: str = Field(..., description="Task title (1-255 characters)")
    description: str | None = Field(None, description="Details (up to 1000 characters)")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Initial status")
    due_date: datetime | None = Field(None, description="Due date")
    category_id: str | None = Field(None, description="Category; the default category when omitted")


class TaskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    category_id: str | None = None


class TaskOut(BaseModel):
    """A task as shown on the board."""

    id: str = Field(..., description="Task ID")
    title: str
    description: str | None = None
    status: TaskStatus
    due_date: str | None = None
    category_id: str
    category_name: str | None = None
    position: float = Field(..., description="Ordering key; ascending is display order")
    created_at: str | None = None
    updated_at: str | None = None


class TaskListResponse(BaseModel):
    tasks: list[TaskOut] = Field(default_factory=list)
    total: int = Field(default=0)


class MoveRequest(BaseModel):
    """Drop target for a drag-and-drop move."""

    before_id: str | None = Field(None, description="Entity that should sort immediately before")
    after_id: str | None = Field(None, description="Entity that should sort immediately after")
    category_id: str | None = Field(None, description="New category (task moves only)")


class SuggestionRequest(SmartTaskInput):
    task_id: str | None = Field(None, description="Existing task to record the suggestion against")


# =============================================================================
# Category Models
# =============================================================================


class CategoryCreate(BaseModel):
    name: str = Field(..., description="Category name (1-255 characters)")
    is_default: bool = Field(default=False)


class CategoryUpdate(BaseModel):
    name: str | None = None
    is_default: bool | None = None


class CategoryOut(BaseModel):
    id: str
    name: str
    position: float
    is_default: bool
    created_at: str | None = None
    updated_at: str | None = None
    tasks: list[TaskOut] = Field(default_factory=list)


class CategoryDeleteResponse(BaseModel):
    category: CategoryOut
    mode: DeleteMode
    target_category_id: str | None = None
    tasks_affected: int = 0


# =============================================================================
# Health / Error Models
# =============================================================================


class HealthCheck(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Overall system status")
    version: str = Field(default="0.1.0", description="API version")
    timestamp: datetime = Field(default_factory=datetime.now, description="Check timestamp")
    services: dict[str, str] = Field(default_factory=dict, description="Individual service statuses")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    code: str = Field(default="INTERNAL_ERROR", description="Error code")
    details: dict[str, Any] | None = Field(None, description="Additional details")
