"""Task Board API Routes Package

This module aggregates all route handlers into a single router
that can be included in the main FastAPI application.
"""

from fastapi import APIRouter

from .categories import router as categories_router
from .tasks import router as tasks_router


# Create main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(categories_router, prefix="/categories", tags=["categories"])

__all__ = ["api_router"]
