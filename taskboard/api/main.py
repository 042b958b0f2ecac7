"""
Task Board API - FastAPI Application

This is the main entry point for the board REST API.

Usage:
    uvicorn taskboard.api.main:app --host 127.0.0.1 --port 8080 --reload

    Or run directly:
    python -m taskboard.api.main
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.api import __version__
from taskboard.api.models import ErrorResponse, HealthCheck
from taskboard.api.routes import api_router
from taskboard.logging_config import setup_logging
from taskboard.tasks.errors import ErrorKind, TaskboardError
from taskboard.tasks.store import get_connection, load_config


# Configure structured logging
setup_logging()
logger = logging.getLogger(__name__)

# Global config
config = load_config()
api_config = config.get("taskboard", {}).get("api", {})

# HTTP status for each error kind; authorization failures look like "not found"
ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHORIZATION: status.HTTP_404_NOT_FOUND,
    ErrorKind.POSITION: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Task Board API...")
    app.state.started_at = datetime.now()

    # Create tables if needed
    conn = get_connection()
    conn.close()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down Task Board API...")


# Create FastAPI application
app = FastAPI(
    title="Task Board API",
    description="REST API for per-user task boards with drag-and-drop ordering",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.get("allowed_origins", ["http://localhost:3000", "http://127.0.0.1:3000"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check Endpoint
# =============================================================================


@app.get("/api/health", response_model=HealthCheck, tags=["health"])
def health_check():
    """Check system health status."""
    services = {}

    try:
        conn = get_connection()
        conn.execute("SELECT 1")
        conn.close()
        services["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = "unhealthy"

    overall = "healthy" if services["database"] == "healthy" else "degraded"
    return HealthCheck(status=overall, version=__version__, timestamp=datetime.now(), services=services)


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(TaskboardError)
async def board_error_handler(request: Request, exc: TaskboardError):
    """Map typed board errors to HTTP responses by kind."""
    status_code = ERROR_STATUS[exc.kind]
    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.message, code=f"{exc.kind.value.upper()}_ERROR").model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="Invalid request",
            code="VALIDATION_ERROR",
            details={"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.detail, code=f"HTTP_{exc.status_code}").model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").model_dump(),
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(api_router)


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskboard.api.main:app",
        host=api_config.get("host", "127.0.0.1"),
        port=api_config.get("port", 8080),
        reload=True,
        log_level="info",
    )
