"""
Request identity for the Task Board API.

Authentication happens upstream (identity provider + proxy); the proxy
forwards the authenticated user ID in a header. The first request from a new
ID provisions the local user row.
"""

import logging

from fastapi import HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from taskboard.logging_config import bind_board_context
from taskboard.tasks.store import load_config
from taskboard.tasks.users import get_or_create_user

logger = logging.getLogger(__name__)

api_config = load_config().get("taskboard", {}).get("api", {})

ANONYMOUS_USER = "anonymous"


async def get_current_user(request: Request) -> str:
    """
    Return the authenticated user ID, provisioning the user on first sight.

    Log context bound here reaches the route handler; the store call runs in
    the threadpool.
    """
    header = api_config.get("user_header", "X-User-Id")
    user_id = request.headers.get(header, "").strip()

    if not user_id:
        if api_config.get("require_auth", True):
            logger.info(f"Rejected {request.url.path}: no {header} header")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
        user_id = ANONYMOUS_USER

    bind_board_context(user_id=user_id, path=request.url.path)
    await run_in_threadpool(get_or_create_user, user_id)
    return user_id
