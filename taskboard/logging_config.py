"""
Structured logging for the task board.

structlog renders every record, including those from plain
``logging.getLogger(__name__)`` loggers, as console lines in development or
JSON lines in production. Request-scoped fields (the board owner, the entity
being moved) are carried in structlog context variables and show up on every
record emitted while handling that request.

Settings, first match wins:
    setup_logging(level=..., json_output=...) arguments
    TASKBOARD_LOG_LEVEL / TASKBOARD_LOG_FORMAT environment variables
    ``taskboard.logging`` in args/taskboard.yaml

Usage:
    from taskboard.logging_config import bind_board_context, setup_logging

    setup_logging()
    bind_board_context(user_id="alice")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

# Client libraries that log every HTTP round trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def _configured(key: str) -> str | None:
    from taskboard.tasks.store import load_config

    value = load_config().get("taskboard", {}).get("logging", {}).get(key)
    return str(value) if value is not None else None


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Install the structlog formatter on the root logger."""
    if level is None:
        level = os.environ.get("TASKBOARD_LOG_LEVEL") or _configured("level") or "INFO"

    if json_output is None:
        log_format = os.environ.get("TASKBOARD_LOG_FORMAT") or _configured("format") or ""
        json_output = log_format.lower() == "json"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_board_context(**fields: Any) -> None:
    """Start a fresh request context; every later record carries ``fields``."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["bind_board_context", "get_logger", "setup_logging"]
