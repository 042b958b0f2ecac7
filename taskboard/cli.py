#!/usr/bin/env python3
"""
Task Board Command Line Interface

Main entry point for the `taskboard` command.

Usage:
    taskboard serve              # Start the API server
    taskboard init-db            # Create the database tables
    taskboard --version          # Show version

Per-entity tools have their own entry points:
    python -m taskboard.tasks.manager --action list --user alice
    python -m taskboard.tasks.categories --action list --user alice
    python -m taskboard.ordering.reorder --user alice --task-id abc123 --after-id def456
"""

import argparse
import sys

from taskboard.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def cmd_serve(args):
    """Start the API server with uvicorn."""
    import uvicorn

    from taskboard.tasks.store import load_config

    api_config = load_config().get("taskboard", {}).get("api", {})
    host = args.host or api_config.get("host", "127.0.0.1")
    port = args.port or api_config.get("port", 8080)

    logger.info("starting api", host=host, port=port)
    uvicorn.run("taskboard.api.main:app", host=host, port=port, reload=args.reload, log_level="info")
    return 0


def cmd_init_db(args):
    """Create tables in the configured database."""
    from taskboard.tasks import store

    conn = store.get_connection()
    conn.close()
    print(f"Database ready: {store.DB_PATH}")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="Task Board - per-user task boards with drag-and-drop ordering",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: TASKBOARD_LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: from config)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    serve_parser.set_defaults(func=cmd_serve)

    # Init-db subcommand
    init_parser = subparsers.add_parser("init-db", help="Create the database tables")
    init_parser.set_defaults(func=cmd_init_db)

    args = parser.parse_args()

    if args.version:
        from taskboard.api import __version__

        print(f"taskboard {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main() or 0)
