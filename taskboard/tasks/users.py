"""
Lazy provisioning of board users.

Identity lives with the external auth provider; the first request from a new
identity creates the matching local row.
"""

import logging
from typing import Any, Dict

from .errors import with_error_handling
from .guards import require_user_id
from .store import insert_row, row_to_dict, transaction

logger = logging.getLogger(__name__)


@with_error_handling
def get_or_create_user(user_id: str, email: str = "", name: str = "Anonymous") -> Dict[str, Any]:
    """
    Return the local user row for an authenticated identity, creating it if needed.

    Args:
        user_id: ID issued by the auth provider
        email: Primary email, stored on first sight only
        name: Display name, stored on first sight only

    Returns:
        The user row
    """
    require_user_id(user_id)

    with transaction() as conn:
        user = row_to_dict(conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone())
        if user:
            return user

        user = insert_row(conn, "users", {"id": user_id, "email": email or "", "name": name or "Anonymous"})

    logger.info(f"Provisioned user {user_id}")
    return user


__all__ = ["get_or_create_user"]
