"""
Client authorization gate for print routes.

When auth is enabled (app.config["ENABLE_AUTH"]), a request must carry
X-Client-Id and X-Print-Key matching an enabled entry in clients.json.
"""

from __future__ import annotations

import hmac
import logging
from functools import wraps

from flask import current_app, request

from print_dispatch.core.config import load_clients
from print_dispatch.core.errors import AuthError

logger = logging.getLogger(__name__)


def check_client(client_id: str, key: str) -> bool:
    """
    True if an enabled client has this id and pin. Reads clients.json on every call.
    """
    for c in load_clients():
        if c.id == client_id and c.enabled and hmac.compare_digest(c.pin.encode(), key.encode()):
            return True
    return False


def auth_required(view):
    """
    Route decorator: pass through when auth is disabled, otherwise raise
    AuthError (401 for missing credentials, 403 for an unknown or disabled client).
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("ENABLE_AUTH", False):
            return view(*args, **kwargs)

        client_id = request.headers.get("X-Client-Id", "")
        key = request.headers.get("X-Print-Key", "")
        if not client_id or not key:
            raise AuthError("Client auth required", 401)
        if not check_client(client_id, key):
            logger.warning("Rejected client %s", client_id)
            raise AuthError("Invalid client", 403)
        return view(*args, **kwargs)

    return wrapper


__all__ = ["auth_required", "check_client"]
