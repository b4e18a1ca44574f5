from __future__ import annotations

"""
Health endpoint for Print Dispatch.

`/healthz` reports the server identity, whether client auth is on, and how many
printers are configured and enabled. It does not probe printers; use
/api/printers for reachability.
"""

from typing import Any, Dict

from flask import Blueprint, current_app

from print_dispatch.core.config import load_printers

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
def healthz():
    printers = load_printers()
    status: Dict[str, Any] = {
        "status": "ok",
        "server_id": current_app.config.get("SERVER_ID"),
        "auth_enabled": bool(current_app.config.get("ENABLE_AUTH", False)),
        "printers_configured": len(printers),
        "printers_enabled": sum(1 for p in printers if p.enabled),
    }
    if not printers:
        status["status"] = "degraded"
        status["reason"] = "no_printers"
    return status, 200
