"""
Print Dispatch package

This module provides the application factory:
- Configures logging via print_dispatch.core.logging
- Creates a Flask app with CORS enabled for browser-based POS clients
- Assigns a request id to every request (reused as the print job id)
- Renders DispatchError subclasses as JSON error bodies
- Registers the dispatch, printer listing and health blueprints
"""

from __future__ import annotations

import importlib
import logging
import os
import uuid
from collections.abc import Sequence
from typing import Optional

from flask import Flask, g, jsonify
from flask_cors import CORS

from print_dispatch.core.config import auth_enabled, get_server_id
from print_dispatch.core.errors import DispatchError
from print_dispatch.core.logging import configure_logging

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

DEFAULT_BLUEPRINTS: Sequence[tuple[str, str]] = (
    ("print_dispatch.web.dispatch", "dispatch_bp"),  # POST /print
    ("print_dispatch.web.printers", "printers_bp"),  # GET /api/printers
    ("print_dispatch.web.health", "health_bp"),  # GET /healthz
)


def _register_blueprint(app: Flask, import_path: str, attr: str) -> None:
    mod = importlib.import_module(import_path)
    app.register_blueprint(getattr(mod, attr))
    app.logger.debug(f"Registered blueprint: {import_path}.{attr}")


def _set_request_id() -> None:
    g.request_id = getattr(g, "request_id", uuid.uuid4().hex)


def _handle_dispatch_error(e: DispatchError):
    return jsonify({"error": e.message}), e.status_code


def create_app(
    config_overrides: Optional[dict] = None,
    blueprints: Optional[Sequence[tuple[str, str]]] = None,
) -> Flask:
    """
    Application factory.

    Parameters:
    - config_overrides: values to inject into app.config after defaults
      (e.g. {"ENABLE_AUTH": True, "SERVER_ID": "srv-test"})
    - blueprints: optional list of (import_path, attribute) tuples to register
      instead of the default set

    Returns:
    - Flask app instance
    """
    configure_logging()

    app = Flask("print_dispatch")
    app.config["MAX_CONTENT_LENGTH"] = int(os.environ.get("PRINTDISPATCH_MAX_CONTENT_LENGTH", 1024 * 1024))  # 1 MiB
    app.config["ENABLE_AUTH"] = auth_enabled()
    app.url_map.strict_slashes = False
    if config_overrides:
        app.config.update(config_overrides)
    if not app.config.get("SERVER_ID"):
        app.config["SERVER_ID"] = get_server_id()

    CORS(app)

    app.before_request(_set_request_id)
    app.register_error_handler(DispatchError, _handle_dispatch_error)

    for import_path, attr in blueprints or DEFAULT_BLUEPRINTS:
        _register_blueprint(app, import_path, attr)

    app.logger.info(
        "Print Dispatch app created (server_id=%s, auth=%s)",
        app.config["SERVER_ID"],
        "ENABLED" if app.config["ENABLE_AUTH"] else "DISABLED",
    )
    return app


__all__ = ["__version__", "create_app"]
