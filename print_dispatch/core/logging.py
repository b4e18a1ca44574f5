"""
Logging utilities for Print Dispatch.

- RequestIdFilter tags records with the request id, or the job id on job threads
- bind_job_id() scopes a job id to the running job
- JsonFormatter emits structured logs when PRINTDISPATCH_JSON_LOGS=true
- configure_logging() initializes root logging with journald or console
"""

from __future__ import annotations

import contextvars
import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

_job_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("print_job_id", default=None)


def current_job_id() -> Optional[str]:
    return _job_id.get()


@contextmanager
def bind_job_id(job_id: str) -> Iterator[None]:
    """Tag every record logged inside the block with job_id."""
    token = _job_id.set(job_id)
    try:
        yield
    finally:
        _job_id.reset(token)


class RequestIdFilter(logging.Filter):
    """
    Attach request_id and path to log records.
    Job threads have no request context: request_id is the bound job id there,
    and path is "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        request_id = None
        path = "-"
        try:
            from flask import g, has_request_context, request  # lazy import

            if has_request_context():
                request_id = getattr(g, "request_id", None)
                path = request.path
        except Exception:
            pass
        record.request_id = request_id or _job_id.get() or "-"
        record.path = path
        return True


class JsonFormatter(logging.Formatter):
    """
    Minimal JSON formatter: timestamp, level, logger, message, request_id and path.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        from json import dumps

        base = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        path = getattr(record, "path", None)
        if path is not None:
            base["path"] = path
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return dumps(base, ensure_ascii=False)


def configure_logging() -> logging.Logger:
    """
    Configure root logging for the application.

    - Root logger at INFO, existing handlers cleared
    - JSON or plain formatter based on PRINTDISPATCH_JSON_LOGS
    - systemd's JournalHandler when available, StreamHandler otherwise
    - Flask's app logger propagates to root

    Returns the configured root logger.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.handlers = []

    json_logs = os.environ.get("PRINTDISPATCH_JSON_LOGS", "false").lower() in ("1", "true", "yes")
    formatter: logging.Formatter
    if json_logs:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(request_id)s %(message)s")

    try:
        from systemd.journal import JournalHandler  # type: ignore

        handler: logging.Handler = JournalHandler()
    except ImportError:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    flask_logger = logging.getLogger("flask.app")
    flask_logger.handlers = []
    flask_logger.propagate = True

    return root


__all__ = ["JsonFormatter", "RequestIdFilter", "bind_job_id", "configure_logging", "current_job_id"]
