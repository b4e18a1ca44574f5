from __future__ import annotations

"""
Print dispatch endpoint.

POST /print resolves the target printer, answers immediately and hands the
body to a background job. The response means "accepted", never "printed";
job failures only show up in the logs.
"""

from flask import Blueprint, current_app, g, request
from werkzeug.exceptions import BadRequest

from print_dispatch.core.config import find_printer
from print_dispatch.core.errors import NotFoundError, ValidationError
from print_dispatch.printing.executor import submit_job
from . import schemas
from .auth import auth_required

dispatch_bp = Blueprint("dispatch", __name__)


def _json_body():
    """
    Parsed JSON body, or {} for an empty or non-JSON request.
    A JSON content type with a body that does not parse is a 400.
    """
    if not request.is_json or not request.get_data(cache=True):
        return {}
    try:
        body = request.get_json()
    except BadRequest:
        raise ValidationError("Invalid JSON body") from None
    return {} if body is None else body


def _printer_id(body) -> str:
    printer_id = request.headers.get("X-Printer-Id", "").strip()
    if not printer_id and isinstance(body, dict):
        printer_id = str(body.get("printerId") or "").strip()
    return printer_id


@dispatch_bp.post("/print")
@auth_required
def print_job():
    body = _json_body()

    printer_id = _printer_id(body)
    if not printer_id:
        current_app.logger.info("POST /print rejected: no printer id")
        raise ValidationError("x-printer-id missing")

    printer = find_printer(printer_id)
    if printer is None:
        current_app.logger.info("POST /print rejected: printer %r not found", printer_id)
        raise NotFoundError("Printer not found or disabled")

    resp = schemas.PrintAccepted(printer=printer.id).model_dump()
    submit_job(printer, body, job_id=getattr(g, "request_id", None))
    current_app.logger.info("POST /print accepted printer=%s", printer.id)
    return resp
