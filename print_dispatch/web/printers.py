from __future__ import annotations

"""
Printer listing endpoint.

GET /api/printers returns every configured printer (enabled or not) as stored
in printer.json, plus a live "online" flag from a parallel TCP probe.
"""

from flask import Blueprint, current_app

from print_dispatch.core.config import load_printers
from print_dispatch.printing.probe import LIST_PROBE_TIMEOUT, probe_many
from . import schemas

printers_bp = Blueprint("printers", __name__, url_prefix="/api")


@printers_bp.get("/printers")
def list_printers():
    printers = load_printers()
    online = probe_many(printers, timeout=LIST_PROBE_TIMEOUT)
    items = [{**p.model_dump(exclude_unset=True), "online": ok} for p, ok in zip(printers, online)]
    current_app.logger.info("GET /api/printers count=%d online=%d", len(items), sum(online))
    return schemas.PrinterList(printers=items).model_dump()
