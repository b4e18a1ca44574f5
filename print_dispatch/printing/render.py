"""
Document rendering for Print Dispatch.

Turns a classified payload into an ordered sequence of PrinterSink calls:
- render_text: the text verbatim, then cut and flush
- render_invoice: the 80mm invoice layout (header, bill meta, item table,
  totals, optional logo and QR, footer), then cut, beep and flush

Numbers coming from the POS payload are untrusted and go through fmt().
"""

from __future__ import annotations

import logging
import math
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, List, Optional

import requests

from print_dispatch.printing.payload import InvoicePayload, LineItem, Payload, TextPayload
from print_dispatch.printing.sink import Cell, PrinterSink

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except Exception:
        return default


LOGO_TIMEOUT = 10.0
LOGO_MAX_BYTES = _env_int("PRINTDISPATCH_LOGO_MAX_BYTES", 2 * 1024 * 1024)

# Sentinels used by the POS front end
CASH_PARTY = "Cash"
GUEST_PARTY = "3"
DIRECT_PRINT_3INCH = "Direct Print 3Inch"

FOOTER = "Thank you for shopping with us!"
ITEM_NAME_MAX = 30

HEADER_ROW: List[Cell] = [
    Cell("#", 3, "left", bold=True),
    Cell("Item Name", 15, "left", bold=True),
    Cell("Qty", 3, "center", bold=True),
    Cell("Rate", 9, "right", bold=True),
    Cell("Tax-Amt", 9, "right", bold=True),
    Cell("Net-Amt", 9, "right", bold=True),
]


def _to_decimal(value: Any) -> Decimal:
    """
    Coerce a loosely typed value to a finite Decimal, using 0 for anything
    that is not a number.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() is the shortest round-tripping form: 1.005 -> "1.005"
        d = Decimal(repr(value))
    else:
        s = str(value).strip()
        # Plain ASCII numerals only; Decimal() would also take "1_000" and "١٢"
        if not s or "_" in s or not s.isascii():
            return Decimal(0)
        try:
            d = Decimal(s)
        except InvalidOperation:
            return Decimal(0)
    return d if d.is_finite() else Decimal(0)


def fmt(value: Any, digits: int = 2) -> str:
    """
    Format value with exactly `digits` decimals, rounding half away from zero.

    Missing, empty and non-numeric input formats as zero:
        fmt(None) == fmt("") == fmt("abc") == "0.00"
        fmt(1.005) == "1.01", fmt(10) == "10.00"
    """
    d = _to_decimal(value)
    try:
        with localcontext() as ctx:
            ctx.prec = 60
            d = d.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Magnitude beyond the context precision
        return f"{float(d):.{digits}f}" if math.isfinite(float(d)) else f"{0:.{digits}f}"
    return f"{d:.{digits}f}"


def _text(value: Any) -> str:
    """Null becomes empty; other values print as-is."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text_or_blank(value: Any) -> str:
    """Falsy values (None, "", 0) become empty."""
    return _text(value) if value else ""


def _unlink_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug("Could not remove temp file %s: %s", path, e)


def _download_to_temp(url: str, timeout: float = LOGO_TIMEOUT) -> Optional[str]:
    fd, path = tempfile.mkstemp(prefix="print-dispatch-logo-")
    try:
        with os.fdopen(fd, "wb") as f, requests.get(url, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            written = 0
            for chunk in resp.iter_content(chunk_size=8192):
                written += len(chunk)
                if written > LOGO_MAX_BYTES:
                    raise ValueError(f"logo larger than {LOGO_MAX_BYTES} bytes")
                f.write(chunk)
        return path
    except (requests.RequestException, OSError, ValueError) as e:
        logger.warning("Logo download failed (%s): %s", url, e)
        _unlink_quietly(path)
        return None


@contextmanager
def fetch_logo(url: str, timeout: float = LOGO_TIMEOUT) -> Iterator[Optional[str]]:
    """
    Download url to a private temporary file for the duration of the block.

    Yields the file path, or None when the download failed. The file is removed
    on exit, so concurrent jobs never share a logo file.
    """
    path = _download_to_temp(url, timeout=timeout)
    try:
        yield path
    finally:
        if path:
            _unlink_quietly(path)


def _print_logo(sink: PrinterSink, url: str) -> None:
    with fetch_logo(url) as path:
        if not path:
            return
        try:
            sink.print_image(path)
            sink.new_line()
        except Exception as e:
            logger.warning("Logo print failed: %s", e)


def _item_rows(index: int, item: LineItem) -> List[List[Cell]]:
    name = _text_or_blank(item.ItemNameTextField)[:ITEM_NAME_MAX]
    qty = "0" if item.qty is None else _text(item.qty)
    return [
        [Cell(str(index), 3), Cell(name, 45)],
        [
            Cell("", 3),
            Cell("", 15),
            Cell(qty, 3, "center"),
            Cell(fmt(item.Rate1), 9, "right"),
            Cell(fmt(item.taxAmt), 9, "right"),
            Cell(fmt(item.total), 9, "right"),
        ],
    ]


def render_invoice(sink: PrinterSink, invoice: InvoicePayload) -> None:
    comp = invoice.primary_company
    master = invoice.master

    sink.align_center()
    if invoice.logo:
        _print_logo(sink, invoice.logo)

    sink.bold(True)
    sink.println(_text_or_blank(comp.Name) or "COMPANY")
    sink.bold(False)
    if comp.Place:
        sink.println(_text(comp.Place))
    if comp.Ph:
        sink.println("Ph: " + _text(comp.Ph))
    if comp.gst:
        sink.println("GSTIN: " + _text(comp.gst))

    sink.draw_line()

    sink.align_left()
    sink.println("Bill No : " + _text(master.BillNo))
    sink.println("Date    : " + _text_or_blank(master.BillDate) + " " + _text_or_blank(master.BillTime))

    party = master.BillPartyName
    if party:
        sink.println("Party   : " + _text(party))
    # TODO: confirm with the POS team whether Cash/guest bills should skip the
    # address block (that needs `and`). As written this is always true.
    if party != CASH_PARTY or party != GUEST_PARTY:
        sink.println("Add: " + _text(master.Address1))
        sink.println("Contact: " + _text(master.Ph))
        sink.println("Tax-No: " + _text(master.TinNo))

    sink.draw_line()
    sink.table_row(HEADER_ROW)
    sink.draw_line()

    for i, item in enumerate(invoice.table, start=1):
        for row in _item_rows(i, item):
            sink.table_row(row)

    sink.draw_line()

    sink.left_right("Sub Total", fmt(master.BillTotalField))
    sink.left_right("Discount", fmt(master.BillDiscAmtField))
    sink.left_right("Tax", fmt(master.TItTaxAmt))
    sink.left_right("Net Total", fmt(master.BillNetTotalField))

    sink.draw_line()

    sink.bold(True)
    sink.align_right()
    sink.println("NET TOTAL : " + fmt(master.BillNetTotalField))
    sink.bold(False)

    sink.draw_line("-")

    if invoice.typ == DIRECT_PRINT_3INCH and invoice.is_invoice and invoice.qrData:
        sink.align_center()
        sink.print_qr(invoice.qrData, size=6, correction="M")
        sink.new_line()

    sink.align_center()
    sink.println(FOOTER)
    sink.new_line()
    sink.cut()
    for _ in range(3):
        sink.beep()

    sink.execute()


def render_text(sink: PrinterSink, payload: TextPayload) -> None:
    sink.println(payload.text)
    sink.cut()
    sink.execute()


def render_payload(sink: PrinterSink, payload: Payload) -> str:
    """
    Render either payload kind; returns the mode name for logging.
    """
    if isinstance(payload, InvoicePayload):
        render_invoice(sink, payload)
        return "invoice"
    render_text(sink, payload)
    return "text"


__all__ = [
    "CASH_PARTY",
    "DIRECT_PRINT_3INCH",
    "FOOTER",
    "GUEST_PARTY",
    "HEADER_ROW",
    "fetch_logo",
    "fmt",
    "render_invoice",
    "render_payload",
    "render_text",
]
