"""
Print job execution for Print Dispatch.

One job is one attempt to render and transmit a request body to one printer:
build the device sink, check the printer answers, classify the payload, render,
flush. Outcomes go to the log only. run_job never raises and never retries.

submit_job() runs a job on its own daemon thread and returns at once, so the
HTTP response never waits on the printer. Jobs share no state; two jobs to the
same printer are not serialized.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
import uuid
from typing import Any, Optional

from print_dispatch.core.config import PrinterConfig
from print_dispatch.core.errors import OfflineError, RenderError, TransmitError, UnsupportedPayloadError
from print_dispatch.core.logging import bind_job_id
from print_dispatch.printing.payload import classify_payload
from print_dispatch.printing.probe import PRINT_PROBE_TIMEOUT, is_online
from print_dispatch.printing.render import render_payload
from print_dispatch.printing.sink import EscposSink, PrinterSink

logger = logging.getLogger(__name__)


class JobOutcome(str, enum.Enum):
    PRINTED = "printed"
    PRINTER_OFFLINE = "printer_offline"
    UNSUPPORTED_PAYLOAD = "unsupported_payload"
    TRANSMIT_FAILED = "transmit_failed"


def _connect_printer(printer: PrinterConfig) -> PrinterSink:
    """
    Create the buffered sink for a configured printer. No socket is opened here.
    """
    return EscposSink(printer.connection.ip, printer.connection.port, timeout=PRINT_PROBE_TIMEOUT)


def run_job(printer: PrinterConfig, body: Any, job_id: Optional[str] = None) -> JobOutcome:
    """
    Execute one print job to completion or failure. Never raises.

    Records logged while the job runs carry job_id as their request_id.
    """
    job_id = job_id or uuid.uuid4().hex
    with bind_job_id(job_id):
        return _run(printer, body, job_id)


def _run(printer: PrinterConfig, body: Any, job_id: str) -> JobOutcome:
    ip, port = printer.connection.ip, printer.connection.port
    started = time.monotonic()
    logger.info("job=%s start printer=%s target=%s:%s", job_id, printer.id, ip, port)
    try:
        sink = _connect_printer(printer)

        if not is_online(ip, port, PRINT_PROBE_TIMEOUT):
            raise OfflineError(f"Printer {printer.id} offline at {ip}:{port}")

        payload = classify_payload(body)
        mode = render_payload(sink, payload)
        logger.info("job=%s printed mode=%s in %.0fms", job_id, mode, (time.monotonic() - started) * 1000)
        return JobOutcome.PRINTED
    except OfflineError as e:
        logger.warning("job=%s printer offline: %s", job_id, e)
        return JobOutcome.PRINTER_OFFLINE
    except UnsupportedPayloadError as e:
        logger.warning("job=%s rejected: %s", job_id, e)
        return JobOutcome.UNSUPPORTED_PAYLOAD
    except (RenderError, TransmitError) as e:
        logger.error("job=%s print failed: %s", job_id, e)
        return JobOutcome.TRANSMIT_FAILED
    except Exception as e:
        logger.exception("job=%s print failed: %s", job_id, e)
        return JobOutcome.TRANSMIT_FAILED
    finally:
        logger.info("job=%s end", job_id)


def submit_job(printer: PrinterConfig, body: Any, job_id: Optional[str] = None) -> threading.Thread:
    """
    Start run_job on a detached daemon thread and return the thread.
    There is no queue and no cancellation; callers are not expected to join.
    """
    job_id = job_id or uuid.uuid4().hex
    t = threading.Thread(
        target=run_job,
        args=(printer, body),
        kwargs={"job_id": job_id},
        daemon=True,
        name=f"print-job-{job_id[:8]}",
    )
    t.start()
    logger.info("job=%s dispatched to %s", job_id, printer.id)
    return t


__all__ = ["JobOutcome", "run_job", "submit_job"]
