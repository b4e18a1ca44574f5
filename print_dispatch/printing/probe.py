"""
TCP reachability checks for network printers.
"""

from __future__ import annotations

import logging
import socket
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import List

from print_dispatch.core.config import PrinterConfig

logger = logging.getLogger(__name__)

# Seconds
LIST_PROBE_TIMEOUT = 1.5
PRINT_PROBE_TIMEOUT = 15.0


def is_online(ip: str, port: int, timeout: float = LIST_PROBE_TIMEOUT) -> bool:
    """
    True if ip:port accepts a TCP connection within timeout seconds.

    Refused connections, unreachable hosts, bad addresses and timeouts all
    return False. The probe socket is closed straight away.
    """
    try:
        with socket.create_connection((ip, int(port)), timeout=timeout):
            return True
    except (OSError, ValueError, OverflowError) as e:
        logger.debug("Probe %s:%s failed: %s", ip, port, e)
        return False


def probe_many(printers: Sequence[PrinterConfig], timeout: float = LIST_PROBE_TIMEOUT) -> List[bool]:
    """
    Probe every printer in parallel; results follow the input order.
    """
    if not printers:
        return []
    with ThreadPoolExecutor(max_workers=len(printers), thread_name_prefix="probe") as pool:
        return list(
            pool.map(lambda p: is_online(p.connection.ip, p.connection.port, timeout), printers),
        )


__all__ = ["LIST_PROBE_TIMEOUT", "PRINT_PROBE_TIMEOUT", "is_online", "probe_many"]
