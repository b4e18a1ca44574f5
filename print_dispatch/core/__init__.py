"""
Core utilities for Print Dispatch.

This package groups non-Flask helpers used across the app:
- config: config directory, printer/client registries, server identity, env settings
- errors: request and job error taxonomy
- logging: request ID aware logging filters/formatters and root logger config
"""

from .config import (
    ClientConfig,
    Connection,
    PrinterConfig,
    auth_enabled,
    find_printer,
    get_config_dir,
    get_server_id,
    load_clients,
    load_printers,
)
from .errors import (
    AuthError,
    DispatchError,
    NotFoundError,
    OfflineError,
    RenderError,
    TransmitError,
    UnsupportedPayloadError,
    ValidationError,
)
from .logging import JsonFormatter, RequestIdFilter, bind_job_id, configure_logging

__all__ = [
    # config
    "ClientConfig",
    "Connection",
    "PrinterConfig",
    "auth_enabled",
    "find_printer",
    "get_config_dir",
    "get_server_id",
    "load_clients",
    "load_printers",
    # errors
    "AuthError",
    "DispatchError",
    "NotFoundError",
    "OfflineError",
    "RenderError",
    "TransmitError",
    "UnsupportedPayloadError",
    "ValidationError",
    # logging
    "JsonFormatter",
    "RequestIdFilter",
    "bind_job_id",
    "configure_logging",
]
