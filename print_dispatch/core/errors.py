"""
Error taxonomy for Print Dispatch.

Two families:
- Request errors (ValidationError, NotFoundError, AuthError) are raised before the
  HTTP response is sent and rendered as JSON by the app's error handler.
- Job errors (OfflineError, UnsupportedPayloadError, RenderError, TransmitError) are
  raised inside a background job, caught by the executor and only logged.
"""

from __future__ import annotations

from typing import Optional


class DispatchError(Exception):
    """Base class for all Print Dispatch errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DispatchError):
    status_code = 400


class NotFoundError(DispatchError):
    status_code = 404


class AuthError(DispatchError):
    """Missing credentials (401) or unknown/disabled client (403)."""

    status_code = 401


class JobError(DispatchError):
    """Raised inside a print job; never reaches the HTTP caller."""


class OfflineError(JobError):
    pass


class UnsupportedPayloadError(JobError):
    pass


class RenderError(JobError):
    pass


class TransmitError(JobError):
    pass


__all__ = [
    "AuthError",
    "DispatchError",
    "JobError",
    "NotFoundError",
    "OfflineError",
    "RenderError",
    "TransmitError",
    "UnsupportedPayloadError",
    "ValidationError",
]
