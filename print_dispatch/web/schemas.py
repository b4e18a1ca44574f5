from __future__ import annotations

"""
Pydantic response schemas for the Print Dispatch HTTP API.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PrintAccepted(BaseModel):
    """Acknowledgement for POST /print. Accepted means queued, not printed."""

    success: bool = True
    message: str = Field(default="Print accepted")
    printer: str = Field(description="Configured id of the resolved printer")


class PrinterList(BaseModel):
    printers: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Configured printers, each with an added boolean 'online'",
    )


class ErrorResponse(BaseModel):
    error: str


__all__ = ["ErrorResponse", "PrintAccepted", "PrinterList"]
