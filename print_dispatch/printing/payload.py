"""
Print payload models and classification.

A request body is one of two payload kinds. classify_payload() decides which,
checking the invoice flag before the text field, so a body carrying both is
always an invoice.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from print_dispatch.core.errors import RenderError, UnsupportedPayloadError


class _Lenient(BaseModel):
    # Field names follow the upstream POS JSON; values stay Any and are
    # coerced at render time.
    model_config = ConfigDict(extra="allow")


class CompanyInfo(_Lenient):
    Name: Any = None
    Place: Any = None
    Ph: Any = None
    gst: Any = None


class BillMaster(_Lenient):
    BillNo: Any = None
    BillDate: Any = None
    BillTime: Any = None
    BillPartyName: Any = None
    Address1: Any = None
    Ph: Any = None
    TinNo: Any = None
    BillTotalField: Any = None
    BillDiscAmtField: Any = None
    TItTaxAmt: Any = None
    BillNetTotalField: Any = None


class LineItem(_Lenient):
    ItemNameTextField: Any = None
    qty: Any = None
    Rate1: Any = None
    taxAmt: Any = None
    total: Any = None


class InvoiceFlag(_Lenient):
    isInvoice: Any = False


class InvoicePayload(_Lenient):
    isInvoiceData: InvoiceFlag = Field(default_factory=InvoiceFlag)
    company: List[CompanyInfo] = Field(default_factory=list)
    master: BillMaster = Field(default_factory=BillMaster)
    table: List[LineItem] = Field(default_factory=list)
    typ: str = ""
    qrData: str = ""
    logo: str = ""

    @field_validator("company", mode="before")
    @classmethod
    def _company_list(cls, v: Any) -> Any:
        # Only company[0] is read; anything that is not an object reads as empty
        if not isinstance(v, list):
            return []
        return [c if isinstance(c, Mapping) else {} for c in v]

    @field_validator("table", mode="before")
    @classmethod
    def _null_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("master", "isInvoiceData", mode="before")
    @classmethod
    def _as_object(cls, v: Any) -> Any:
        return v if isinstance(v, Mapping) else {}

    @field_validator("typ", "qrData", "logo", mode="before")
    @classmethod
    def _as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def is_invoice(self) -> bool:
        return bool(self.isInvoiceData.isInvoice)

    @property
    def primary_company(self) -> CompanyInfo:
        return self.company[0] if self.company else CompanyInfo()


class TextPayload(BaseModel):
    text: str


Payload = Union[InvoicePayload, TextPayload]


def classify_payload(body: Any) -> Payload:
    """
    Map a raw JSON body to exactly one payload kind.

    Raises:
        UnsupportedPayloadError when the body is neither an invoice nor text.
        RenderError when the body claims to be an invoice but cannot be parsed.
    """
    if not isinstance(body, Mapping):
        raise UnsupportedPayloadError("Unsupported print payload")

    flag = body.get("isInvoiceData")
    if isinstance(flag, Mapping) and flag.get("isInvoice"):
        try:
            return InvoicePayload.model_validate(dict(body))
        except ValidationError as e:
            raise RenderError(f"Invalid invoice payload: {e.errors()[0].get('msg')}") from e

    text = body.get("text")
    if text:
        return TextPayload(text=str(text))

    raise UnsupportedPayloadError("Unsupported print payload")


__all__ = [
    "BillMaster",
    "CompanyInfo",
    "InvoiceFlag",
    "InvoicePayload",
    "LineItem",
    "Payload",
    "TextPayload",
    "classify_payload",
]
