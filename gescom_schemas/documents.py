from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SourceDocumentType = Literal["QUOTE", "DELIVERY_NOTE"]

DeliveryNoteStatus = Literal[
    "PENDING_PREPARATION",
    "READY_TO_SHIP",
    "SHIPPED",
    "PARTIALLY_DELIVERED",
    "DELIVERED",
    "CANCELLED",
    "RETURNED",
]

QuoteStatus = Literal[
    "DRAFT",
    "SENT",
    "ACCEPTED",
    "REJECTED",
    "EXPIRED",
    "CONVERTED_TO_INVOICE",
    "CONVERTED_TO_DELIVERY",
]


class LineItem(BaseModel):
    """Priced line of a quote or an invoice.

    Numeric fields are plain floats; the totals calculator coerces them
    again on its own, so a model built with ``model_construct`` from raw
    form data is still safe to compute on.
    """

    model_config = ConfigDict(extra="ignore")

    line_id: str | None = None
    source_line_id: str | None = None
    product_id: str | None = None
    product_name: str | None = None
    description: str | None = None
    quantity: float = Field(gt=0)
    unit_price_ht: float = Field(ge=0)
    vat_rate: float = Field(ge=0, le=100)
    discount_rate: float = Field(default=0.0, ge=0, le=100)


class QuoteLine(LineItem):
    pass


class InvoiceLine(LineItem):
    pass


class DeliveryNoteLine(BaseModel):
    model_config = ConfigDict(extra="ignore")

    line_id: str | None = None
    source_line_id: str | None = None
    product_id: str | None = None
    product_name: str | None = None
    description: str | None = None
    quantity_ordered: float | None = Field(default=None, ge=0)
    quantity_delivered: float = Field(ge=0)
    unit_price_ht: float = Field(default=0.0, ge=0)
    vat_rate: float = Field(default=0.0, ge=0, le=100)


class LineTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_total_ht_before_discount: float
    line_discount_amount: float
    line_total_ht: float
    line_vat_amount: float
    line_total_ttc: float


class VatBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: float
    base: float
    amount: float


class DocumentTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    sub_total_ht_before_discount: float
    total_discount_amount: float
    sub_total_ht: float
    total_vat: float
    total_ttc: float
    vat_breakdown: list[VatBucket] = Field(default_factory=list)
