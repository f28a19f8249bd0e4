from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PaymentMethod = Literal[
    "BANK_TRANSFER",
    "CREDIT_CARD",
    "CHECK",
    "CASH",
    "PAYPAL",
    "STRIPE",
    "SEPA_DIRECT_DEBIT",
    "ONLINE_PAYMENT",
    "OTHER",
]

InvoiceStatus = Literal[
    "DRAFT",
    "SENT",
    "VIEWED_BY_CLIENT",
    "PARTIALLY_PAID",
    "PAID",
    "OVERDUE",
    "CANCELLED",
    "VOIDED",
]


class Payment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    amount: float = Field(gt=0)
    date: datetime.date
    method: PaymentMethod = "OTHER"
    reference: str | None = Field(default=None, max_length=100)


class PaymentReconciliation(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_paid: float
    amount_due: float
    is_fully_paid: bool
