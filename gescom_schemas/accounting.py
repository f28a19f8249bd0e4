from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gescom_schemas.issues import ValidationIssue

TransactionType = Literal[
    "SALE",
    "PURCHASE",
    "PAYMENT_RECEIVED",
    "PAYMENT_MADE",
    "MANUAL_JOURNAL",
    "STOCK_ADJUSTMENT",
    "VAT_DECLARATION",
    "SALARY",
    "OTHER",
]

RelatedDocumentType = Literal[
    "Invoice",
    "SupplierInvoice",
    "PaymentReceipt",
    "DeliveryNote",
    "Quote",
    "PurchaseOrder",
    "BankStatement",
]

JournalLineError = Literal[
    "missing_account",
    "debit_and_credit",
    "empty_amount",
    "negative_amount",
]


class JournalLine(BaseModel):
    model_config = ConfigDict(extra="ignore")

    account: str | None = None
    debit: float | None = 0.0
    credit: float | None = 0.0
    description: str | None = Field(default=None, max_length=500)


class JournalEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    description: str = Field(min_length=1, max_length=1000)
    transaction_type: TransactionType
    lines: list[JournalLine] = Field(min_length=2)
    related_document_type: RelatedDocumentType | None = None
    related_document_id: str | None = None
    currency: str = Field(default="EUR", min_length=3, max_length=3)


class JournalValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_balanced: bool
    total_debit: float
    total_credit: float
    per_line_errors: dict[int, JournalLineError] = Field(default_factory=dict)
    rejection: ValidationIssue | None = None

    @property
    def is_valid(self) -> bool:
        return self.is_balanced and not self.per_line_errors and self.rejection is None
