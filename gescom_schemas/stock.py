from __future__ import annotations

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from gescom_schemas.issues import ValidationIssue


class AdjustmentType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    CORRECTION = "CORRECTION"


class StockAdjustment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: str | None = None
    adjustment_type: AdjustmentType
    quantity: float | None = None
    new_stock_quantity: float | None = None
    reason: str | None = None
    date: datetime.date | None = None


class StockAdjustmentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepted: bool
    resulting_stock: float
    adjustment_type: AdjustmentType | None
    applied_quantity: float
    errors: list[ValidationIssue] = Field(default_factory=list)
    shortfall: float | None = None
