from __future__ import annotations

from typing import Any, assert_never

from gescom.coercion import field_value, parse_or_default
from gescom_schemas.issues import ValidationIssue
from gescom_schemas.stock import AdjustmentType, StockAdjustment, StockAdjustmentResult


def parse_adjustment_type(value: Any) -> AdjustmentType | None:
    if isinstance(value, AdjustmentType):
        return value
    try:
        return AdjustmentType(str(value or "").strip().upper())
    except ValueError:
        return None


def _rejected(
    current_stock: float,
    adjustment_type: AdjustmentType | None,
    issue: ValidationIssue,
    *,
    shortfall: float | None = None,
) -> StockAdjustmentResult:
    return StockAdjustmentResult(
        accepted=False,
        resulting_stock=current_stock,
        adjustment_type=adjustment_type,
        applied_quantity=0.0,
        errors=[issue],
        shortfall=shortfall,
    )


def _missing_quantity(field_name: str, message: str) -> ValidationIssue:
    return ValidationIssue(code="invalid_quantity", field=field_name, message=message)


def apply_adjustment(
    current_stock: Any,
    adjustment_type: Any,
    *,
    quantity: Any = None,
    new_stock_quantity: Any = None,
    is_service: bool = False,
) -> StockAdjustmentResult:
    """Resulting stock of an IN, OUT or CORRECTION adjustment.

    OUT adjustments that would take stock below zero are rejected and the
    stock is reported unchanged, with the shortfall. ``applied_quantity``
    is the signed change actually made.
    """
    stock = parse_or_default(current_stock)
    kind = parse_adjustment_type(adjustment_type)

    if is_service:
        return _rejected(
            stock,
            kind,
            ValidationIssue(
                code="service_has_no_stock", field="product_id", message="stock cannot be adjusted for a service"
            ),
        )
    if stock < 0:
        return _rejected(
            stock,
            kind,
            ValidationIssue(
                code="negative_current_stock", field="current_stock", message="current stock cannot be negative"
            ),
        )
    if kind is None:
        return _rejected(
            stock,
            None,
            ValidationIssue(
                code="invalid_adjustment_type",
                field="adjustment_type",
                message="adjustment type must be one of: IN, OUT, CORRECTION",
                details={"value": adjustment_type},
            ),
        )

    if kind is AdjustmentType.IN or kind is AdjustmentType.OUT:
        amount = parse_or_default(quantity)
        if amount <= 0:
            return _rejected(stock, kind, _missing_quantity("quantity", "quantity must be greater than 0"))
        if kind is AdjustmentType.IN:
            return StockAdjustmentResult(
                accepted=True, resulting_stock=stock + amount, adjustment_type=kind, applied_quantity=amount
            )
        resulting = stock - amount
        if resulting < 0:
            return _rejected(
                stock,
                kind,
                ValidationIssue(
                    code="insufficient_stock",
                    field="quantity",
                    message="adjustment would result in negative stock",
                    details={"current_stock": stock, "requested": amount},
                ),
                shortfall=-resulting,
            )
        return StockAdjustmentResult(
            accepted=True, resulting_stock=resulting, adjustment_type=kind, applied_quantity=-amount
        )

    if kind is AdjustmentType.CORRECTION:
        if new_stock_quantity is None or new_stock_quantity == "":
            return _rejected(
                stock, kind, _missing_quantity("new_stock_quantity", "new stock quantity is required for a correction")
            )
        target = parse_or_default(new_stock_quantity, default=-1.0)
        if target < 0:
            return _rejected(
                stock, kind, _missing_quantity("new_stock_quantity", "new stock quantity must be a number >= 0")
            )
        return StockAdjustmentResult(
            accepted=True, resulting_stock=target, adjustment_type=kind, applied_quantity=target - stock
        )

    assert_never(kind)


def process_adjustment(
    current_stock: Any,
    adjustment: StockAdjustment | dict[str, Any],
    *,
    is_service: bool = False,
) -> StockAdjustmentResult:
    return apply_adjustment(
        current_stock,
        field_value(adjustment, "adjustment_type"),
        quantity=field_value(adjustment, "quantity"),
        new_stock_quantity=field_value(adjustment, "new_stock_quantity"),
        is_service=is_service,
    )


def is_low_stock(stock: Any, critical_threshold: Any, *, is_service: bool = False) -> bool:
    if is_service:
        return False
    return parse_or_default(stock) <= parse_or_default(critical_threshold)
