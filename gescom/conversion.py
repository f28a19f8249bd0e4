from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import uuid4

from gescom.coercion import field_value, parse_or_default, pick
from gescom.line_totals import clamp_rate, read_line_number
from gescom_schemas.documents import (
    DeliveryNoteLine,
    DeliveryNoteStatus,
    InvoiceLine,
    QuoteLine,
    QuoteStatus,
    SourceDocumentType,
)
from gescom_schemas.issues import ValidationIssue
from gescom_schemas.stock import AdjustmentType, StockAdjustment

# Statuses in which a delivery note is not yet (or no longer) physically moving goods.
NON_SHIPPING_STATUSES = {"PENDING_PREPARATION", "CANCELLED"}


def _new_line_id() -> str:
    return str(uuid4())


def _descriptive_fields(line: Any) -> dict[str, Any]:
    return {
        "source_line_id": pick(line, "line_id", "lineId", "id"),
        "product_id": pick(line, "product_id", "productId", "product"),
        "product_name": pick(line, "product_name", "productName"),
        "description": pick(line, "description", default=""),
        "unit_price_ht": read_line_number(line, "unit_price_ht"),
        "vat_rate": clamp_rate(read_line_number(line, "vat_rate")),
    }


def quote_to_delivery_note(lines: Sequence[QuoteLine | Mapping[str, Any]]) -> list[DeliveryNoteLine]:
    """Pre-fill delivery-note lines from quote lines: delivered = ordered = quoted."""
    out: list[DeliveryNoteLine] = []
    for line in lines:
        quantity = read_line_number(line, "quantity")
        out.append(
            DeliveryNoteLine.model_construct(
                line_id=_new_line_id(),
                quantity_ordered=quantity,
                quantity_delivered=quantity,
                **_descriptive_fields(line),
            )
        )
    return out


def _delivered_quantity(line: Any) -> float:
    delivered = pick(line, "quantity_delivered", "quantityDelivered")
    if delivered is None:
        return read_line_number(line, "quantity")
    return parse_or_default(delivered)


def to_invoice_lines(source_type: SourceDocumentType, lines: Sequence[Any]) -> list[InvoiceLine]:
    """Project quote or delivery-note lines into invoice lines.

    Quote lines keep their quantity and discount. Delivery-note lines bill
    what was delivered and carry no discount; lines with nothing delivered
    are left off the invoice. The delivered <= ordered check belongs to
    delivery-note creation and is not repeated here.
    """
    source = str(source_type).strip().upper()
    if source not in {"QUOTE", "DELIVERY_NOTE"}:
        raise ValueError(f"Unsupported source document type: {source_type}")

    out: list[InvoiceLine] = []
    for line in lines:
        if source == "QUOTE":
            quantity = read_line_number(line, "quantity")
            discount_rate = clamp_rate(read_line_number(line, "discount_rate"))
        else:
            quantity = _delivered_quantity(line)
            if quantity <= 0:
                continue
            discount_rate = 0.0
        out.append(
            InvoiceLine.model_construct(
                line_id=_new_line_id(),
                quantity=quantity,
                discount_rate=discount_rate,
                **_descriptive_fields(line),
            )
        )
    return out


def validate_delivery_lines(
    lines: Sequence[Any], *, status: DeliveryNoteStatus | None = None
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    shipping = status is not None and status.strip().upper() not in NON_SHIPPING_STATUSES
    for index, line in enumerate(lines):
        delivered = _delivered_quantity(line)
        ordered_raw = pick(line, "quantity_ordered", "quantityOrdered")
        if delivered < 0:
            issues.append(
                ValidationIssue(
                    code="negative_quantity",
                    field="quantity_delivered",
                    message="delivered quantity cannot be negative",
                    line_index=index,
                )
            )
            continue
        if ordered_raw is not None:
            ordered = parse_or_default(ordered_raw)
            if delivered > ordered:
                issues.append(
                    ValidationIssue(
                        code="delivered_exceeds_ordered",
                        field="quantity_delivered",
                        message="delivered quantity cannot exceed the ordered quantity",
                        line_index=index,
                        details={"quantity_ordered": ordered, "quantity_delivered": delivered},
                    )
                )
                continue
        if shipping and delivered <= 0:
            issues.append(
                ValidationIssue(
                    code="nothing_delivered",
                    field="quantity_delivered",
                    message=f"delivered quantity must be greater than 0 for status {status}",
                    line_index=index,
                )
            )
    return issues


def check_quote_convertible(status: QuoteStatus, converted_invoice_id: str | None = None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if str(status or "").strip().upper() != "ACCEPTED":
        issues.append(
            ValidationIssue(
                code="quote_not_accepted",
                field="status",
                message="a quote must be accepted before it is invoiced",
                details={"status": status},
            )
        )
    if converted_invoice_id:
        issues.append(
            ValidationIssue(
                code="quote_already_invoiced",
                field="converted_invoice_id",
                message="this quote has already been invoiced",
                details={"invoice_id": converted_invoice_id},
            )
        )
    return issues


def delivery_stock_adjustments(
    lines: Sequence[Any],
    *,
    direction: AdjustmentType = AdjustmentType.OUT,
    reason: str | None = None,
) -> list[StockAdjustment]:
    """Stock movements for shipped (OUT) or returned (IN) delivery-note lines.

    Lines without a product or with nothing delivered produce no movement.
    Services must be filtered out by the caller.
    """
    if direction is AdjustmentType.CORRECTION:
        raise ValueError("Delivery notes move stock IN or OUT, never by correction")
    out: list[StockAdjustment] = []
    for line in lines:
        product_id = pick(line, "product_id", "productId", "product")
        delivered = _delivered_quantity(line)
        if not product_id or delivered <= 0:
            continue
        out.append(
            StockAdjustment(
                product_id=str(product_id),
                adjustment_type=direction,
                quantity=delivered,
                reason=reason or field_value(line, "description"),
            )
        )
    return out
