from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from gescom.coercion import field_value, parse_or_default, round_money
from gescom_schemas.issues import ValidationIssue
from gescom_schemas.payments import InvoiceStatus, PaymentReconciliation

PAYMENT_EPSILON = 0.005

# An invoice in one of these statuses no longer accepts payments.
PAYMENT_CLOSED_STATUSES = {"PAID", "CANCELLED", "VOIDED"}


def sum_payments(payments: Iterable[Any]) -> float:
    return sum(parse_or_default(field_value(p, "amount")) for p in payments)


def reconcile(
    total_ttc: Any,
    payments: Iterable[Any],
    *,
    epsilon: float = PAYMENT_EPSILON,
    places: int = 2,
) -> PaymentReconciliation:
    total = parse_or_default(total_ttc)
    paid = sum_payments(payments)
    due = total - paid
    return PaymentReconciliation(
        amount_paid=round_money(paid, places),
        amount_due=round_money(due, places),
        is_fully_paid=due <= epsilon,
    )


def validate_new_payment(
    total_ttc: Any,
    payments: Iterable[Any],
    amount: Any,
    *,
    status: InvoiceStatus | None = None,
    epsilon: float = PAYMENT_EPSILON,
    places: int = 2,
) -> list[ValidationIssue]:
    """Pre-checks a caller runs before appending a payment to an invoice."""
    issues: list[ValidationIssue] = []
    if status is not None and status.strip().upper() in PAYMENT_CLOSED_STATUSES:
        issues.append(
            ValidationIssue(
                code="invoice_closed",
                field="status",
                message=f"cannot record a payment on a {status.strip().upper()} invoice",
                details={"status": status.strip().upper()},
            )
        )
        return issues

    value = parse_or_default(amount)
    if value <= 0:
        issues.append(
            ValidationIssue(code="amount_not_positive", field="amount", message="payment amount must be positive")
        )
        return issues

    due = parse_or_default(total_ttc) - sum_payments(payments)
    if value > due + epsilon:
        issues.append(
            ValidationIssue(
                code="payment_exceeds_due",
                field="amount",
                message="payment amount cannot exceed the remaining balance",
                details={"amount": value, "amount_due": round_money(max(due, 0.0), places)},
            )
        )
    return issues
