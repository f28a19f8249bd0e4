from __future__ import annotations

import datetime
from typing import Any, Final, cast, get_args

from gescom.coercion import parse_or_default, round_money
from gescom_schemas.payments import InvoiceStatus


class UnknownInvoiceStatusError(ValueError):
    pass


INVOICE_STATUSES: Final[set[str]] = set(get_args(InvoiceStatus))

TERMINAL_STATUSES: Final[set[str]] = {"CANCELLED", "VOIDED"}

SETTLED_STATUSES: Final[set[str]] = {"PAID", "CANCELLED", "VOIDED"}


def normalize_status(status: str) -> InvoiceStatus:
    norm = str(status or "").strip().upper()
    if norm not in INVOICE_STATUSES:
        raise UnknownInvoiceStatusError(f"Unknown invoice status: {status}")
    return cast(InvoiceStatus, norm)


def is_overdue(status: str, due_date: datetime.date | None, today: datetime.date) -> bool:
    if normalize_status(status) in SETTLED_STATUSES or due_date is None:
        return False
    return today > due_date


def amount_due_for_status(status: str, total_ttc: Any, amount_paid: Any, *, places: int = 2) -> float:
    if normalize_status(status) in TERMINAL_STATUSES:
        return 0.0
    return round_money(max(0.0, parse_or_default(total_ttc) - parse_or_default(amount_paid)), places)


def derive_invoice_status(
    current: str,
    *,
    total_ttc: Any,
    amount_paid: Any,
    due_date: datetime.date | None,
    sent_at: datetime.date | datetime.datetime | None,
    today: datetime.date,
) -> InvoiceStatus:
    """Status an invoice should carry once its totals and payments are known.

    Cancelled and voided invoices never move. A draft only becomes paid or
    partially paid, never overdue.
    """
    status = normalize_status(current)
    if status in TERMINAL_STATUSES:
        return status

    total = parse_or_default(total_ttc)
    paid = parse_or_default(amount_paid)
    fully_paid = total > 0 and paid >= total
    past_due = due_date is not None and due_date < today and not fully_paid

    if fully_paid:
        return "PAID"
    if 0 < paid < total:
        return "PARTIALLY_PAID"
    if status != "DRAFT" and sent_at is not None and past_due:
        return "OVERDUE"
    if status == "PAID" and paid < total:
        # A payment was removed from a paid invoice.
        if past_due:
            return "OVERDUE"
        return "SENT" if sent_at is not None else "DRAFT"
    return status
