from __future__ import annotations

import datetime

from gescom.journal import validate_journal_lines
from gescom_schemas.accounting import JournalEntry, JournalLine
from gescom_schemas.documents import DocumentTotals

DEFAULT_ACCOUNTS: dict[str, str] = {
    "customers": "411000",
    "sales_revenue": "707000",
    "vat_collected": "445710",
    "bank": "512000",
    "suppliers": "401000",
    "purchases": "607000",
    "vat_deductible": "445660",
}


class UnbalancedEntryError(ValueError):
    pass


def _checked_entry(entry: JournalEntry) -> JournalEntry:
    validation = validate_journal_lines(entry.lines)
    if not validation.is_valid:
        raise UnbalancedEntryError(
            f"Generated entry is invalid: debit={validation.total_debit} "
            f"credit={validation.total_credit} line_errors={validation.per_line_errors}"
        )
    return entry


def sale_invoice_entry(
    *,
    invoice_number: str,
    totals: DocumentTotals,
    issue_date: datetime.date,
    invoice_id: str | None = None,
    client_name: str | None = None,
    accounts: dict[str, str] | None = None,
    currency: str = "EUR",
) -> JournalEntry:
    """Customers debited TTC against revenue (HT) and VAT collected.

    A 0% invoice has no VAT line: a zero line would fail debit-xor-credit.
    """
    active = {**DEFAULT_ACCOUNTS, **(accounts or {})}
    customer_label = f"Invoice {invoice_number}"
    if client_name:
        customer_label += f" - Client {client_name}"

    lines = [
        JournalLine(account=active["customers"], debit=totals.total_ttc, credit=0.0, description=customer_label),
        JournalLine(
            account=active["sales_revenue"],
            debit=0.0,
            credit=totals.sub_total_ht,
            description=f"Sale on invoice {invoice_number}",
        ),
    ]
    if totals.total_vat > 0:
        lines.append(
            JournalLine(
                account=active["vat_collected"],
                debit=0.0,
                credit=totals.total_vat,
                description=f"VAT collected on invoice {invoice_number}",
            )
        )
    return _checked_entry(
        JournalEntry(
            date=issue_date,
            description=f"Sale recorded for invoice {invoice_number}",
            transaction_type="SALE",
            lines=lines,
            related_document_type="Invoice",
            related_document_id=invoice_id,
            currency=currency,
        )
    )


def payment_received_entry(
    *,
    invoice_number: str,
    amount: float,
    payment_date: datetime.date,
    invoice_id: str | None = None,
    client_name: str | None = None,
    accounts: dict[str, str] | None = None,
    currency: str = "EUR",
) -> JournalEntry:
    active = {**DEFAULT_ACCOUNTS, **(accounts or {})}
    customer_label = f"Payment of invoice {invoice_number}"
    if client_name:
        customer_label += f" - Client {client_name}"

    lines = [
        JournalLine(
            account=active["bank"],
            debit=amount,
            credit=0.0,
            description=f"Receipt for invoice {invoice_number}",
        ),
        JournalLine(account=active["customers"], debit=0.0, credit=amount, description=customer_label),
    ]
    return _checked_entry(
        JournalEntry(
            date=payment_date,
            description=f"Payment received for invoice {invoice_number}",
            transaction_type="PAYMENT_RECEIVED",
            lines=lines,
            related_document_type="Invoice",
            related_document_id=invoice_id,
            currency=currency,
        )
    )


def purchase_invoice_entry(
    *,
    supplier_invoice_number: str,
    totals: DocumentTotals,
    issue_date: datetime.date,
    supplier_invoice_id: str | None = None,
    supplier_name: str | None = None,
    accounts: dict[str, str] | None = None,
    currency: str = "EUR",
) -> JournalEntry:
    """Purchases (HT) and deductible VAT debited against the supplier (TTC)."""
    active = {**DEFAULT_ACCOUNTS, **(accounts or {})}
    supplier_label = f"Invoice {supplier_invoice_number}"
    if supplier_name:
        supplier_label += f" - Supplier {supplier_name}"

    lines = [
        JournalLine(
            account=active["purchases"],
            debit=totals.sub_total_ht,
            credit=0.0,
            description=f"Purchase on supplier invoice {supplier_invoice_number}",
        ),
    ]
    if totals.total_vat > 0:
        lines.append(
            JournalLine(
                account=active["vat_deductible"],
                debit=totals.total_vat,
                credit=0.0,
                description=f"Deductible VAT on supplier invoice {supplier_invoice_number}",
            )
        )
    lines.append(
        JournalLine(account=active["suppliers"], debit=0.0, credit=totals.total_ttc, description=supplier_label)
    )
    return _checked_entry(
        JournalEntry(
            date=issue_date,
            description=f"Purchase recorded for supplier invoice {supplier_invoice_number}",
            transaction_type="PURCHASE",
            lines=lines,
            related_document_type="SupplierInvoice",
            related_document_id=supplier_invoice_id,
            currency=currency,
        )
    )
