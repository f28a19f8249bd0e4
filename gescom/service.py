from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence
from typing import Any

from gescom.coercion import field_value
from gescom.config import Settings, load_dotenv
from gescom.conversion import quote_to_delivery_note, to_invoice_lines, validate_delivery_lines
from gescom.document_totals import compute_document_totals
from gescom.invoice_status import derive_invoice_status
from gescom.journal import validate_journal_lines
from gescom.line_totals import compute_line_totals, rounded_line_totals
from gescom.logger import configure_logging, log_engine_event
from gescom.metrics import MetricsCollector
from gescom.payments import reconcile, validate_new_payment
from gescom.postings import payment_received_entry, purchase_invoice_entry, sale_invoice_entry
from gescom.stock import process_adjustment
from gescom.validation import validate_and_total
from gescom_schemas.accounting import JournalEntry, JournalValidation
from gescom_schemas.documents import (
    DeliveryNoteLine,
    DeliveryNoteStatus,
    DocumentTotals,
    InvoiceLine,
    LineTotals,
    SourceDocumentType,
)
from gescom_schemas.issues import ValidationIssue, issue_codes
from gescom_schemas.payments import InvoiceStatus, PaymentReconciliation
from gescom_schemas.stock import StockAdjustment, StockAdjustmentResult

logger = logging.getLogger(__name__)


class FinanceEngine:
    """Entry point for form submission handlers.

    Binds settings to the pure calculators and records one log line and one
    metric per operation. Nothing here is stored; callers persist results.
    """

    def __init__(self, settings: Settings | None = None, metrics: MetricsCollector | None = None) -> None:
        self.settings = settings or Settings()
        self.metrics = metrics or MetricsCollector()

    @classmethod
    def from_env(cls, dotenv_path: str = ".env") -> "FinanceEngine":
        load_dotenv(dotenv_path)
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        return cls(settings=settings)

    def _record(
        self,
        operation: str,
        accepted: bool,
        *,
        document_type: str | None = None,
        document_id: str | None = None,
        error_codes: list[str] | None = None,
    ) -> None:
        self.metrics.record_outcome(operation, accepted)
        log_engine_event(
            logger,
            logging.INFO if accepted else logging.WARNING,
            f"{operation} {'accepted' if accepted else 'rejected'}",
            operation=operation,
            document_type=document_type,
            document_id=document_id,
            outcome="accepted" if accepted else "rejected",
            error_codes=error_codes,
        )

    @property
    def _accounts(self) -> dict[str, str]:
        return {
            "customers": self.settings.customers_account,
            "sales_revenue": self.settings.sales_revenue_account,
            "vat_collected": self.settings.vat_collected_account,
            "bank": self.settings.bank_account,
            "suppliers": self.settings.suppliers_account,
            "purchases": self.settings.purchases_account,
            "vat_deductible": self.settings.vat_deductible_account,
        }

    def line_totals(self, line: Any) -> LineTotals:
        return rounded_line_totals(compute_line_totals(line), self.settings.money_places)

    def document_totals(
        self,
        lines: Sequence[Any],
        declared_totals: Any = None,
        *,
        document_type: str = "INVOICE",
        document_id: str | None = None,
    ) -> dict[str, Any]:
        result = validate_and_total(
            lines,
            declared_totals,
            amount_tolerance=self.settings.totals_tolerance,
            places=self.settings.money_places,
        )
        self._record(
            "document_totals",
            result["is_valid"],
            document_type=document_type,
            document_id=document_id,
            error_codes=[v["code"] for v in result["violations"]],
        )
        return result

    def validate_journal(self, lines: Sequence[Any], *, document_id: str | None = None) -> JournalValidation:
        validation = validate_journal_lines(
            lines, tolerance=self.settings.journal_tolerance, places=self.settings.money_places
        )
        codes = sorted(set(validation.per_line_errors.values()))
        if validation.rejection is not None:
            codes.append(validation.rejection.code)
        self._record(
            "journal_validation",
            validation.is_valid,
            document_type="JOURNAL_ENTRY",
            document_id=document_id,
            error_codes=codes,
        )
        return validation

    def adjust_stock(
        self,
        current_stock: Any,
        adjustment: StockAdjustment | dict[str, Any],
        *,
        is_service: bool = False,
    ) -> StockAdjustmentResult:
        result = process_adjustment(current_stock, adjustment, is_service=is_service)
        product_id = field_value(adjustment, "product_id")
        self._record(
            "stock_adjustment",
            result.accepted,
            document_type="PRODUCT",
            document_id=product_id,
            error_codes=issue_codes(result.errors),
        )
        return result

    def prepare_delivery_note(
        self,
        quote_lines: Sequence[Any],
        *,
        status: DeliveryNoteStatus | None = None,
        document_id: str | None = None,
    ) -> tuple[list[DeliveryNoteLine], list[ValidationIssue]]:
        lines = quote_to_delivery_note(quote_lines)
        issues = validate_delivery_lines(lines, status=status)
        self._record(
            "delivery_note_conversion",
            not issues,
            document_type="QUOTE",
            document_id=document_id,
            error_codes=issue_codes(issues),
        )
        return lines, issues

    def validate_delivery_note(
        self,
        lines: Sequence[Any],
        *,
        status: DeliveryNoteStatus | None = None,
        document_id: str | None = None,
    ) -> list[ValidationIssue]:
        issues = validate_delivery_lines(lines, status=status)
        self._record(
            "delivery_note_validation",
            not issues,
            document_type="DELIVERY_NOTE",
            document_id=document_id,
            error_codes=issue_codes(issues),
        )
        return issues

    def invoice_from(
        self,
        source_type: SourceDocumentType,
        lines: Sequence[Any],
        *,
        document_id: str | None = None,
    ) -> tuple[list[InvoiceLine], DocumentTotals]:
        invoice_lines = to_invoice_lines(source_type, lines)
        totals = compute_document_totals(invoice_lines, places=self.settings.money_places)
        self._record("invoice_conversion", True, document_type=source_type, document_id=document_id)
        return invoice_lines, totals

    def reconcile_payments(self, total_ttc: Any, payments: Sequence[Any]) -> PaymentReconciliation:
        return reconcile(
            total_ttc, payments, epsilon=self.settings.payment_epsilon, places=self.settings.money_places
        )

    def check_payment(
        self,
        total_ttc: Any,
        payments: Sequence[Any],
        amount: Any,
        *,
        status: InvoiceStatus | None = None,
        document_id: str | None = None,
    ) -> list[ValidationIssue]:
        issues = validate_new_payment(
            total_ttc,
            payments,
            amount,
            status=status,
            epsilon=self.settings.payment_epsilon,
            places=self.settings.money_places,
        )
        self._record(
            "payment_check",
            not issues,
            document_type="INVOICE",
            document_id=document_id,
            error_codes=issue_codes(issues),
        )
        return issues

    def invoice_status(
        self,
        current: str,
        *,
        total_ttc: Any,
        payments: Sequence[Any],
        due_date: datetime.date | None,
        sent_at: datetime.date | datetime.datetime | None,
        today: datetime.date,
    ) -> InvoiceStatus:
        paid = self.reconcile_payments(total_ttc, payments).amount_paid
        return derive_invoice_status(
            current, total_ttc=total_ttc, amount_paid=paid, due_date=due_date, sent_at=sent_at, today=today
        )

    def post_sale_invoice(
        self,
        *,
        invoice_number: str,
        totals: DocumentTotals,
        issue_date: datetime.date,
        invoice_id: str | None = None,
        client_name: str | None = None,
    ) -> JournalEntry:
        entry = sale_invoice_entry(
            invoice_number=invoice_number,
            totals=totals,
            issue_date=issue_date,
            invoice_id=invoice_id,
            client_name=client_name,
            accounts=self._accounts,
            currency=self.settings.currency,
        )
        self._record("sale_posting", True, document_type="INVOICE", document_id=invoice_id or invoice_number)
        return entry

    def post_payment_received(
        self,
        *,
        invoice_number: str,
        amount: float,
        payment_date: datetime.date,
        invoice_id: str | None = None,
        client_name: str | None = None,
    ) -> JournalEntry:
        entry = payment_received_entry(
            invoice_number=invoice_number,
            amount=amount,
            payment_date=payment_date,
            invoice_id=invoice_id,
            client_name=client_name,
            accounts=self._accounts,
            currency=self.settings.currency,
        )
        self._record("payment_posting", True, document_type="INVOICE", document_id=invoice_id or invoice_number)
        return entry

    def post_purchase_invoice(
        self,
        *,
        supplier_invoice_number: str,
        totals: DocumentTotals,
        issue_date: datetime.date,
        supplier_invoice_id: str | None = None,
        supplier_name: str | None = None,
    ) -> JournalEntry:
        entry = purchase_invoice_entry(
            supplier_invoice_number=supplier_invoice_number,
            totals=totals,
            issue_date=issue_date,
            supplier_invoice_id=supplier_invoice_id,
            supplier_name=supplier_name,
            accounts=self._accounts,
            currency=self.settings.currency,
        )
        self._record(
            "purchase_posting",
            True,
            document_type="SUPPLIER_INVOICE",
            document_id=supplier_invoice_id or supplier_invoice_number,
        )
        return entry
