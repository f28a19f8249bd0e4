from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pytest

from gescom import service
from gescom.config import Settings
from gescom.metrics import MetricsCollector
from gescom.service import FinanceEngine


@pytest.fixture
def engine() -> FinanceEngine:
    return FinanceEngine(metrics=MetricsCollector())


def test_line_totals_are_rounded_for_display(engine: FinanceEngine) -> None:
    totals = engine.line_totals({"qty": 3, "unitPriceHT": 0.333, "vatRate": 20})
    assert totals.line_total_ht == 1.0
    assert totals.line_vat_amount == 0.2


def test_document_totals_record_accepted_outcome(engine: FinanceEngine) -> None:
    result = engine.document_totals(
        [{"quantity": 10, "unit_price_ht": 100, "vat_rate": 20, "discount_rate": 10}],
        {"total_ttc": 1080},
        document_id="inv-1",
    )
    assert result["is_valid"]
    assert result["totals"].total_ttc == 1080.0
    assert engine.metrics.counters["document_totals_accepted_total"] == 1


def test_rejected_stock_adjustment_logs_warning(engine: FinanceEngine, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="gescom.service"):
        result = engine.adjust_stock(10, {"product_id": "prod-1", "adjustment_type": "OUT", "quantity": 15})

    assert not result.accepted
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.operation == "stock_adjustment"
    assert record.document_id == "prod-1"
    assert record.error_codes == ["insufficient_stock"]
    assert engine.metrics.snapshot()["rejected_total"] == 1


def test_journal_validation_reports_error_codes(engine: FinanceEngine, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="gescom.service"):
        validation = engine.validate_journal([{"account": "", "debit": 10}, {"account": "2", "credit": 5}])
    assert not validation.is_valid
    assert caplog.records[-1].error_codes == ["missing_account", "balance_mismatch"]


def test_quote_to_invoice_flow(engine: FinanceEngine) -> None:
    quote = [{"line_id": "q-1", "product_id": "p-1", "quantity": 4, "unit_price_ht": 25, "vat_rate": 20}]
    note, issues = engine.prepare_delivery_note(quote, status="SHIPPED")
    assert issues == []
    assert engine.validate_delivery_note(note, status="DELIVERED") == []

    lines, totals = engine.invoice_from("DELIVERY_NOTE", note)
    assert lines[0].quantity == 4
    assert totals.total_ttc == 120.0
    assert engine.metrics.snapshot()["accepted_total"] == 3


def test_payments_drive_invoice_status(engine: FinanceEngine) -> None:
    payments = [{"amount": 400}, {"amount": 400}]
    assert engine.reconcile_payments(1200, payments).amount_due == 400
    assert engine.check_payment(1200, payments, 500)[0].code == "payment_exceeds_due"

    status = engine.invoice_status(
        "SENT",
        total_ttc=1200,
        payments=payments + [{"amount": 400}],
        due_date=date(2026, 4, 1),
        sent_at=date(2026, 3, 1),
        today=date(2026, 3, 15),
    )
    assert status == "PAID"


def test_postings_use_configured_accounts() -> None:
    engine = FinanceEngine(settings=Settings(sales_revenue_account="706000", bank_account="512100", currency="CHF"))
    totals = engine.invoice_from("QUOTE", [{"quantity": 1, "unit_price_ht": 100, "vat_rate": 20}])[1]

    sale = engine.post_sale_invoice(invoice_number="FAC2600001", totals=totals, issue_date=date(2026, 3, 1))
    assert [line.account for line in sale.lines] == ["411000", "706000", "445710"]
    assert sale.currency == "CHF"

    payment = engine.post_payment_received(invoice_number="FAC2600001", amount=120.0, payment_date=date(2026, 3, 9))
    assert payment.lines[0].account == "512100"
    assert engine.metrics.counters["payment_posting_total"] == 1


def test_purchase_posting_uses_configured_accounts() -> None:
    engine = FinanceEngine(settings=Settings(purchases_account="606100"))
    totals = engine.invoice_from("QUOTE", [{"quantity": 3, "unit_price_ht": 40, "vat_rate": 20}])[1]

    entry = engine.post_purchase_invoice(
        supplier_invoice_number="SUP-12", totals=totals, issue_date=date(2026, 3, 3), supplier_name="Nord"
    )
    assert [line.account for line in entry.lines] == ["606100", "445660", "401000"]
    assert entry.lines[-1].credit == 144.0
    assert engine.metrics.counters["purchase_posting_accepted_total"] == 1


def test_from_env_configures_logging_with_settings_level(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    levels: list[str] = []
    monkeypatch.setattr(service, "configure_logging", levels.append)
    monkeypatch.setenv("GESCOM_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("GESCOM_CURRENCY", "CHF")

    engine = FinanceEngine.from_env(str(tmp_path / "missing.env"))
    assert levels == ["WARNING"]
    assert engine.settings.currency == "CHF"
