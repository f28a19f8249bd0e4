from __future__ import annotations

import pytest

from gescom.line_totals import compute_line_totals, rounded_line_totals
from gescom_schemas.documents import LineItem


def test_line_breakdown_with_discount_and_vat() -> None:
    line = LineItem(quantity=10, unit_price_ht=100, vat_rate=20, discount_rate=10)
    totals = compute_line_totals(line)
    assert totals.line_total_ht_before_discount == pytest.approx(1000)
    assert totals.line_discount_amount == pytest.approx(100)
    assert totals.line_total_ht == pytest.approx(900)
    assert totals.line_vat_amount == pytest.approx(180)
    assert totals.line_total_ttc == pytest.approx(1080)


@pytest.mark.parametrize(
    "line",
    [
        {"quantity": 0, "unit_price_ht": 50, "vat_rate": 20, "discount_rate": 5},
        {"quantity": 3, "unit_price_ht": 0, "vat_rate": 5.5},
    ],
)
def test_zero_quantity_or_price_yields_zero_amounts(line: dict) -> None:
    totals = compute_line_totals(line)
    assert totals.line_total_ht_before_discount == 0
    assert totals.line_discount_amount == 0
    assert totals.line_total_ht == 0
    assert totals.line_vat_amount == 0


def test_discount_amount_is_gap_between_gross_and_net() -> None:
    totals = compute_line_totals({"quantity": 3.5, "unit_price_ht": 19.99, "vat_rate": 5.5, "discount_rate": 12.5})
    assert totals.line_discount_amount == pytest.approx(
        totals.line_total_ht_before_discount - totals.line_total_ht
    )
    assert totals.line_total_ttc == pytest.approx(totals.line_total_ht + totals.line_vat_amount)


def test_missing_and_non_numeric_inputs_default_to_zero() -> None:
    totals = compute_line_totals({"quantity": "two", "unit_price_ht": None, "vat_rate": ""})
    assert totals.line_total_ttc == 0


def test_camel_case_form_payload_is_accepted() -> None:
    totals = compute_line_totals({"quantity": "2", "unitPriceHT": "15.50", "vatRate": "20", "discountRate": "0"})
    assert totals.line_total_ht == pytest.approx(31.0)
    assert totals.line_vat_amount == pytest.approx(6.2)


@pytest.mark.parametrize(("rate", "expected_ht"), [(150, 0.0), (-20, 100.0)])
def test_discount_rate_is_clamped(rate: float, expected_ht: float) -> None:
    totals = compute_line_totals({"quantity": 1, "unit_price_ht": 100, "vat_rate": 0, "discount_rate": rate})
    assert totals.line_total_ht == pytest.approx(expected_ht)


@pytest.mark.parametrize(("rate", "expected_vat"), [(150, 100.0), (-20, 0.0)])
def test_vat_rate_is_clamped(rate: float, expected_vat: float) -> None:
    totals = compute_line_totals({"quantity": 1, "unit_price_ht": 100, "vat_rate": rate})
    assert totals.line_vat_amount == pytest.approx(expected_vat)


def test_rounding_is_only_applied_to_the_reported_view() -> None:
    raw = compute_line_totals({"quantity": 3, "unit_price_ht": 0.333, "vat_rate": 19.6})
    reported = rounded_line_totals(raw)
    assert raw.line_total_ht == pytest.approx(0.999)
    assert reported.line_total_ht == 1.0
    assert reported.line_vat_amount == 0.2
