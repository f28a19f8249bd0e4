from __future__ import annotations

import pytest

from gescom.document_totals import compute_document_totals, vat_breakdown_residue


def _lines() -> list[dict]:
    return [
        {"quantity": 10, "unit_price_ht": 100, "vat_rate": 20, "discount_rate": 10},
        {"quantity": 2, "unit_price_ht": 50, "vat_rate": 5.5},
        {"quantity": 1, "unit_price_ht": 40, "vat_rate": 0},
        {"quantity": 1, "unit_price_ht": 100, "vat_rate": 20},
    ]


def test_document_totals_sum_line_results() -> None:
    totals = compute_document_totals(_lines())
    assert totals.sub_total_ht_before_discount == 1240.0
    assert totals.total_discount_amount == 100.0
    assert totals.sub_total_ht == 1140.0
    assert totals.total_vat == 205.5
    assert totals.total_ttc == 1345.5


def test_vat_breakdown_groups_by_rate_drops_zero_and_sorts_descending() -> None:
    totals = compute_document_totals(_lines())
    assert [bucket.rate for bucket in totals.vat_breakdown] == [20, 5.5]
    top = totals.vat_breakdown[0]
    assert top.base == 1000.0
    assert top.amount == 200.0
    assert totals.vat_breakdown[1].base == 100.0
    assert totals.vat_breakdown[1].amount == 5.5


def test_total_ttc_is_subtotal_plus_vat_for_many_rates() -> None:
    lines = [
        {"quantity": q, "unit_price_ht": p, "vat_rate": r, "discount_rate": d}
        for q, p, r, d in [
            (3, 19.99, 20, 0),
            (1.5, 7.333, 10, 5),
            (7, 0.99, 5.5, 0),
            (2, 12.49, 2.1, 15),
            (11, 3.01, 8.5, 0),
        ]
    ]
    totals = compute_document_totals(lines)
    assert abs(totals.total_ttc - (totals.sub_total_ht + totals.total_vat)) <= 0.01
    assert abs(vat_breakdown_residue(totals)) <= 0.01 * len(totals.vat_breakdown)


def test_aggregation_is_idempotent() -> None:
    lines = _lines()
    assert compute_document_totals(lines) == compute_document_totals(lines)


def test_rounding_happens_once_at_document_level() -> None:
    # Three lines of 0.333 HT: per-line rounding would give 0.99, not 1.00.
    lines = [{"quantity": 1, "unit_price_ht": 0.333, "vat_rate": 0}] * 3
    totals = compute_document_totals(lines)
    assert totals.sub_total_ht == 1.0


def test_zero_rate_only_document_has_empty_breakdown() -> None:
    totals = compute_document_totals([{"quantity": 1, "unit_price_ht": 10, "vat_rate": 0}])
    assert totals.vat_breakdown == []
    assert totals.total_vat == 0.0
    assert totals.total_ttc == 10.0


def test_rates_are_grouped_on_exact_value() -> None:
    lines = [
        {"quantity": 1, "unit_price_ht": 100, "vat_rate": 5.5},
        {"quantity": 1, "unit_price_ht": 100, "vat_rate": 5.55},
    ]
    totals = compute_document_totals(lines)
    assert [bucket.rate for bucket in totals.vat_breakdown] == [5.55, 5.5]


@pytest.mark.parametrize("price", [0.025, 0.015, 0.035, 1.245])
def test_total_ttc_adds_up_the_rounded_totals(price: float) -> None:
    totals = compute_document_totals([{"quantity": 1, "unit_price_ht": price, "vat_rate": 20}])
    assert totals.total_ttc == round(totals.sub_total_ht + totals.total_vat, 2)


def test_half_cent_subtotal_and_vat_round_independently() -> None:
    totals = compute_document_totals([{"quantity": 1, "unit_price_ht": 0.025, "vat_rate": 20}])
    assert (totals.sub_total_ht, totals.total_vat, totals.total_ttc) == (0.03, 0.01, 0.04)


def test_out_of_range_vat_rates_are_bucketed_clamped() -> None:
    totals = compute_document_totals(
        [
            {"quantity": 1, "unit_price_ht": 100, "vat_rate": -20},
            {"quantity": 1, "unit_price_ht": 100, "vat_rate": 150},
        ]
    )
    assert [(b.rate, b.amount) for b in totals.vat_breakdown] == [(100.0, 100.0)]
    assert totals.total_vat == 100.0
