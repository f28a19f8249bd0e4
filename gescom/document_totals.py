from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from gescom.coercion import round_money
from gescom.line_totals import clamp_rate, compute_line_totals, read_line_number
from gescom_schemas.documents import DocumentTotals, VatBucket


def compute_document_totals(lines: Iterable[Any], *, places: int = 2) -> DocumentTotals:
    """Fold line results into document totals.

    Sums stay unrounded during the fold and every public total is rounded
    once at the end. ``total_ttc`` is the sum of the two rounded totals so
    the printed figures always add up. VAT buckets group on the exact rate
    value, drop rates that produced no tax, and are ordered by descending
    rate. Breakdown
    rows are rounded independently, so their sum may differ from
    ``total_vat`` by a rounding residue; callers show both.
    """
    before_discount = 0.0
    discount = 0.0
    total_ht = 0.0
    total_vat = 0.0
    buckets: dict[float, list[float]] = {}

    for line in lines:
        result = compute_line_totals(line)
        before_discount += result.line_total_ht_before_discount
        discount += result.line_discount_amount
        total_ht += result.line_total_ht
        total_vat += result.line_vat_amount

        rate = clamp_rate(read_line_number(line, "vat_rate"))
        bucket = buckets.setdefault(rate, [0.0, 0.0])
        bucket[0] += result.line_total_ht
        bucket[1] += result.line_vat_amount

    breakdown = [
        VatBucket(rate=rate, base=round_money(base, places), amount=round_money(amount, places))
        for rate, (base, amount) in sorted(buckets.items(), key=lambda item: item[0], reverse=True)
        if amount != 0
    ]
    sub_total_ht = round_money(total_ht, places)
    vat = round_money(total_vat, places)
    return DocumentTotals(
        sub_total_ht_before_discount=round_money(before_discount, places),
        total_discount_amount=round_money(discount, places),
        sub_total_ht=sub_total_ht,
        total_vat=vat,
        total_ttc=round_money(sub_total_ht + vat, places),
        vat_breakdown=breakdown,
    )


def vat_breakdown_residue(totals: DocumentTotals) -> float:
    return totals.total_vat - sum(bucket.amount for bucket in totals.vat_breakdown)
