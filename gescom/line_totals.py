from __future__ import annotations

from typing import Any

from gescom.coercion import parse_or_default, pick, round_money
from gescom_schemas.documents import LineTotals

# Raw form payloads use the client's camelCase names.
LINE_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "quantity": ("quantity", "qty"),
    "unit_price_ht": ("unit_price_ht", "unitPriceHT"),
    "vat_rate": ("vat_rate", "vatRate"),
    "discount_rate": ("discount_rate", "discountRate"),
}


def read_line_number(line: Any, field_name: str) -> float:
    return parse_or_default(pick(line, *LINE_FIELD_ALIASES[field_name]))


def clamp_rate(rate: float) -> float:
    return max(0.0, min(rate, 100.0))


def compute_line_totals(line: Any) -> LineTotals:
    """Monetary breakdown of one line, unrounded.

    Accepts a ``LineItem`` or any mapping/object exposing the line fields.
    Never raises: unusable numbers count as 0 and both the VAT and the
    discount rate are clamped to [0, 100].
    """
    quantity = read_line_number(line, "quantity")
    unit_price = read_line_number(line, "unit_price_ht")
    vat_rate = clamp_rate(read_line_number(line, "vat_rate"))
    discount_rate = clamp_rate(read_line_number(line, "discount_rate"))

    before_discount = quantity * unit_price
    discount_amount = before_discount * (discount_rate / 100)
    total_ht = before_discount - discount_amount
    vat_amount = total_ht * (vat_rate / 100)
    return LineTotals(
        line_total_ht_before_discount=before_discount,
        line_discount_amount=discount_amount,
        line_total_ht=total_ht,
        line_vat_amount=vat_amount,
        line_total_ttc=total_ht + vat_amount,
    )


def rounded_line_totals(totals: LineTotals, places: int = 2) -> LineTotals:
    return LineTotals(
        line_total_ht_before_discount=round_money(totals.line_total_ht_before_discount, places),
        line_discount_amount=round_money(totals.line_discount_amount, places),
        line_total_ht=round_money(totals.line_total_ht, places),
        line_vat_amount=round_money(totals.line_vat_amount, places),
        line_total_ttc=round_money(totals.line_total_ttc, places),
    )
