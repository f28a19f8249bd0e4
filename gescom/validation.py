from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from gescom.coercion import field_value, parse_or_default, round_money
from gescom.document_totals import compute_document_totals
from gescom_schemas.documents import DocumentTotals

DECLARED_TOTAL_FIELDS: dict[str, tuple[str, ...]] = {
    "sub_total_ht": ("sub_total_ht", "subTotalHT"),
    "total_vat": ("total_vat", "totalVAT", "totalVatAmount"),
    "total_ttc": ("total_ttc", "totalTTC"),
}

RULE_CODES = {
    "sub_total_ht": "subtotal_mismatch",
    "total_vat": "vat_mismatch",
    "total_ttc": "amount_mismatch",
}


def _declared(totals: Any, field_name: str) -> float | None:
    for alias in DECLARED_TOTAL_FIELDS[field_name]:
        value = field_value(totals, alias)
        if value not in (None, ""):
            return parse_or_default(value)
    return None


def evaluate_document_rules(
    lines: Sequence[Any],
    declared_totals: Any,
    *,
    amount_tolerance: float = 0.01,
    places: int = 2,
) -> list[dict[str, Any]]:
    """Compare totals a client submitted with totals recomputed from its lines.

    Fields absent from ``declared_totals`` are not checked.
    """
    computed = compute_document_totals(lines, places=places)
    violations: list[dict[str, Any]] = []

    for field_name, code in RULE_CODES.items():
        declared = _declared(declared_totals, field_name)
        if declared is None:
            continue
        expected = getattr(computed, field_name)
        actual = round_money(declared, places)
        if abs(expected - actual) > amount_tolerance:
            violations.append(
                {
                    "code": code,
                    "severity": "error",
                    "field": field_name,
                    "message": f"declared {field_name} does not match the total recomputed from line items",
                    "expected": expected,
                    "actual": actual,
                }
            )

    if not lines:
        violations.append(
            {
                "code": "no_line_items",
                "severity": "error",
                "field": "items",
                "message": "a document needs at least one line item",
            }
        )
    elif computed.sub_total_ht_before_discount == 0:
        violations.append(
            {
                "code": "line_items_incomplete",
                "severity": "warning",
                "field": "items",
                "message": "line items carry no priced quantity; totals are all zero",
            }
        )
    return violations


def validate_and_total(
    lines: Sequence[Any],
    declared_totals: Any = None,
    *,
    amount_tolerance: float = 0.01,
    places: int = 2,
) -> dict[str, Any]:
    totals: DocumentTotals = compute_document_totals(lines, places=places)
    violations = evaluate_document_rules(
        lines, declared_totals, amount_tolerance=amount_tolerance, places=places
    )
    is_valid = not any(v["severity"] == "error" for v in violations)
    return {"totals": totals, "violations": violations, "is_valid": is_valid}
