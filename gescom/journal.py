from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from gescom.coercion import field_value, parse_or_default, round_money
from gescom_schemas.accounting import JournalLineError, JournalValidation
from gescom_schemas.issues import ValidationIssue

BALANCE_TOLERANCE = 0.001
MIN_LINES = 2


def _line_error(account: Any, debit: float, credit: float) -> JournalLineError | None:
    if account is None or not str(account).strip():
        return "missing_account"
    if debit < 0 or credit < 0:
        return "negative_amount"
    if debit != 0 and credit != 0:
        return "debit_and_credit"
    if debit == 0 and credit == 0:
        return "empty_amount"
    return None


def validate_journal_lines(
    lines: Sequence[Any],
    *,
    tolerance: float = BALANCE_TOLERANCE,
    places: int = 2,
) -> JournalValidation:
    """Check debit-xor-credit on every line and debits == credits overall.

    Lines may be ``JournalLine`` models or raw mappings. The result never
    raises; an unbalanced entry comes back with a ``balance_mismatch``
    rejection carrying both sums.
    """
    per_line_errors: dict[int, JournalLineError] = {}
    total_debit = 0.0
    total_credit = 0.0

    for index, line in enumerate(lines):
        debit = parse_or_default(field_value(line, "debit"))
        credit = parse_or_default(field_value(line, "credit"))
        error = _line_error(field_value(line, "account"), debit, credit)
        if error is not None:
            per_line_errors[index] = error
        total_debit += debit
        total_credit += credit

    difference = total_debit - total_credit
    is_balanced = abs(difference) < tolerance

    rejection: ValidationIssue | None = None
    if not is_balanced:
        rejection = ValidationIssue(
            code="balance_mismatch",
            field="lines",
            message="journal entry is not balanced: total debit differs from total credit",
            details={
                "total_debit": round_money(total_debit, places),
                "total_credit": round_money(total_credit, places),
                "difference": round_money(difference, 3),
            },
        )
    elif len(lines) < MIN_LINES:
        rejection = ValidationIssue(
            code="too_few_lines",
            field="lines",
            message=f"journal entry needs at least {MIN_LINES} lines",
            details={"line_count": len(lines)},
        )

    return JournalValidation(
        is_balanced=is_balanced,
        total_debit=round_money(total_debit, places),
        total_credit=round_money(total_credit, places),
        per_line_errors=per_line_errors,
        rejection=rejection,
    )


def line_error_issues(validation: JournalValidation) -> list[ValidationIssue]:
    messages = {
        "missing_account": "an account is required on every line",
        "negative_amount": "debit and credit cannot be negative",
        "debit_and_credit": "a line cannot carry both a debit and a credit",
        "empty_amount": "a line needs either a debit or a credit",
    }
    return [
        ValidationIssue(code=kind, field="lines", message=messages[kind], line_index=index)
        for index, kind in sorted(validation.per_line_errors.items())
    ]
