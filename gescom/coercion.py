from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def parse_or_default(value: Any, default: float = 0.0) -> float:
    """Lenient numeric read used by every engine component.

    Missing, blank, boolean, non-numeric and non-finite inputs all collapse
    to ``default``. Form fields arrive as strings, so numeric text is parsed.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if not math.isfinite(number):
        return default
    return number


def round_money(value: float, places: int = 2) -> float:
    # Half away from zero on the exact binary value, so 0.125 -> 0.13 but
    # 1.005 (stored as 1.00499...) -> 1.0.
    quantum = Decimal(1).scaleb(-places)
    rounded = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    return rounded + 0.0


def field_value(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def pick(source: Any, *names: str, default: Any = None) -> Any:
    for name in names:
        value = field_value(source, name)
        if value not in (None, ""):
            return value
    return default
