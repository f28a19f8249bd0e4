from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _parse_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got: {raw}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_int(name: str, default: int, *, minimum: int = 0, maximum: int = 6) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw}") from exc
    if not minimum <= value <= maximum:
        raise ValueError(f"{name} must be between {minimum} and {maximum}")
    return value


def _parse_account(name: str, default: str) -> str:
    value = os.getenv(name, default).strip()
    if not value.isdigit():
        raise ValueError(f"{name} must be a numeric account number, got: {value}")
    return value


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    currency: str = "EUR"
    money_places: int = 2
    totals_tolerance: float = 0.01
    journal_tolerance: float = 0.001
    payment_epsilon: float = 0.005
    customers_account: str = "411000"
    sales_revenue_account: str = "707000"
    vat_collected_account: str = "445710"
    bank_account: str = "512000"
    suppliers_account: str = "401000"
    purchases_account: str = "607000"
    vat_deductible_account: str = "445660"

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = os.getenv("GESCOM_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("GESCOM_LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

        currency = os.getenv("GESCOM_CURRENCY", "EUR").strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValueError("GESCOM_CURRENCY must be a 3-letter currency code")

        return cls(
            log_level=log_level,
            currency=currency,
            money_places=_parse_int("GESCOM_MONEY_PLACES", 2),
            totals_tolerance=_parse_float("GESCOM_TOTALS_TOLERANCE", 0.01),
            journal_tolerance=_parse_float("GESCOM_JOURNAL_TOLERANCE", 0.001),
            payment_epsilon=_parse_float("GESCOM_PAYMENT_EPSILON", 0.005),
            customers_account=_parse_account("GESCOM_CUSTOMERS_ACCOUNT", "411000"),
            sales_revenue_account=_parse_account("GESCOM_SALES_REVENUE_ACCOUNT", "707000"),
            vat_collected_account=_parse_account("GESCOM_VAT_COLLECTED_ACCOUNT", "445710"),
            bank_account=_parse_account("GESCOM_BANK_ACCOUNT", "512000"),
            suppliers_account=_parse_account("GESCOM_SUPPLIERS_ACCOUNT", "401000"),
            purchases_account=_parse_account("GESCOM_PURCHASES_ACCOUNT", "607000"),
            vat_deductible_account=_parse_account("GESCOM_VAT_DEDUCTIBLE_ACCOUNT", "445660"),
        )


def load_dotenv(path: str | Path = ".env") -> None:
    env_path = Path(path)
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#") or "=" not in entry:
            continue
        key, value = entry.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)
