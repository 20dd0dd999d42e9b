"""Static fallback estimates for debt records missing a rate or minimum payment.

Raw account records come from aggregators in several shapes: balances may be
negative (money owed), rates may only exist inside provider ``rawData`` as
percentages, and minimum payments are often absent. These helpers normalise
such records into something :meth:`Debt.from_record` accepts.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from ..errors import InvalidInputError

logger = logging.getLogger("debtpath.estimation")

FALLBACK_INTEREST_RATES: dict[str, float] = {
    "credit_card": 0.2099,
    "line_of_credit": 0.1249,
    "mortgage": 0.0699,
    "auto_loan": 0.0699,
    "student_loan": 0.0549,
    "personal_loan": 0.1149,
    "medical_debt": 0.0,
    "liability": 0.0999,
    "other": 0.0999,
}
DEFAULT_INTEREST_RATE = 0.1099

INSTALLMENT_TYPES = {"mortgage", "auto_loan", "student_loan", "personal_loan", "loan"}
INSTALLMENT_TERM_MONTHS = 120

# Aggregator account types that never carry a balance owed
NON_DEBT_ACCOUNT_TYPES = {
    "depository",
    "checking",
    "savings",
    "cash",
    "investment",
    "brokerage",
    "retirement",
}


def _type_of(record: Mapping[str, Any]) -> str:
    return str(record.get("type") or "other").strip().lower()


def _raw_data(record: Mapping[str, Any]) -> Mapping[str, Any]:
    raw = record.get("rawData", record.get("raw_data"))
    return raw if isinstance(raw, Mapping) else {}


def _number(value: Any, field: str, record: Mapping[str, Any]) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Debt {record.get('id')} has a malformed {field}: {value!r}"
        ) from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"Debt {record.get('id')} has a non-finite {field}: {value!r}")
    return number


def _balance_of(record: Mapping[str, Any]) -> int:
    value = record.get("currentBalance", record.get("current_balance", record.get("balance")))
    if value is None or value == "":
        return 0
    return abs(int(round(_number(value, "currentBalance", record))))


def _given(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None and record.get(key) != "":
            return record[key]
    return None


def is_debt_account(record: Mapping[str, Any]) -> bool:
    """Unknown types count as debts so that parsing rejects them later."""

    return _type_of(record) not in NON_DEBT_ACCOUNT_TYPES


def estimate_interest_rate(record: Mapping[str, Any]) -> float:
    """Known rate, else provider APR percentage, else the typical rate for the type."""

    known = _given(record, "interestRate", "interest_rate")
    if known is not None:
        return _number(known, "interestRate", record)

    raw = _raw_data(record)
    aprs = raw.get("aprs")
    if isinstance(aprs, list) and aprs and isinstance(aprs[0], Mapping):
        percentage = aprs[0].get("apr_percentage")
        if percentage is not None:
            return _number(percentage, "apr_percentage", record) / 100
    if raw.get("apr_percentage"):
        return _number(raw["apr_percentage"], "apr_percentage", record) / 100

    return FALLBACK_INTEREST_RATES.get(_type_of(record), DEFAULT_INTEREST_RATE)


def level_payment(balance: int, annual_rate: float, n_months: int) -> int:
    """Fully-amortizing payment in cents with a zero-rate guard."""

    monthly_rate = annual_rate / 12
    if monthly_rate == 0:
        return round(balance / n_months)
    growth = (1 + monthly_rate) ** n_months
    return round(balance * monthly_rate * growth / (growth - 1))


def estimate_minimum_payment(record: Mapping[str, Any]) -> int:
    """Known minimum, else provider minimum, else a rule of thumb for the type."""

    known = _given(record, "minimumPayment", "minimum_payment")
    if known is not None:
        return int(round(_number(known, "minimumPayment", record)))

    raw = _raw_data(record)
    if raw.get("minimum_payment"):
        return int(round(_number(raw["minimum_payment"], "minimum_payment", record)))

    balance = _balance_of(record)
    debt_type = _type_of(record)
    if debt_type == "line_of_credit":
        # Interest-only
        return round(balance * estimate_interest_rate(record) / 12)
    if debt_type in INSTALLMENT_TYPES:
        return level_payment(balance, estimate_interest_rate(record), INSTALLMENT_TERM_MONTHS)
    if debt_type == "medical_debt":
        return max(round(balance * 0.01), 5000)
    # Credit cards and everything else: 2% of balance, $25 floor
    return max(round(balance * 0.02), 2500)


def enrich_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` with a positive balance, a rate, and a minimum payment."""

    enriched = dict(record)
    enriched["currentBalance"] = _balance_of(record)
    for key in ("current_balance", "balance"):
        enriched.pop(key, None)

    if _given(record, "interestRate", "interest_rate") is None:
        enriched["interestRate"] = estimate_interest_rate(enriched)
        logger.info(
            "Interest rate estimated",
            extra={"debt_id": record.get("id"), "interest_rate": enriched["interestRate"]},
        )
    if _given(record, "minimumPayment", "minimum_payment") is None:
        enriched["minimumPayment"] = estimate_minimum_payment(enriched)
        logger.info(
            "Minimum payment estimated",
            extra={"debt_id": record.get("id"), "minimum_payment": enriched["minimumPayment"]},
        )
    return enriched


def enrich_records(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Keep active debt accounts with a balance owed and fill in missing estimates."""

    enriched: list[dict[str, Any]] = []
    for record in records:
        if not is_debt_account(record):
            continue
        status = str(record.get("status") or "active").strip().lower()
        if status != "active":
            continue
        if _balance_of(record) == 0:
            continue
        enriched.append(enrich_record(record))
    return enriched


__all__ = [
    "FALLBACK_INTEREST_RATES",
    "enrich_record",
    "enrich_records",
    "estimate_interest_rate",
    "estimate_minimum_payment",
    "is_debt_account",
    "level_payment",
]
