"""Debt inputs and the closed enumerations the engine dispatches on."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from ..errors import InvalidInputError


class DebtType(str, Enum):
    """Kinds of liability accepted by the planner."""

    CREDIT_CARD = "credit_card"
    LINE_OF_CREDIT = "line_of_credit"
    LOAN = "loan"
    AUTO_LOAN = "auto_loan"
    STUDENT_LOAN = "student_loan"
    PERSONAL_LOAN = "personal_loan"
    MEDICAL_DEBT = "medical_debt"
    MORTGAGE = "mortgage"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "DebtType":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text == "liability":
            return cls.OTHER
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown debt type: {value!r}") from exc


class PayoffStrategy(str, Enum):
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"

    @property
    def label(self) -> str:
        if self is PayoffStrategy.AVALANCHE:
            return "Avalanche Strategy (Highest Interest First)"
        return "Snowball Strategy (Smallest Balance First)"


class PlanScope(str, Enum):
    CONSUMER = "consumer"  # everything except mortgages
    ALL = "all"


class DeferredInterestPolicy(str, Enum):
    """How the retroactive charge is sized when a deferred-interest promo lapses."""

    PROMO_START_BALANCE = "promo_start_balance"
    TRACKED_BALANCE = "tracked_balance"


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] not in (None, ""):
            return record[key]
    return None


def _as_cents(value: Any, field: str) -> int:
    try:
        cents = int(round(float(value)))
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidInputError(f"{field} must be a whole number, got {value!r}") from exc
    return cents


def _as_rate(value: Any, field: str) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{field} must be a decimal rate, got {value!r}") from exc
    if not math.isfinite(rate):
        raise InvalidInputError(f"{field} must be a finite rate, got {value!r}")
    return rate


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True, slots=True)
class Debt:
    """A single debt as supplied by the enrichment step.

    Money is integer cents and rates are APR decimals (``0.0499`` for 4.99%).
    Instances are immutable; the simulator derives per-month views with
    :func:`dataclasses.replace` so no caller-owned object is ever modified.
    """

    id: str
    name: str
    type: DebtType
    current_balance: int
    interest_rate: float
    minimum_payment: int
    promotional_rate: float | None = None
    promotional_end_month: int | None = None
    has_deferred_interest: bool = False

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise InvalidInputError("Debt id is required.")
        if self.current_balance < 0:
            raise InvalidInputError(f"Debt {self.id} has a negative balance.")
        if self.minimum_payment < 0:
            raise InvalidInputError(f"Debt {self.id} has a negative minimum payment.")
        for rate in (self.interest_rate, self.promotional_rate):
            if rate is not None and not math.isfinite(rate):
                raise InvalidInputError(f"Debt {self.id} has a non-finite interest rate.")
        if self.interest_rate < 0:
            raise InvalidInputError(f"Debt {self.id} has a negative interest rate.")
        if self.promotional_rate is not None and self.promotional_rate < 0:
            raise InvalidInputError(f"Debt {self.id} has a negative promotional rate.")
        if self.promotional_end_month is not None and self.promotional_end_month < 0:
            raise InvalidInputError(f"Debt {self.id} has a negative promotional end month.")

    @property
    def has_promotion(self) -> bool:
        return (
            self.promotional_rate is not None
            and self.promotional_end_month is not None
            and self.promotional_end_month > 0
        )

    def in_promotion(self, month_offset: int) -> bool:
        """True while ``month_offset`` elapsed months fall inside the promo window."""

        return self.has_promotion and month_offset < self.promotional_end_month  # type: ignore[operator]

    def rate_at(self, month_offset: int) -> float:
        """Effective APR for the month starting ``month_offset`` months into the run."""

        if self.in_promotion(month_offset):
            return float(self.promotional_rate)  # type: ignore[arg-type]
        return self.interest_rate

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Debt":
        """Build a debt from a camelCase or snake_case mapping."""

        debt_id = _pick(record, "id", "debtId", "debt_id", "financialAccountId")
        if debt_id is None:
            raise InvalidInputError("Debt record is missing an id.")
        balance = _pick(record, "currentBalance", "current_balance", "balance")
        rate = _pick(record, "interestRate", "interest_rate")
        minimum = _pick(record, "minimumPayment", "minimum_payment")
        for field, value in (
            ("currentBalance", balance),
            ("interestRate", rate),
            ("minimumPayment", minimum),
        ):
            if value is None:
                raise InvalidInputError(f"Debt {debt_id} is missing {field}.")

        promo_rate = _pick(record, "promotionalRate", "promotional_rate")
        promo_end = _pick(record, "promotionalEndMonth", "promotional_end_month")
        deferred = _pick(record, "hasDeferredInterest", "has_deferred_interest", "deferredInterest")

        return cls(
            id=str(debt_id),
            name=str(_pick(record, "name") or debt_id),
            type=DebtType.parse(_pick(record, "type") or DebtType.OTHER.value),
            current_balance=_as_cents(balance, "currentBalance"),
            interest_rate=_as_rate(rate, "interestRate"),
            minimum_payment=_as_cents(minimum, "minimumPayment"),
            promotional_rate=None if promo_rate is None else _as_rate(promo_rate, "promotionalRate"),
            promotional_end_month=None if promo_end is None else _as_cents(promo_end, "promotionalEndMonth"),
            has_deferred_interest=False if deferred is None else _as_bool(deferred),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "currentBalance": self.current_balance,
            "interestRate": self.interest_rate,
            "minimumPayment": self.minimum_payment,
            "promotionalRate": self.promotional_rate,
            "promotionalEndMonth": self.promotional_end_month,
            "hasDeferredInterest": self.has_deferred_interest,
        }


__all__ = ["Debt", "DebtType", "DeferredInterestPolicy", "PayoffStrategy", "PlanScope"]
