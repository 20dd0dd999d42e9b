"""Simulation history and payoff plan DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping

from ..dates import add_months
from ..errors import InvalidInputError
from .debt import Debt, PayoffStrategy, PlanScope


@dataclass(frozen=True, slots=True)
class DebtMonthEntry:
    """One debt's activity within a simulated month (all cents)."""

    balance: int
    interest: int
    payment: int

    @property
    def principal(self) -> int:
        return max(self.payment - self.interest, 0)


@dataclass(frozen=True, slots=True)
class MonthlySnapshot:
    """State of every debt after the payments of ``month`` (1-based)."""

    month: int
    entries: Mapping[str, DebtMonthEntry]

    @property
    def total_payment(self) -> int:
        return sum(e.payment for e in self.entries.values())

    @property
    def total_interest(self) -> int:
        return sum(e.interest for e in self.entries.values())

    @property
    def total_balance(self) -> int:
        return sum(e.balance for e in self.entries.values())

    @property
    def debts_remaining(self) -> int:
        return sum(1 for e in self.entries.values() if e.balance > 0)

    @property
    def is_debt_free(self) -> bool:
        return all(e.balance == 0 for e in self.entries.values())


@dataclass(slots=True)
class SimulationResult:
    history: list[MonthlySnapshot]
    convergent: bool
    final_balances: dict[str, int] = field(default_factory=dict)

    @property
    def unpaid_debt_ids(self) -> list[str]:
        return sorted(debt_id for debt_id, balance in self.final_balances.items() if balance > 0)


@dataclass(frozen=True, slots=True)
class PlanSummary:
    """Comparable headline numbers for a payoff plan."""

    total_debt: int
    monthly_payment: int
    months_to_payoff: int
    total_interest: int
    total_paid: int
    debt_free_date: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDebt": self.total_debt,
            "monthlyPayment": self.monthly_payment,
            "monthsToPayoff": self.months_to_payoff,
            "totalInterest": self.total_interest,
            "totalPaid": self.total_paid,
            "debtFreeDate": self.debt_free_date.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class DebtResult:
    """Post-simulation detail for one debt in a plan."""

    debt_id: str
    name: str
    type: str
    starting_balance: int
    ending_balance: int
    interest_paid: int
    total_paid: int
    payoff_month: int | None
    payoff_date: date | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "debtId": self.debt_id,
            "name": self.name,
            "type": self.type,
            "startingBalance": self.starting_balance,
            "endingBalance": self.ending_balance,
            "interestPaid": self.interest_paid,
            "totalPaid": self.total_paid,
            "payoffMonth": self.payoff_month,
            "payoffDate": self.payoff_date.isoformat() if self.payoff_date else None,
        }


@dataclass(slots=True)
class DebtPayoffPlan:
    plan_id: str
    name: str
    strategy: PayoffStrategy
    scope: PlanScope
    optimized: bool
    organization_id: str
    account_id: str
    profile_owner: str
    monthly_payment: int
    extra_payment: int
    debts: list[DebtResult]
    summary: PlanSummary
    schedule: list[MonthlySnapshot]
    created_at: datetime

    def to_dict(self, *, include_schedule: bool = True) -> dict[str, Any]:
        """Return the JSON shape consumed by the HTTP layer."""

        payload: dict[str, Any] = {
            "planId": self.plan_id,
            "name": self.name,
            "strategy": self.strategy.value,
            "scope": self.scope.value,
            "optimized": self.optimized,
            "organizationId": self.organization_id,
            "accountId": self.account_id,
            "profileOwner": self.profile_owner,
            "monthlyPayment": self.monthly_payment,
            "extraPayment": self.extra_payment,
            "debts": [d.to_dict() for d in self.debts],
            "summary": self.summary.to_dict(),
            "createdAt": self.created_at.isoformat(),
        }
        if include_schedule:
            start = self.created_at.date()
            names = {d.debt_id: d.name for d in self.debts}
            payload["schedule"] = [
                {
                    "month": snap.month,
                    "date": add_months(start, snap.month).isoformat(),
                    "totalPayment": snap.total_payment,
                    "debtsRemaining": snap.debts_remaining,
                    "payments": [
                        {
                            "debtId": debt_id,
                            "debtName": names.get(debt_id, debt_id),
                            "payment": entry.payment,
                            "principal": entry.principal,
                            "interest": entry.interest,
                            "remainingBalance": entry.balance,
                        }
                        for debt_id, entry in snap.entries.items()
                    ],
                }
                for snap in self.schedule
            ]
        return payload


def _require_text(data: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value)
    raise InvalidInputError(f"{keys[0]} is required.")


@dataclass(slots=True)
class PayoffRequest:
    """Everything the planner needs for one invocation.

    The identifiers are passed through to the generated plans untouched.
    """

    organization_id: str
    account_id: str
    profile_owner: str
    debts: list[Debt]
    monthly_payment_budget: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PayoffRequest":
        records = data.get("debts")
        if not isinstance(records, list):
            raise InvalidInputError("debts must be a list of debt records.")
        budget = data.get("monthlyPaymentBudget", data.get("monthly_payment_budget"))
        if budget is not None:
            try:
                budget = int(round(float(budget)))
            except (TypeError, ValueError, OverflowError) as exc:
                raise InvalidInputError(
                    f"monthlyPaymentBudget must be cents, got {budget!r}"
                ) from exc
        return cls(
            organization_id=_require_text(data, "organizationId", "organization_id"),
            account_id=_require_text(data, "accountId", "account_id"),
            profile_owner=_require_text(data, "profileOwner", "profile_owner"),
            debts=[Debt.from_record(r) for r in records],
            monthly_payment_budget=budget,
        )
