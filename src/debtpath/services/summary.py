"""Reduce a simulation history into plan summary statistics."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Sequence

from ..dates import add_months
from ..errors import NonConvergentSimulationError
from ..models.debt import Debt
from ..models.plan import DebtResult, MonthlySnapshot, PlanSummary


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def months_to_payoff(history: Sequence[MonthlySnapshot]) -> int:
    """Return the 1-based month of the first debt-free snapshot (0 for an empty history)."""

    if not history:
        return 0
    for snapshot in history:
        if snapshot.is_debt_free:
            return snapshot.month
    last = history[-1]
    unpaid = sorted(debt_id for debt_id, e in last.entries.items() if e.balance > 0)
    raise NonConvergentSimulationError(
        f"Balances remain after {last.month} months.", unpaid_debt_ids=unpaid
    )


def summarize(
    *,
    history: Sequence[MonthlySnapshot],
    debts: Iterable[Debt],
    monthly_payment: int,
    generated_at: date | datetime,
) -> PlanSummary:
    """Build the headline summary for a convergent run."""

    total_debt = sum(d.current_balance for d in debts)
    total_interest = sum(snapshot.total_interest for snapshot in history)
    months = months_to_payoff(history)

    return PlanSummary(
        total_debt=total_debt,
        monthly_payment=monthly_payment,
        months_to_payoff=months,
        total_interest=total_interest,
        total_paid=total_debt + total_interest,
        debt_free_date=add_months(_as_date(generated_at), months),
    )


def summarize_debts(
    *,
    history: Sequence[MonthlySnapshot],
    debts: Iterable[Debt],
    generated_at: date | datetime,
) -> list[DebtResult]:
    """Per-debt totals, ordered by payoff month and then id."""

    start = _as_date(generated_at)
    results: list[DebtResult] = []
    for debt in debts:
        interest_paid = 0
        total_paid = 0
        payoff_month: int | None = 0 if debt.current_balance == 0 else None
        ending_balance = debt.current_balance
        for snapshot in history:
            entry = snapshot.entries.get(debt.id)
            if entry is None:
                continue
            interest_paid += entry.interest
            total_paid += entry.payment
            ending_balance = entry.balance
            if payoff_month is None and entry.balance == 0:
                payoff_month = snapshot.month

        results.append(
            DebtResult(
                debt_id=debt.id,
                name=debt.name,
                type=debt.type.value,
                starting_balance=debt.current_balance,
                ending_balance=ending_balance,
                interest_paid=interest_paid,
                total_paid=total_paid,
                payoff_month=payoff_month,
                payoff_date=add_months(start, payoff_month) if payoff_month is not None else None,
            )
        )

    # Unpaid debts (payoff_month None) sort last.
    results.sort(
        key=lambda r: (r.payoff_month is None, r.payoff_month or 0, r.debt_id)
    )
    return results


__all__ = ["months_to_payoff", "summarize", "summarize_debts"]
