"""Month-by-month payoff simulation for a single strategy and budget.

Each month runs four phases in a fixed order:

1. interest accrues on every debt that still carries a balance (promotional
   rates apply inside their window; a lapsed deferred-interest promo adds a
   one-time retroactive charge),
2. minimum payments are applied, capped at each remaining balance,
3. whatever is left of the monthly budget cascades through the debts in
   strategy order, recomputed every month,
4. a snapshot is recorded and the run stops once every balance is zero or
   the month cap is reached.

All amounts are integer cents. Monthly interest is rounded half-up to the
cent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..config import DEFAULT_MAX_MONTHS
from ..errors import InvalidInputError
from ..models.debt import Debt, DeferredInterestPolicy, PayoffStrategy
from ..models.plan import DebtMonthEntry, MonthlySnapshot, SimulationResult
from .ordering import order_debts

logger = logging.getLogger("debtpath.amortization")

_CENT = Decimal("1")
_MONTHS_PER_YEAR = Decimal(12)


def _round_cents(value: Decimal) -> int:
    return int(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def monthly_interest(balance: int, annual_rate: float) -> int:
    """Interest in cents for one month at ``annual_rate`` APR."""

    if balance <= 0 or annual_rate <= 0:
        return 0
    return _round_cents(Decimal(balance) * Decimal(str(annual_rate)) / _MONTHS_PER_YEAR)


@dataclass(slots=True)
class _WorkingDebt:
    """Mutable per-run state; never shared between simulations."""

    debt: Debt
    balance: int
    tracked_deferred: int = 0

    def view(self) -> Debt:
        return replace(self.debt, current_balance=self.balance)

    def retroactive_charge(self, policy: DeferredInterestPolicy) -> int:
        if policy is DeferredInterestPolicy.TRACKED_BALANCE:
            return self.tracked_deferred
        debt = self.debt
        return _round_cents(
            Decimal(debt.current_balance)
            * Decimal(str(debt.interest_rate))
            * Decimal(debt.promotional_end_month or 0)
            / _MONTHS_PER_YEAR
        )


def _clamp_balance(state: _WorkingDebt, value: int, *, month: int) -> int:
    if value < 0:
        logger.warning(
            "Balance computed below zero; clamping",
            extra={"debt_id": state.debt.id, "month": month, "balance": value},
        )
        return 0
    return value


def _accrue_interest(
    state: _WorkingDebt, *, month: int, policy: DeferredInterestPolicy
) -> int:
    debt = state.debt
    offset = month - 1
    charge = monthly_interest(state.balance, debt.rate_at(offset))

    if debt.has_deferred_interest and debt.has_promotion:
        if debt.in_promotion(offset):
            state.tracked_deferred += monthly_interest(state.balance, debt.interest_rate)
        elif offset == debt.promotional_end_month:
            retroactive = state.retroactive_charge(policy)
            charge += retroactive
            logger.debug(
                "Deferred interest applied",
                extra={"debt_id": debt.id, "month": month, "charge": retroactive},
            )

    state.balance += charge
    return charge


def simulate(
    *,
    debts: Iterable[Debt],
    monthly_budget: int,
    strategy: PayoffStrategy | str,
    max_months: int = DEFAULT_MAX_MONTHS,
    deferred_interest_policy: DeferredInterestPolicy = DeferredInterestPolicy.PROMO_START_BALANCE,
) -> SimulationResult:
    """Run the payoff simulation until every balance is zero or ``max_months`` passes.

    ``monthly_budget`` is the total paid across all debts each month. When it
    is below the active minimums the minimums are still paid and no extra is
    allocated.
    """

    try:
        strategy = PayoffStrategy(strategy)
    except ValueError as exc:
        raise InvalidInputError("Invalid debt payoff strategy.") from exc
    if max_months < 1:
        raise InvalidInputError("max_months must be at least 1.")
    if monthly_budget < 0:
        raise InvalidInputError("monthly_budget cannot be negative.")

    working: dict[str, _WorkingDebt] = {}
    for debt in debts:
        if debt.id in working:
            raise InvalidInputError(f"Duplicate debt id: {debt.id}")
        working[debt.id] = _WorkingDebt(debt=debt, balance=debt.current_balance)

    def _final_balances() -> dict[str, int]:
        return {debt_id: state.balance for debt_id, state in working.items()}

    history: list[MonthlySnapshot] = []
    if all(state.balance == 0 for state in working.values()):
        return SimulationResult(history=history, convergent=True, final_balances=_final_balances())

    for month in range(1, max_months + 1):
        interest = {debt_id: 0 for debt_id in working}
        payments = {debt_id: 0 for debt_id in working}

        for debt_id, state in working.items():
            if state.balance > 0:
                interest[debt_id] = _accrue_interest(
                    state, month=month, policy=deferred_interest_policy
                )

        minimums_applied = 0
        for debt_id, state in working.items():
            if state.balance <= 0:
                continue
            payment = min(state.debt.minimum_payment, state.balance)
            state.balance = _clamp_balance(state, state.balance - payment, month=month)
            payments[debt_id] += payment
            minimums_applied += payment

        # Unused minimums (paid-off or nearly paid-off debts) roll into the extra pool.
        extra = max(monthly_budget - minimums_applied, 0)
        if extra > 0:
            active = [state.view() for state in working.values() if state.balance > 0]
            for debt_id in order_debts(active, strategy, month - 1):
                if extra <= 0:
                    break
                state = working[debt_id]
                amount = min(extra, state.balance)
                state.balance = _clamp_balance(state, state.balance - amount, month=month)
                payments[debt_id] += amount
                extra -= amount

        history.append(
            MonthlySnapshot(
                month=month,
                entries={
                    debt_id: DebtMonthEntry(
                        balance=state.balance,
                        interest=interest[debt_id],
                        payment=payments[debt_id],
                    )
                    for debt_id, state in working.items()
                },
            )
        )

        if all(state.balance == 0 for state in working.values()):
            return SimulationResult(
                history=history, convergent=True, final_balances=_final_balances()
            )

    return SimulationResult(history=history, convergent=False, final_balances=_final_balances())


__all__ = ["monthly_interest", "simulate"]
