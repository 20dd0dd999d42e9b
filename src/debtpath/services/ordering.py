"""Repayment priority ordering for avalanche and snowball strategies."""

from __future__ import annotations

from typing import Iterable

from ..errors import InvalidInputError
from ..models.debt import Debt, PayoffStrategy


def effective_rate(debt: Debt, current_month: int) -> float:
    """APR in force ``current_month`` months after the simulation start."""

    return debt.rate_at(current_month)


def _avalanche_key(debt: Debt, current_month: int) -> tuple:
    # Highest effective rate, then largest balance, then id.
    return (-effective_rate(debt, current_month), -debt.current_balance, debt.id)


def _snowball_key(debt: Debt, current_month: int) -> tuple:
    # Smallest balance, then highest effective rate, then id.
    return (debt.current_balance, -effective_rate(debt, current_month), debt.id)


def order_debts(
    active_debts: Iterable[Debt], strategy: PayoffStrategy | str, current_month: int
) -> list[str]:
    """Return debt ids in the order extra payments should be applied.

    The ordering is total: ties always fall through to the debt id so two
    runs over the same inputs allocate identically.
    """

    try:
        strategy = PayoffStrategy(strategy)
    except ValueError as exc:
        raise InvalidInputError("Invalid debt payoff strategy.") from exc

    if strategy is PayoffStrategy.AVALANCHE:
        key = _avalanche_key
    elif strategy is PayoffStrategy.SNOWBALL:
        key = _snowball_key
    else:  # pragma: no cover - closed enum
        raise ValueError("Invalid debt payoff strategy.")

    ordered = sorted(active_debts, key=lambda d: key(d, current_month))
    return [d.id for d in ordered]


__all__ = ["effective_rate", "order_debts"]
