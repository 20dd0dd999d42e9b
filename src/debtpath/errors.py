"""Exceptions raised by the payoff engine."""

from __future__ import annotations


class PayoffError(Exception):
    """Base class for payoff planning failures."""


class InvalidInputError(PayoffError, ValueError):
    """Caller supplied data the engine cannot plan with."""


class NonConvergentSimulationError(PayoffError):
    """A simulation hit the month cap with balances still outstanding."""

    def __init__(self, message: str, *, unpaid_debt_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.unpaid_debt_ids = list(unpaid_debt_ids or [])


__all__ = ["PayoffError", "InvalidInputError", "NonConvergentSimulationError"]
