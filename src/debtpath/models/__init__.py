"""Domain model exports."""

from .debt import Debt, DebtType, DeferredInterestPolicy, PayoffStrategy, PlanScope
from .plan import (
    DebtMonthEntry,
    DebtPayoffPlan,
    DebtResult,
    MonthlySnapshot,
    PayoffRequest,
    PlanSummary,
    SimulationResult,
)

__all__ = [
    "Debt",
    "DebtMonthEntry",
    "DebtPayoffPlan",
    "DebtResult",
    "DebtType",
    "DeferredInterestPolicy",
    "MonthlySnapshot",
    "PayoffRequest",
    "PayoffStrategy",
    "PlanScope",
    "PlanSummary",
    "SimulationResult",
]
