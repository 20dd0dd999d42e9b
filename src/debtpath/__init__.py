"""DebtPath debt payoff planning engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, PlannerSettings
from .errors import InvalidInputError, NonConvergentSimulationError, PayoffError
from .models import Debt, DebtPayoffPlan, DebtType, PayoffRequest, PayoffStrategy, PlanScope
from .services.planner import generate_plans, generate_plans_for_request

__all__ = [
    "BaseConfig",
    "Debt",
    "DebtPayoffPlan",
    "DebtType",
    "DevConfig",
    "InvalidInputError",
    "NonConvergentSimulationError",
    "PayoffError",
    "PayoffRequest",
    "PayoffStrategy",
    "PlanScope",
    "PlannerSettings",
    "generate_plans",
    "generate_plans_for_request",
]
