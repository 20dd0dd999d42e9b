"""Plan generation across scopes, budget scenarios, and strategies."""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from ..config import DEFAULT_MINIMUM_BUFFER, PlannerSettings
from ..errors import InvalidInputError
from ..models.debt import Debt, DebtType, PayoffStrategy, PlanScope
from ..models.plan import DebtPayoffPlan, PayoffRequest
from .amortization import simulate
from .summary import summarize, summarize_debts

logger = logging.getLogger("debtpath.planner")

STRATEGIES: tuple[PayoffStrategy, ...] = (PayoffStrategy.AVALANCHE, PayoffStrategy.SNOWBALL)


@dataclass(frozen=True, slots=True)
class BudgetScenario:
    """One monthly budget to simulate a scope under."""

    monthly_payment: int
    minimum_total: int
    optimized: bool

    @property
    def extra_payment(self) -> int:
        return max(self.monthly_payment - self.minimum_total, 0)


def partition_scopes(debts: Sequence[Debt]) -> dict[PlanScope, list[Debt]]:
    """Split debts into consumer (no mortgages) and all; empty scopes are omitted."""

    scopes: dict[PlanScope, list[Debt]] = {}
    consumer = [d for d in debts if d.type is not DebtType.MORTGAGE]
    if consumer:
        scopes[PlanScope.CONSUMER] = consumer
    else:
        logger.info("No consumer debts; skipping consumer scope")
    if debts:
        scopes[PlanScope.ALL] = list(debts)
    return scopes


def compute_scenarios(
    debts: Sequence[Debt],
    monthly_payment_budget: int | None,
    *,
    minimum_buffer: float = DEFAULT_MINIMUM_BUFFER,
) -> list[BudgetScenario]:
    """Return the minimum scenario and, when the budget allows, the optimized one."""

    minimum_total = sum(d.minimum_payment for d in debts)

    if monthly_payment_budget is None:
        buffered = Decimal(minimum_total) * Decimal(str(minimum_buffer))
        baseline = int(buffered.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return [BudgetScenario(baseline, minimum_total, optimized=False)]

    scenarios = [BudgetScenario(minimum_total, minimum_total, optimized=False)]
    optimized = max(monthly_payment_budget, minimum_total)
    if optimized > minimum_total:
        scenarios.append(BudgetScenario(optimized, minimum_total, optimized=True))
    else:
        logger.info(
            "Monthly budget does not exceed minimum payments; optimized scenario skipped",
            extra={"budget": monthly_payment_budget, "minimum_total": minimum_total},
        )
    return scenarios


def _validate(
    *, debts: Sequence[Debt], organization_id: str, account_id: str, profile_owner: str
) -> None:
    for field, value in (
        ("organization_id", organization_id),
        ("account_id", account_id),
        ("profile_owner", profile_owner),
    ):
        if not value or not str(value).strip():
            raise InvalidInputError(f"{field} is required.")
    if not debts:
        raise InvalidInputError("At least one debt is required to generate payoff plans.")
    seen: set[str] = set()
    for debt in debts:
        if debt.id in seen:
            raise InvalidInputError(f"Duplicate debt id: {debt.id}")
        seen.add(debt.id)


def _build_plan(
    *,
    debts: list[Debt],
    scope: PlanScope,
    scenario: BudgetScenario,
    strategy: PayoffStrategy,
    settings: PlannerSettings,
    organization_id: str,
    account_id: str,
    profile_owner: str,
    now: datetime,
) -> DebtPayoffPlan | None:
    result = simulate(
        debts=debts,
        monthly_budget=scenario.monthly_payment,
        strategy=strategy,
        max_months=settings.max_months,
        deferred_interest_policy=settings.deferred_interest_policy,
    )
    if not result.convergent:
        unpaid = result.unpaid_debt_ids
        names = {d.id: d.name for d in debts}
        logger.warning(
            "Payoff simulation did not converge; dropping plan variant",
            extra={
                "strategy": strategy.value,
                "scope": scope.value,
                "optimized": scenario.optimized,
                "monthly_payment": scenario.monthly_payment,
                "max_months": settings.max_months,
                "unpaid_debts": [f"{debt_id} ({names[debt_id]})" for debt_id in unpaid],
            },
        )
        return None

    return DebtPayoffPlan(
        plan_id=f"plan_{uuid.uuid4().hex}",
        name=strategy.label,
        strategy=strategy,
        scope=scope,
        optimized=scenario.optimized,
        organization_id=organization_id,
        account_id=account_id,
        profile_owner=profile_owner,
        monthly_payment=scenario.monthly_payment,
        extra_payment=scenario.extra_payment,
        debts=summarize_debts(history=result.history, debts=debts, generated_at=now),
        summary=summarize(
            history=result.history,
            debts=debts,
            monthly_payment=scenario.monthly_payment,
            generated_at=now,
        ),
        schedule=result.history,
        created_at=now,
    )


def generate_plans(
    *,
    debts: Iterable[Debt],
    organization_id: str,
    account_id: str,
    profile_owner: str,
    monthly_payment_budget: int | None = None,
    settings: PlannerSettings | None = None,
    now: datetime | None = None,
) -> list[DebtPayoffPlan]:
    """Generate up to eight plans: scope x budget scenario x strategy.

    Invalid input raises :class:`InvalidInputError` before anything is
    simulated. Variants that hit the month cap are dropped with a warning so
    the remaining plans are still returned.
    """

    debts = list(debts)
    _validate(
        debts=debts,
        organization_id=organization_id,
        account_id=account_id,
        profile_owner=profile_owner,
    )
    if monthly_payment_budget is not None and monthly_payment_budget < 0:
        raise InvalidInputError("monthly_payment_budget cannot be negative.")

    settings = settings or PlannerSettings()
    now = now or datetime.now(timezone.utc)

    scopes = partition_scopes(debts)
    logger.info(
        "Generating payoff plans",
        extra={
            "organization_id": organization_id,
            "debt_count": len(debts),
            "scopes": [scope.value for scope in scopes],
            "budget": monthly_payment_budget,
        },
    )

    plans: list[DebtPayoffPlan] = []
    for scope, scoped_debts in scopes.items():
        for scenario in compute_scenarios(
            scoped_debts, monthly_payment_budget, minimum_buffer=settings.minimum_buffer
        ):
            for strategy in STRATEGIES:
                plan = _build_plan(
                    debts=copy.deepcopy(scoped_debts),
                    scope=scope,
                    scenario=scenario,
                    strategy=strategy,
                    settings=settings,
                    organization_id=organization_id,
                    account_id=account_id,
                    profile_owner=profile_owner,
                    now=now,
                )
                if plan is not None:
                    plans.append(plan)

    return plans


def generate_plans_for_request(
    request: PayoffRequest,
    *,
    settings: PlannerSettings | None = None,
    now: datetime | None = None,
) -> list[DebtPayoffPlan]:
    """Convenience wrapper taking a parsed :class:`PayoffRequest`."""

    return generate_plans(
        debts=request.debts,
        organization_id=request.organization_id,
        account_id=request.account_id,
        profile_owner=request.profile_owner,
        monthly_payment_budget=request.monthly_payment_budget,
        settings=settings,
        now=now,
    )


__all__ = [
    "BudgetScenario",
    "compute_scenarios",
    "generate_plans",
    "generate_plans_for_request",
    "partition_scopes",
]
