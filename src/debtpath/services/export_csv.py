"""CSV export helpers for payoff plans."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from ..dates import add_months
from ..models.plan import DebtPayoffPlan

PLAN_HEADERS = [
    "plan_id",
    "strategy",
    "scope",
    "optimized",
    "monthly_payment",
    "extra_payment",
    "total_debt",
    "total_interest",
    "total_paid",
    "months_to_payoff",
    "debt_free_date",
]

SCHEDULE_HEADERS = [
    "month",
    "date",
    "debt_id",
    "payment",
    "principal",
    "interest",
    "remaining_balance",
]


def export_plans_csv(*, plans: Iterable[DebtPayoffPlan], output_path: Path) -> Path:
    """Write one summary row per plan to ``output_path`` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=PLAN_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for plan in plans:
            summary = plan.summary
            writer.writerow(
                {
                    "plan_id": plan.plan_id,
                    "strategy": plan.strategy.value,
                    "scope": plan.scope.value,
                    "optimized": str(plan.optimized).lower(),
                    "monthly_payment": plan.monthly_payment,
                    "extra_payment": plan.extra_payment,
                    "total_debt": summary.total_debt,
                    "total_interest": summary.total_interest,
                    "total_paid": summary.total_paid,
                    "months_to_payoff": summary.months_to_payoff,
                    "debt_free_date": summary.debt_free_date.isoformat(),
                }
            )
    return output_path


def export_schedule_csv(*, plan: DebtPayoffPlan, output_path: Path) -> Path:
    """Write the plan's month-by-month schedule, one row per (month, debt)."""

    start = plan.created_at.date()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SCHEDULE_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for snapshot in plan.schedule:
            due = add_months(start, snapshot.month).isoformat()
            for debt_id, entry in snapshot.entries.items():
                writer.writerow(
                    {
                        "month": snapshot.month,
                        "date": due,
                        "debt_id": debt_id,
                        "payment": entry.payment,
                        "principal": entry.principal,
                        "interest": entry.interest,
                        "remaining_balance": entry.balance,
                    }
                )
    return output_path


__all__ = ["export_plans_csv", "export_schedule_csv"]
