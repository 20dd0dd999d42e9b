"""Command line front end for the payoff planner."""

from __future__ import annotations

import json
from pathlib import Path

import click

from .config import BaseConfig, PlannerSettings
from .errors import PayoffError
from .logging_config import get_logger, setup_logging
from .models.plan import DebtPayoffPlan, PayoffRequest
from .services.estimation import enrich_records
from .services.export_csv import export_plans_csv, export_schedule_csv
from .services.importers import load_request_csv, load_request_json, normalize_frame, records_from_frame
from .services.planner import generate_plans_for_request

logger = get_logger("cli")


def _dollars(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def _load_request(
    input_path: Path, *, organization_id: str, account_id: str, profile_owner: str
) -> PayoffRequest:
    if input_path.suffix.lower() == ".csv":
        return load_request_csv(
            file_path=input_path,
            organization_id=organization_id,
            account_id=account_id,
            profile_owner=profile_owner,
        )
    return load_request_json(file_path=input_path)


def _render_table(plans: list[DebtPayoffPlan]) -> str:
    header = f"{'scope':<9} {'strategy':<10} {'scenario':<10} {'monthly':>12} {'months':>7} {'interest':>14}  debt-free"
    lines = [header, "-" * len(header)]
    for plan in plans:
        summary = plan.summary
        lines.append(
            f"{plan.scope.value:<9} {plan.strategy.value:<10} "
            f"{'optimized' if plan.optimized else 'minimum':<10} "
            f"{_dollars(summary.monthly_payment):>12} {summary.months_to_payoff:>7} "
            f"{_dollars(summary.total_interest):>14}  {summary.debt_free_date.isoformat()}"
        )
    return "\n".join(lines)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Debt payoff planning: compare avalanche and snowball plans."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("plan")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--budget", type=int, default=None, help="Monthly payment budget in cents")
@click.option("--org", "organization_id", default="local", show_default=True)
@click.option("--account", "account_id", default="local", show_default=True)
@click.option("--owner", "profile_owner", default="local", show_default=True)
@click.option("--max-months", type=int, default=None, help="Override the simulation month cap")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print plans as JSON")
@click.option(
    "--export-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write plan and schedule CSVs to this directory",
)
@click.pass_obj
def plan_command(
    config: BaseConfig,
    input_path: Path,
    budget: int | None,
    organization_id: str,
    account_id: str,
    profile_owner: str,
    max_months: int | None,
    as_json: bool,
    export_dir: Path | None,
) -> None:
    """Generate payoff plans for the debts in INPUT_PATH (JSON request or CSV)."""

    try:
        request = _load_request(
            input_path,
            organization_id=organization_id,
            account_id=account_id,
            profile_owner=profile_owner,
        )
        if budget is not None:
            request.monthly_payment_budget = budget
        settings = config.planner_settings()
        if max_months is not None:
            settings = PlannerSettings(
                max_months=max_months,
                minimum_buffer=settings.minimum_buffer,
                deferred_interest_policy=settings.deferred_interest_policy,
            )
        plans = generate_plans_for_request(request, settings=settings)
    except (PayoffError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps([p.to_dict(include_schedule=False) for p in plans], indent=2))
    elif plans:
        click.echo(_render_table(plans))
    else:
        click.echo("No convergent payoff plans; increase the monthly budget.")

    if export_dir is not None:
        written = export_plans_csv(plans=plans, output_path=export_dir / "plans.csv")
        for plan in plans:
            export_schedule_csv(
                plan=plan,
                output_path=export_dir
                / f"schedule_{plan.scope.value}_{plan.strategy.value}"
                f"_{'optimized' if plan.optimized else 'minimum'}.csv",
            )
        logger.info("Exported plans", extra={"path": str(written), "plan_count": len(plans)})
        click.echo(f"Export written: {export_dir}")


@cli.command("estimate")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def estimate_command(input_path: Path) -> None:
    """Print debts from INPUT_PATH with fallback rates and minimum payments filled in."""

    try:
        if input_path.suffix.lower() == ".csv":
            records = records_from_frame(normalize_frame(file_path=input_path))
        else:
            data = json.loads(input_path.read_text(encoding="utf-8"))
            records = data.get("debts", []) if isinstance(data, dict) else data
        enriched = enrich_records(records)
    except (OSError, ValueError, PayoffError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(json.dumps(enriched, indent=2, default=str))


def main() -> None:  # pragma: no cover - console entry point
    cli()


__all__ = ["cli", "main"]
