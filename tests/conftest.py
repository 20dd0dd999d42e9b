"""Pytest configuration and shared fixtures for DebtPath tests.

Factories build immutable ``Debt`` inputs with sensible defaults so each test
only spells out the fields it cares about. Environment variables are pinned
per test so configuration never leaks in from the developer's shell.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from debtpath.models import Debt, DebtType

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def _make_debt(
    debt_id: str = "card",
    *,
    name: str | None = None,
    type: DebtType = DebtType.CREDIT_CARD,
    balance: int = 100_000,
    rate: float = 0.20,
    minimum: int = 5_000,
    promotional_rate: float | None = None,
    promotional_end_month: int | None = None,
    deferred: bool = False,
) -> Debt:
    return Debt(
        id=debt_id,
        name=name or debt_id.title(),
        type=type,
        current_balance=balance,
        interest_rate=rate,
        minimum_payment=minimum,
        promotional_rate=promotional_rate,
        promotional_end_month=promotional_end_month,
        has_deferred_interest=deferred,
    )


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point configuration at a temp data dir and quiet console logging."""

    monkeypatch.setenv("DEBTPATH_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("DEBTPATH_DEV_MODE", "0")
    for name in (
        "DEBTPATH_MAX_MONTHS",
        "DEBTPATH_MINIMUM_BUFFER",
        "DEBTPATH_DEFERRED_INTEREST_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    package_logger = logging.getLogger("debtpath")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def debt_factory():
    """Return a callable that builds ``Debt`` objects."""

    return _make_debt


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def scenario_a_debts(debt_factory) -> list[Debt]:
    """$1,000 at 20% ($50 min) and $2,000 at 10% ($60 min)."""

    return [
        debt_factory("A", balance=100_000, rate=0.20, minimum=5_000),
        debt_factory("B", type=DebtType.LOAN, balance=200_000, rate=0.10, minimum=6_000),
    ]


@pytest.fixture
def household_debts(debt_factory) -> list[Debt]:
    """A credit card plus a mortgage that both amortize well within the month cap."""

    return [
        debt_factory("card", name="Visa", balance=300_000, rate=0.20, minimum=9_000),
        debt_factory(
            "house",
            name="Home Mortgage",
            type=DebtType.MORTGAGE,
            balance=20_000_000,
            rate=0.065,
            minimum=150_000,
        ),
    ]
