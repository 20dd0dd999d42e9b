"""Tests for debt inputs, snapshots, and request parsing."""

from __future__ import annotations

from datetime import date

import pytest

from debtpath.dates import add_months
from debtpath.errors import InvalidInputError
from debtpath.models import (
    Debt,
    DebtMonthEntry,
    DebtType,
    MonthlySnapshot,
    PayoffRequest,
    PayoffStrategy,
)


class TestDebt:
    def test_from_snake_case_record(self):
        debt = Debt.from_record(
            {
                "debt_id": 7,
                "type": "liability",
                "current_balance": "1500.4",
                "interest_rate": "0.18",
                "minimum_payment": 2500,
                "has_deferred_interest": "yes",
            }
        )

        assert debt.id == "7"
        assert debt.name == "7"
        assert debt.type is DebtType.OTHER
        assert debt.current_balance == 1500
        assert debt.interest_rate == 0.18
        assert debt.has_deferred_interest is True
        assert not debt.has_promotion

    def test_promotion_window(self, debt_factory):
        debt = debt_factory(rate=0.24, promotional_rate=0.0, promotional_end_month=2)

        assert debt.rate_at(0) == 0.0
        assert debt.rate_at(1) == 0.0
        assert debt.rate_at(2) == 0.24

    def test_zero_length_promotion_is_ignored(self, debt_factory):
        debt = debt_factory(rate=0.24, promotional_rate=0.0, promotional_end_month=0)

        assert not debt.has_promotion
        assert debt.rate_at(0) == 0.24

    def test_rejects_negative_balance(self, debt_factory):
        with pytest.raises(InvalidInputError, match="negative balance"):
            debt_factory(balance=-1)

    def test_unknown_type(self):
        with pytest.raises(InvalidInputError, match="Unknown debt type"):
            DebtType.parse("timeshare")

    def test_round_trips_to_camel_case(self, debt_factory):
        record = debt_factory("visa", promotional_rate=0.0, promotional_end_month=6).to_dict()

        assert record["promotionalEndMonth"] == 6
        assert Debt.from_record(record) == debt_factory(
            "visa", promotional_rate=0.0, promotional_end_month=6
        )


def test_strategy_labels():
    assert PayoffStrategy.AVALANCHE.label.startswith("Avalanche")
    assert PayoffStrategy.SNOWBALL.label.startswith("Snowball")


def test_snapshot_totals():
    snapshot = MonthlySnapshot(
        month=1,
        entries={
            "a": DebtMonthEntry(balance=0, interest=100, payment=1_100),
            "b": DebtMonthEntry(balance=5_000, interest=50, payment=1_000),
        },
    )

    assert snapshot.total_payment == 2_100
    assert snapshot.total_interest == 150
    assert snapshot.total_balance == 5_000
    assert snapshot.debts_remaining == 1
    assert not snapshot.is_debt_free
    assert snapshot.entries["b"].principal == 950


class TestPayoffRequest:
    def test_budget_is_rounded_to_cents(self):
        request = PayoffRequest.from_dict(
            {
                "organization_id": "o",
                "account_id": "a",
                "profile_owner": "p",
                "monthly_payment_budget": "12345.6",
                "debts": [],
            }
        )

        assert request.monthly_payment_budget == 12_346
        assert request.debts == []

    def test_debts_must_be_a_list(self):
        with pytest.raises(InvalidInputError, match="debts must be a list"):
            PayoffRequest.from_dict({"organizationId": "o", "debts": "none"})


@pytest.mark.parametrize(
    ("start", "months", "expected"),
    [
        (date(2025, 1, 31), 1, date(2025, 2, 28)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2025, 11, 15), 3, date(2026, 2, 15)),
        (date(2025, 1, 15), 0, date(2025, 1, 15)),
    ],
)
def test_add_months_clamps_day(start, months, expected):
    assert add_months(start, months) == expected


class TestNonFiniteValues:
    def test_infinite_balance(self):
        with pytest.raises(InvalidInputError, match="currentBalance must be a whole number"):
            Debt.from_record(
                {"id": "x", "currentBalance": float("inf"), "interestRate": 0.1, "minimumPayment": 1}
            )

    def test_nan_rate_in_record(self):
        with pytest.raises(InvalidInputError, match="interestRate must be a finite rate"):
            Debt.from_record(
                {"id": "x", "currentBalance": 100, "interestRate": "nan", "minimumPayment": 1}
            )

    def test_nan_rate_on_direct_construction(self, debt_factory):
        with pytest.raises(InvalidInputError, match="non-finite interest rate"):
            debt_factory(rate=float("nan"))

    def test_infinite_budget(self):
        with pytest.raises(InvalidInputError, match="monthlyPaymentBudget"):
            PayoffRequest.from_dict(
                {
                    "organizationId": "o",
                    "accountId": "a",
                    "profileOwner": "p",
                    "monthlyPaymentBudget": float("inf"),
                    "debts": [],
                }
            )
