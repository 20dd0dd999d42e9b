"""Tests for fallback interest-rate and minimum-payment estimation."""

from __future__ import annotations

import pytest

from debtpath.errors import InvalidInputError
from debtpath.services.estimation import (
    enrich_record,
    enrich_records,
    estimate_interest_rate,
    estimate_minimum_payment,
    is_debt_account,
    level_payment,
)


class TestInterestRate:
    def test_known_rate_wins(self):
        assert estimate_interest_rate({"type": "credit_card", "interestRate": 0.0499}) == 0.0499

    def test_provider_aprs_are_percentages(self):
        record = {"type": "credit_card", "rawData": {"aprs": [{"apr_percentage": 24.99}]}}

        assert estimate_interest_rate(record) == pytest.approx(0.2499)

    def test_provider_apr_percentage(self):
        record = {"type": "credit_card", "rawData": {"apr_percentage": 18}}

        assert estimate_interest_rate(record) == pytest.approx(0.18)

    @pytest.mark.parametrize(
        ("debt_type", "expected"),
        [
            ("credit_card", 0.2099),
            ("mortgage", 0.0699),
            ("student_loan", 0.0549),
            ("medical_debt", 0.0),
            ("liability", 0.0999),
            ("loan", 0.1099),
        ],
    )
    def test_fallback_by_type(self, debt_type, expected):
        assert estimate_interest_rate({"type": debt_type}) == expected


class TestMinimumPayment:
    def test_known_minimum_wins(self):
        assert estimate_minimum_payment({"type": "credit_card", "minimumPayment": 1234}) == 1234

    def test_provider_minimum(self):
        record = {"type": "credit_card", "rawData": {"minimum_payment": 4200}}

        assert estimate_minimum_payment(record) == 4200

    def test_credit_card_has_twenty_five_dollar_floor(self):
        assert estimate_minimum_payment({"type": "credit_card", "currentBalance": 100_000}) == 2_500
        assert estimate_minimum_payment({"type": "credit_card", "currentBalance": 500_000}) == 10_000

    def test_medical_debt_has_fifty_dollar_floor(self):
        assert estimate_minimum_payment({"type": "medical_debt", "currentBalance": 100_000}) == 5_000

    def test_line_of_credit_is_interest_only(self):
        record = {"type": "line_of_credit", "currentBalance": 120_000, "interestRate": 0.12}

        assert estimate_minimum_payment(record) == 1_200

    def test_installment_loan_uses_ten_year_amortization(self):
        record = {"type": "auto_loan", "currentBalance": 1_200_000, "interestRate": 0.06}

        payment = estimate_minimum_payment(record)

        assert payment == level_payment(1_200_000, 0.06, 120)
        assert payment > 1_200_000 // 120

    def test_zero_rate_level_payment(self):
        assert level_payment(100_000, 0.0, 120) == 833

    def test_malformed_known_minimum(self):
        with pytest.raises(InvalidInputError, match="malformed minimumPayment"):
            estimate_minimum_payment({"id": "c", "type": "credit_card", "minimumPayment": "n/a"})


class TestEnrichment:
    def test_negative_balance_is_owed_amount(self):
        enriched = enrich_record({"id": "1", "type": "credit_card", "currentBalance": -250_000})

        assert enriched["currentBalance"] == 250_000
        assert enriched["interestRate"] == 0.2099
        assert enriched["minimumPayment"] == 5_000

    def test_filters_non_debt_inactive_and_zero_balance(self):
        records = [
            {"id": "checking", "type": "checking", "currentBalance": 50_000},
            {"id": "closed", "type": "credit_card", "status": "closed", "currentBalance": 1_000},
            {"id": "empty", "type": "credit_card", "currentBalance": 0},
            {"id": "card", "type": "credit_card", "currentBalance": -80_000},
        ]

        enriched = enrich_records(records)

        assert [r["id"] for r in enriched] == ["card"]

    def test_is_debt_account(self):
        assert is_debt_account({"type": "mortgage"})
        assert not is_debt_account({"type": "savings"})
