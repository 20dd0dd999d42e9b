"""Load payoff requests from JSON documents or CSV debt lists."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import InvalidInputError
from ..models.plan import PayoffRequest
from .estimation import enrich_records


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding)
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


_CSV_COLUMNS = {
    "id": "id",
    "name": "name",
    "type": "type",
    "status": "status",
    "current_balance": "currentBalance",
    "currentbalance": "currentBalance",
    "balance": "currentBalance",
    "interest_rate": "interestRate",
    "interestrate": "interestRate",
    "minimum_payment": "minimumPayment",
    "minimumpayment": "minimumPayment",
    "promotional_rate": "promotionalRate",
    "promotionalrate": "promotionalRate",
    "promotional_end_month": "promotionalEndMonth",
    "promotionalendmonth": "promotionalEndMonth",
    "has_deferred_interest": "hasDeferredInterest",
    "hasdeferredinterest": "hasDeferredInterest",
}


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if hasattr(value, "item"):
        # numpy scalar -> python scalar
        return value.item()
    return value


def records_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert CSV rows into camelCase debt records, ignoring unknown columns."""

    if "id" not in frame.columns:
        raise InvalidInputError("CSV debt file needs an 'id' column.")
    records: list[dict[str, Any]] = []
    for row in frame.to_dict(orient="records"):
        record: dict[str, Any] = {}
        for column, value in row.items():
            key = _CSV_COLUMNS.get(column)
            cleaned = _clean(value)
            if key and cleaned is not None:
                record[key] = cleaned
        if "id" in record:
            record["id"] = str(record["id"])
        records.append(record)
    return records


def load_request_json(*, file_path: Path, estimate: bool = True) -> PayoffRequest:
    """Parse a JSON request document; missing rates and minimums are estimated."""

    try:
        data = json.loads(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidInputError(f"Could not read request file {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidInputError("Request document must be a JSON object.")
    if estimate and isinstance(data.get("debts"), list):
        data = {**data, "debts": enrich_records(data["debts"])}
    return PayoffRequest.from_dict(data)


def load_request_csv(
    *,
    file_path: Path,
    organization_id: str,
    account_id: str,
    profile_owner: str,
    monthly_payment_budget: int | None = None,
    estimate: bool = True,
) -> PayoffRequest:
    """Build a request from a CSV debt list plus caller-supplied identifiers."""

    try:
        frame = normalize_frame(file_path=Path(file_path))
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise InvalidInputError(f"Could not read debt CSV {file_path}: {exc}") from exc
    records = records_from_frame(frame)
    if estimate:
        records = enrich_records(records)
    return PayoffRequest.from_dict(
        {
            "organizationId": organization_id,
            "accountId": account_id,
            "profileOwner": profile_owner,
            "monthlyPaymentBudget": monthly_payment_budget,
            "debts": records,
        }
    )


__all__ = ["load_request_csv", "load_request_json", "normalize_frame", "records_from_frame"]
