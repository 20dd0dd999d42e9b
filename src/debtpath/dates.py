"""Calendar-month arithmetic."""

from __future__ import annotations

import calendar
from datetime import date


def add_months(start: date, months: int) -> date:
    """Return ``start`` shifted by whole calendar months, clamping the day.

    Jan 31 + 1 month is Feb 28 (or 29), never early March.
    """

    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


__all__ = ["add_months"]
