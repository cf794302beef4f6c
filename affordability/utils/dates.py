"""
Date helpers for monthly economic series.
"""
from __future__ import annotations

from datetime import date, datetime


def parse_ymd(s: str) -> date:
    """Parse YYYY-MM-DD string to date. Raises ValueError on failure."""
    return date.fromisoformat(s)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def months_back_first(today: date, years: int) -> date:
    """First day of the month exactly `years` years before `today`."""
    return date(today.year - years, today.month, 1)


def parse_month_name(year: str | int, month_name: str) -> date:
    """
    Parse a BLS (year, periodName) pair like ("2023", "November") to 2023-11-01.

    Accepts full or abbreviated English month names. Raises ValueError otherwise
    (e.g. the "Annual" pseudo-period).
    """
    raw = f"{year}-{str(month_name).strip()}-01"
    for fmt in ("%Y-%B-%d", "%Y-%b-%d"):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised month in BLS period: {raw!r}")
