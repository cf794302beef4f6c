from __future__ import annotations

import logging
from datetime import date
from typing import Any

from affordability.errors import FetchError
from affordability.models import IncomeRecord
from affordability.utils.dates import first_of_month, months_back_first, parse_month_name

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_YEARS = 10


def income_cutoff(today: date | None = None, years: int = DEFAULT_LOOKBACK_YEARS) -> date:
    """First day of the month `years` years before today."""
    return months_back_first(today or date.today(), years)


def resolve_income_cutoff(
    start_date: date,
    *,
    from_start: bool = False,
    lookback_years: int = DEFAULT_LOOKBACK_YEARS,
    today: date | None = None,
) -> date:
    """
    Pick the wage cutoff for a run.

    The default is the fixed lookback, which ignores the configured start date.
    A mismatch is logged so it does not pass silently.
    """
    if from_start:
        return first_of_month(start_date)
    cutoff = income_cutoff(today, years=lookback_years)
    if first_of_month(start_date) != cutoff:
        logger.warning(
            "Income series cut at %s (%d-year lookback), not at start date %s; "
            "use --income-from-start to anchor it to the start date",
            cutoff.isoformat(),
            lookback_years,
            start_date.isoformat(),
        )
    return cutoff


def _series_data(payload: dict[str, Any]) -> list[dict[str, Any]]:
    try:
        return list(payload["Results"]["series"][0]["data"])
    except (KeyError, IndexError, TypeError) as e:
        raise FetchError("BLS payload is missing Results.series[0].data") from e


def normalize_weekly_income(payload: dict[str, Any], cutoff: date | None = None) -> list[IncomeRecord]:
    """
    Reshape a BLS weekly-earnings payload into ascending monthly IncomeRecords.

    The source data is most-recent-first; it is reversed, dated "{year}-{periodName}-01",
    and anything before `cutoff` (default: first of month 10 years ago) is dropped.
    An unrecognised periodName raises ValueError.
    """
    cutoff = cutoff or income_cutoff()
    out: list[IncomeRecord] = []
    for row in reversed(_series_data(payload)):
        d = parse_month_name(row["year"], row["periodName"])
        if d < cutoff:
            continue
        out.append(IncomeRecord(date=d.isoformat(), value=row["value"], footnotes=list(row.get("footnotes") or [])))

    logger.debug("Normalized %d income months from %s", len(out), cutoff.isoformat())
    return out
