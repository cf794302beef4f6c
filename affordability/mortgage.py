from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from affordability.errors import AlignmentError
from affordability.models import CostRecord, IncomeRecord, Observation

logger = logging.getLogger(__name__)

LOAN_TERM_MONTHS = 30 * 12
WEEKS_PER_YEAR = 52
# Household income proxy: one full earner plus a 0.4 second earner.
HOUSEHOLD_MULTIPLIER = 1.4
# Case-Shiller index points -> nominal dollar price proxy.
INDEX_TO_PRICE = 1000


@dataclass(frozen=True)
class AlignedMonth:
    date: str
    home_price_index: float
    mortgage_rate: float  # percent, e.g. 6.5
    weekly_income: float


def monthly_payment(principal: float, annual_rate_pct: float, term_months: int = LOAN_TERM_MONTHS) -> float:
    """
    Level payment for a fixed-rate loan.

    payment = P * r / (1 - (1 + r)^-n), r = annual_rate_pct / 100 / 12.
    At r == 0 the loan amortizes linearly (P / n), i.e. no interest.
    """
    r = annual_rate_pct / 100.0 / 12.0
    if r == 0:
        return principal / term_months
    return (principal * r) / (1 - (1 + r) ** (-term_months))


def total_mortgage_cost(principal: float, annual_rate_pct: float, term_months: int = LOAN_TERM_MONTHS) -> float:
    if annual_rate_pct == 0:
        # Exact, so int() truncation can't drop a dollar to float error.
        return float(principal)
    return monthly_payment(principal, annual_rate_pct, term_months) * term_months


def cost_records(month: AlignedMonth) -> tuple[CostRecord, CostRecord]:
    """(single, household) records for one aligned month."""
    schiller_price = month.home_price_index * INDEX_TO_PRICE
    total_cost = total_mortgage_cost(schiller_price, month.mortgage_rate)

    yearly_income = month.weekly_income * WEEKS_PER_YEAR
    household_income = yearly_income * HOUSEHOLD_MULTIPLIER
    if yearly_income <= 0:
        raise ValueError(f"Non-positive income {month.weekly_income!r} on {month.date}; ratio undefined")

    common = dict(
        date=month.date,
        total_cost=int(total_cost),
        schiller_price=int(schiller_price),
        mortgage_rate=round(month.mortgage_rate, 3),
    )
    single = CostRecord(
        type="single",
        income=int(yearly_income),
        income_schiller_index=round(total_cost / yearly_income, 3),
        **common,
    )
    household = CostRecord(
        type="household",
        income=int(household_income),
        income_schiller_index=round(total_cost / household_income, 3),
        **common,
    )
    return single, household


def _obs_frame(obs: Sequence[Observation], col: str) -> pd.DataFrame:
    rows = [{"month": o.date.replace(day=1).isoformat(), "date": o.date.isoformat(), col: o.value} for o in obs]
    df = pd.DataFrame(rows, columns=["month", "date", col])
    df[col] = pd.to_numeric(df[col], errors="coerce")
    # One value per month; later observations win.
    return df.drop_duplicates(subset=["month"], keep="last")


def align_by_date(
    home_prices: Sequence[Observation],
    mortgage_rates: Sequence[Observation],
    income: Sequence[IncomeRecord],
) -> list[AlignedMonth]:
    """
    Match each mortgage month to the home-price and income values of the same month.

    Months without a home-price value are gaps and are skipped. Months without an
    income record are skipped with a warning.
    """
    mort = _obs_frame(mortgage_rates, "mortgage_rate")
    hpi = _obs_frame(home_prices, "home_price_index").drop(columns=["date"])
    inc = pd.DataFrame(
        [{"month": r.month.replace(day=1).isoformat(), "weekly_income": r.value} for r in income],
        columns=["month", "weekly_income"],
    )
    inc["weekly_income"] = pd.to_numeric(inc["weekly_income"], errors="coerce")
    inc = inc.drop_duplicates(subset=["month"], keep="last")

    merged = mort.merge(hpi, on="month", how="left").merge(inc, on="month", how="left")

    out: list[AlignedMonth] = []
    for row in merged.itertuples(index=False):
        if pd.isna(row.home_price_index) or pd.isna(row.mortgage_rate):
            logger.debug("No home price / mortgage rate for %s; skipping", row.month)
            continue
        if pd.isna(row.weekly_income):
            logger.warning("No income record for %s; skipping month", row.month)
            continue
        out.append(
            AlignedMonth(
                date=row.date,
                home_price_index=float(row.home_price_index),
                mortgage_rate=float(row.mortgage_rate),
                weekly_income=float(row.weekly_income),
            )
        )
    return out


def align_by_position(
    home_prices: Sequence[Observation],
    mortgage_rates: Sequence[Observation],
    income: Sequence[IncomeRecord],
) -> list[AlignedMonth]:
    """
    Index i of every series is assumed to be the same month.

    A missing home-price entry at i is skipped. Running past the end of the
    income series raises AlignmentError.
    """
    out: list[AlignedMonth] = []
    for i, mort in enumerate(mortgage_rates):
        hpi = home_prices[i] if i < len(home_prices) else None
        if hpi is None or hpi.value is None or mort.value is None:
            logger.debug("No home price / mortgage rate at position %d; skipping", i)
            continue
        if i >= len(income):
            raise AlignmentError(
                f"Income series has {len(income)} months; no entry at position {i} ({mort.date.isoformat()})"
            )
        out.append(
            AlignedMonth(
                date=mort.date.isoformat(),
                home_price_index=float(hpi.value),
                mortgage_rate=float(mort.value),
                weekly_income=float(income[i].value),
            )
        )
    return out


ALIGNERS = {
    "date": align_by_date,
    "position": align_by_position,
}


def calculate_total_costs(
    home_prices: Sequence[Observation],
    mortgage_rates: Sequence[Observation],
    income: Sequence[IncomeRecord],
    align: str = "date",
) -> list[CostRecord]:
    """All single records, then all household records, in mortgage-series order."""
    try:
        aligner = ALIGNERS[align]
    except KeyError:
        raise ValueError(f"Unknown alignment mode {align!r}") from None

    singles: list[CostRecord] = []
    households: list[CostRecord] = []
    for month in aligner(home_prices, mortgage_rates, income):
        single, household = cost_records(month)
        singles.append(single)
        households.append(household)
    return singles + households


def costs_frame(records: Sequence[CostRecord]) -> pd.DataFrame:
    cols = ["type", "date", "total_cost", "income", "income_schiller_index", "schiller_price", "mortgage_rate"]
    return pd.DataFrame([r.to_dict() for r in records], columns=cols)
