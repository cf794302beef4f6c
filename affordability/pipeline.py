from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from affordability.config import RunConfig
from affordability.data.bls import BLSClient
from affordability.data.fred import FredClient
from affordability.income import normalize_weekly_income, resolve_income_cutoff
from affordability.models import CostRecord, IncomeRecord, Observation
from affordability.mortgage import calculate_total_costs
from affordability.utils.logging import log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawInputs:
    wage_payload: dict[str, Any]
    home_prices: list[Observation]
    mortgage_rates: list[Observation]


def fetch_inputs(
    config: RunConfig,
    *,
    bls: BLSClient | None = None,
    fred: FredClient | None = None,
) -> RawInputs:
    """
    Fetch the three series. With config.parallel they run on a thread pool and
    are joined before returning; the first failure propagates either way.
    """
    bls = bls or BLSClient(api_key=config.bls_api_key, timeout=config.timeout)
    fred = fred or FredClient(api_key=config.fred_api_key, timeout=config.timeout)

    jobs: dict[str, Callable[[], Any]] = {
        "wages": lambda: bls.fetch_weekly_earnings(config.start_date.year, config.end_date.year),
        "home_prices": lambda: fred.fetch_home_prices(config.start_date, config.end_date),
        "mortgage_rates": lambda: fred.fetch_mortgage_rates(config.start_date, config.end_date),
    }

    if config.parallel:
        with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="fetch") as pool:
            futures = {name: pool.submit(fn) for name, fn in jobs.items()}
            results = {name: fut.result() for name, fut in futures.items()}
    else:
        results = {name: fn() for name, fn in jobs.items()}

    return RawInputs(
        wage_payload=results["wages"],
        home_prices=results["home_prices"],
        mortgage_rates=results["mortgage_rates"],
    )


def compute_costs(config: RunConfig, raw: RawInputs, today: date | None = None) -> list[CostRecord]:
    cutoff = resolve_income_cutoff(
        config.start_date,
        from_start=config.income_from_start,
        lookback_years=config.income_lookback_years,
        today=today,
    )
    income: list[IncomeRecord] = normalize_weekly_income(raw.wage_payload, cutoff=cutoff)
    return calculate_total_costs(raw.home_prices, raw.mortgage_rates, income, align=config.align)


def run(
    config: RunConfig,
    *,
    bls: BLSClient | None = None,
    fred: FredClient | None = None,
    verbose: bool = False,
) -> list[CostRecord]:
    raw = fetch_inputs(config, bls=bls, fred=fred)
    if verbose:
        log_event(
            "fetched",
            {
                "start_date": config.start_date,
                "end_date": config.end_date,
                "home_prices": len(raw.home_prices),
                "mortgage_rates": len(raw.mortgage_rates),
                "align": config.align,
            },
        )
    records = compute_costs(config, raw)
    logger.info("Computed %d cost records", len(records))
    return records
