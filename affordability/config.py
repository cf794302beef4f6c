from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

ALIGN_MODES = ("date", "position")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    BLS_API_KEY: str | None = None
    FRED_API_KEY: str | None = None
    # Seconds per HTTP request. There is no retry, a timeout is fatal.
    HTTP_TIMEOUT: float = 30.0
    # Fixed lookback used to cut the wage series (first of month, N years ago).
    INCOME_LOOKBACK_YEARS: int = 10

    # Snake_case accessors, same as the rest of the codebase uses.
    @property
    def bls_api_key(self) -> str | None:
        return self.BLS_API_KEY

    @property
    def fred_api_key(self) -> str | None:
        return self.FRED_API_KEY

    @property
    def http_timeout(self) -> float:
        return self.HTTP_TIMEOUT

    @property
    def income_lookback_years(self) -> int:
        return self.INCOME_LOOKBACK_YEARS


@dataclass(frozen=True)
class RunConfig:
    """Everything one run needs, passed explicitly to fetchers and calculators."""

    bls_api_key: str
    fred_api_key: str
    start_date: date
    end_date: date
    income_lookback_years: int = 10
    # When True the wage cutoff is the first of the start date's month instead
    # of the fixed lookback.
    income_from_start: bool = False
    align: str = "date"
    parallel: bool = False
    timeout: float = 30.0


def default_start_date(today: date | None = None) -> date:
    today = today or date.today()
    return today - timedelta(days=10 * 365)


def load_settings() -> Settings:
    return Settings()


def build_run_config(
    settings: Settings,
    *,
    bls_api_key: str | None = None,
    fred_api_key: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    income_from_start: bool = False,
    align: str = "date",
    parallel: bool = False,
    today: date | None = None,
) -> RunConfig:
    """Merge CLI overrides onto environment settings. Raises ValueError on missing keys."""
    today = today or date.today()
    bls = bls_api_key or settings.bls_api_key
    fred = fred_api_key or settings.fred_api_key
    if not bls:
        raise ValueError("Missing BLS API key (pass --bls-api-key or set BLS_API_KEY)")
    if not fred:
        raise ValueError("Missing FRED API key (pass --fred-api-key or set FRED_API_KEY)")
    if align not in ALIGN_MODES:
        raise ValueError(f"Unknown alignment mode {align!r}; expected one of {', '.join(ALIGN_MODES)}")

    start = start_date or default_start_date(today)
    end = end_date or today
    if start > end:
        raise ValueError(f"Start date {start.isoformat()} is after end date {end.isoformat()}")

    return RunConfig(
        bls_api_key=bls,
        fred_api_key=fred,
        start_date=start,
        end_date=end,
        income_lookback_years=settings.income_lookback_years,
        income_from_start=income_from_start,
        align=align,
        parallel=parallel,
        timeout=settings.http_timeout,
    )
