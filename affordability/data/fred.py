from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import requests
from requests.exceptions import RequestException

from affordability.errors import FetchError
from affordability.models import Observation
from affordability.utils.dates import parse_ymd

logger = logging.getLogger(__name__)

FRED_OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"


@dataclass(frozen=True)
class FredSeries:
    series_id: str
    frequency: str | None  # FRED aggregation hint ("m" = monthly average); None = native


HOME_PRICE_SERIES = FredSeries("CSUSHPINSA", None)  # S&P/Case-Shiller U.S. National HPI, NSA
MORTGAGE_RATE_SERIES = FredSeries("MORTGAGE30US", "m")  # 30-Year Fixed Rate Mortgage Average


def parse_observations(payload: dict[str, Any]) -> list[Observation]:
    """
    Convert a FRED observations payload to Observations, preserving order.

    FRED's "." marker (no data for the period) becomes value=None so callers can
    treat the month as a gap.
    """
    obs = payload.get("observations")
    if not isinstance(obs, list):
        raise FetchError("FRED payload has no 'observations' list")

    out: list[Observation] = []
    for o in obs:
        v = o.get("value")
        if v is None or v == ".":
            value = None
        else:
            try:
                value = float(v)
            except (TypeError, ValueError) as e:
                raise FetchError(f"Non-numeric FRED value {v!r} on {o.get('date')}") from e
        out.append(Observation(date=parse_ymd(o["date"]), value=value))
    return out


class FredClient:
    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    def fetch_observations(
        self,
        series_id: str,
        start: date,
        end: date,
        frequency: str | None = None,
    ) -> dict[str, Any]:
        """
        Returns the raw observations payload: {"observations": [{"date", "value"}, ...]}.

        Blocking, single attempt. Any transport error, non-2xx status or
        undecodable body raises FetchError.
        """
        params: dict[str, Any] = {
            "series_id": series_id,
            "api_key": self.api_key,
            "file_type": "json",
            "observation_start": start.strftime("%Y-%m-%d"),
            "observation_end": end.strftime("%Y-%m-%d"),
        }
        if frequency:
            params["frequency"] = frequency

        try:
            r = requests.get(FRED_OBSERVATIONS_URL, params=params, timeout=self.timeout)
            r.raise_for_status()
            js = r.json()
        except RequestException as e:
            raise FetchError(f"FRED request for {series_id} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"FRED response for {series_id} is not JSON") from e

        if not isinstance(js, dict):
            raise FetchError(f"FRED response for {series_id} is not a JSON object")
        logger.debug("FRED %s: %d observations", series_id, len(js.get("observations", []) or []))
        return js

    def fetch_series(self, series: FredSeries, start: date, end: date) -> list[Observation]:
        payload = self.fetch_observations(series.series_id, start, end, frequency=series.frequency)
        return parse_observations(payload)

    def fetch_home_prices(self, start: date, end: date) -> list[Observation]:
        return self.fetch_series(HOME_PRICE_SERIES, start, end)

    def fetch_mortgage_rates(self, start: date, end: date) -> list[Observation]:
        return self.fetch_series(MORTGAGE_RATE_SERIES, start, end)
