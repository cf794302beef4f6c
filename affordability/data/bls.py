"""
BLS (Bureau of Labor Statistics) API v2 client.

Fetches the average weekly earnings series used as the income side of the
affordability ratio. Modeled after FredClient in affordability/data/fred.py.
"""
from __future__ import annotations

import logging
from typing import Any

import requests
from requests.exceptions import RequestException

from affordability.errors import FetchError

logger = logging.getLogger(__name__)

BLS_API_URL = "https://api.bls.gov/publicAPI/v2/timeseries/data/"
# Average Weekly Earnings of All Employees, Total Private
WEEKLY_EARNINGS_SERIES = "CES0500000011"


class BLSClient:
    """Fetch raw BLS time-series payloads."""

    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    def fetch_weekly_earnings(self, start_year: int, end_year: int) -> dict[str, Any]:
        return self.fetch_series(WEEKLY_EARNINGS_SERIES, start_year, end_year)

    def fetch_series(self, series_id: str, start_year: int, end_year: int) -> dict[str, Any]:
        """
        POST a single-series request and return the decoded payload.

        Shape: {"status": ..., "Results": {"series": [{"data": [...]}]}}, data
        most-recent-first regardless of `sortby`.
        """
        form = {
            "seriesid": series_id,
            "startyear": str(start_year),
            "endyear": str(end_year),
            "registrationkey": self.api_key,
            "count": "100",
            "sortby": "asc",
        }
        try:
            resp = requests.post(BLS_API_URL, data=form, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except RequestException as e:
            raise FetchError(f"BLS request for {series_id} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"BLS response for {series_id} is not JSON") from e

        if not isinstance(body, dict):
            raise FetchError(f"BLS response for {series_id} is not a JSON object")

        status = body.get("status")
        if status != "REQUEST_SUCCEEDED":
            msg = body.get("message") or ["Unknown error"]
            raise FetchError(f"BLS request for {series_id} returned {status}: {'; '.join(map(str, msg))}")
        if body.get("message"):
            # Partial-success notes, e.g. "No Data Available for Series ... Year: 2014"
            logger.warning("BLS API: %s", body["message"])

        return body
