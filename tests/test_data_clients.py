"""
FRED / BLS client tests. HTTP is stubbed; no network access.
"""
from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from affordability.data.bls import BLS_API_URL, BLSClient
from affordability.data.fred import FRED_OBSERVATIONS_URL, FredClient, parse_observations
from affordability.errors import FetchError
from affordability.models import Observation


def _response(js=None, status_code=200, json_error: Exception | None = None) -> MagicMock:
    r = MagicMock()
    r.status_code = status_code
    if status_code >= 400:
        r.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    else:
        r.raise_for_status.return_value = None
    if json_error is not None:
        r.json.side_effect = json_error
    else:
        r.json.return_value = js
    return r


class TestParseObservations:
    def test_values_and_missing_marker(self):
        obs = parse_observations(
            {"observations": [{"date": "2024-01-01", "value": "6.64"}, {"date": "2024-02-01", "value": "."}]}
        )
        assert obs == [Observation(date(2024, 1, 1), 6.64), Observation(date(2024, 2, 1), None)]

    def test_missing_observations_key(self):
        with pytest.raises(FetchError):
            parse_observations({"error_code": 400, "error_message": "Bad Request"})

    def test_garbage_value(self):
        with pytest.raises(FetchError):
            parse_observations({"observations": [{"date": "2024-01-01", "value": "n/a"}]})


class TestFredClient:
    def test_request_params(self, mortgage_payload):
        with patch("affordability.data.fred.requests.get", return_value=_response(mortgage_payload)) as get:
            js = FredClient(api_key="k", timeout=7).fetch_observations(
                "MORTGAGE30US", date(2016, 1, 2), date(2026, 1, 2), frequency="m"
            )
        assert js == mortgage_payload
        args, kwargs = get.call_args
        assert args[0] == FRED_OBSERVATIONS_URL
        assert kwargs["params"] == {
            "series_id": "MORTGAGE30US",
            "api_key": "k",
            "file_type": "json",
            "observation_start": "2016-01-02",
            "observation_end": "2026-01-02",
            "frequency": "m",
        }
        assert kwargs["timeout"] == 7

    def test_home_prices_use_native_frequency(self, home_price_payload):
        with patch("affordability.data.fred.requests.get", return_value=_response(home_price_payload)) as get:
            obs = FredClient(api_key="k").fetch_home_prices(date(2024, 1, 1), date(2024, 3, 1))
        params = get.call_args.kwargs["params"]
        assert params["series_id"] == "CSUSHPINSA"
        assert "frequency" not in params
        assert [o.value for o in obs] == [300.0, 310.0, 320.0]

    def test_mortgage_rates_are_monthly(self, mortgage_payload):
        with patch("affordability.data.fred.requests.get", return_value=_response(mortgage_payload)) as get:
            obs = FredClient(api_key="k").fetch_mortgage_rates(date(2024, 1, 1), date(2024, 3, 1))
        assert get.call_args.kwargs["params"]["frequency"] == "m"
        assert obs[0] == Observation(date(2024, 1, 1), 6.0)

    def test_http_error_is_fetch_error(self):
        with patch("affordability.data.fred.requests.get", return_value=_response(status_code=500)):
            with pytest.raises(FetchError, match="CSUSHPINSA"):
                FredClient(api_key="k").fetch_home_prices(date(2024, 1, 1), date(2024, 3, 1))

    def test_network_error_is_fetch_error(self):
        with patch("affordability.data.fred.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(FetchError) as ei:
                FredClient(api_key="k").fetch_observations("X", date(2024, 1, 1), date(2024, 3, 1))
        assert isinstance(ei.value.__cause__, requests.ConnectionError)

    def test_bad_json_is_fetch_error(self):
        with patch("affordability.data.fred.requests.get", return_value=_response(json_error=ValueError("no json"))):
            with pytest.raises(FetchError):
                FredClient(api_key="k").fetch_observations("X", date(2024, 1, 1), date(2024, 3, 1))


class TestBLSClient:
    def test_form_data(self, bls_payload):
        with patch("affordability.data.bls.requests.post", return_value=_response(bls_payload)) as post:
            js = BLSClient(api_key="b", timeout=3).fetch_weekly_earnings(2016, 2026)
        assert js is bls_payload
        args, kwargs = post.call_args
        assert args[0] == BLS_API_URL
        assert kwargs["data"] == {
            "seriesid": "CES0500000011",
            "startyear": "2016",
            "endyear": "2026",
            "registrationkey": "b",
            "count": "100",
            "sortby": "asc",
        }
        assert kwargs["timeout"] == 3

    def test_unsuccessful_status(self):
        body = {"status": "REQUEST_NOT_PROCESSED", "message": ["Invalid key"], "Results": {}}
        with patch("affordability.data.bls.requests.post", return_value=_response(body)):
            with pytest.raises(FetchError, match="Invalid key"):
                BLSClient(api_key="bad").fetch_weekly_earnings(2016, 2026)

    def test_http_error(self):
        with patch("affordability.data.bls.requests.post", return_value=_response(status_code=403)):
            with pytest.raises(FetchError):
                BLSClient(api_key="b").fetch_weekly_earnings(2016, 2026)

    def test_partial_success_message_is_logged(self, bls_payload, caplog):
        bls_payload["message"] = ["No Data Available for Series CES0500000011 Year: 2006"]
        with patch("affordability.data.bls.requests.post", return_value=_response(bls_payload)):
            BLSClient(api_key="b").fetch_weekly_earnings(2006, 2026)
        assert "No Data Available" in caplog.text
