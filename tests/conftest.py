"""
Pytest configuration and shared fixtures for affordability tests.

Usage:
    @pytest.fixture functions are automatically available to all tests.
    Import helpers from conftest when needed.
"""
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import pytest


def pytest_configure():
    """
    Ensure the repo root is on sys.path for the flat-layout package import
    (`affordability`). Keeps tests runnable without an editable install.
    """
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))


# =============================================================================
# Mock Settings Fixture
# =============================================================================

@dataclass
class MockSettings:
    """Settings stand-in for tests that don't need real API keys."""
    bls_api_key: str | None = "test_bls_key"
    fred_api_key: str | None = "test_fred_key"
    http_timeout: float = 5.0
    income_lookback_years: int = 10


@pytest.fixture
def mock_settings() -> MockSettings:
    return MockSettings()


# =============================================================================
# Payload Helpers
# =============================================================================

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_seq(start: date, n: int) -> list[date]:
    """n consecutive first-of-month dates from start."""
    out = []
    y, m = start.year, start.month
    for _ in range(n):
        out.append(date(y, m, 1))
        m += 1
        if m > 12:
            y, m = y + 1, 1
    return out


def make_bls_payload(months: list[date], values: list[str] | None = None) -> dict[str, Any]:
    """
    BLS-shaped payload, most-recent-first like the live API.

    Usage:
        payload = make_bls_payload(month_seq(date(2024, 1, 1), 3), ["1000.00", "1010.00", "1020.00"])
    """
    values = values or [f"{1000 + i:.2f}" for i in range(len(months))]
    data = [
        {
            "year": str(d.year),
            "period": f"M{d.month:02d}",
            "periodName": MONTH_NAMES[d.month - 1],
            "value": v,
            "footnotes": [{}],
        }
        for d, v in zip(months, values)
    ]
    return {
        "status": "REQUEST_SUCCEEDED",
        "message": [],
        "Results": {"series": [{"seriesID": "CES0500000011", "data": list(reversed(data))}]},
    }


def make_fred_payload(months: list[date], values: list[str]) -> dict[str, Any]:
    return {
        "observations": [
            {"realtime_start": "2024-06-01", "realtime_end": "2024-06-01", "date": d.isoformat(), "value": v}
            for d, v in zip(months, values)
        ]
    }


@pytest.fixture
def three_months() -> list[date]:
    return month_seq(date(2024, 1, 1), 3)


@pytest.fixture
def bls_payload(three_months) -> dict[str, Any]:
    return make_bls_payload(three_months, ["1000.00", "1100.00", "1200.00"])


@pytest.fixture
def home_price_payload(three_months) -> dict[str, Any]:
    return make_fred_payload(three_months, ["300.000", "310.000", "320.000"])


@pytest.fixture
def mortgage_payload(three_months) -> dict[str, Any]:
    return make_fred_payload(three_months, ["6.0000", "6.5000", "7.0000"])
