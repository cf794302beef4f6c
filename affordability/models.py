from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class Observation:
    date: date
    value: float | None  # None when FRED reports "." (no data for the period)


@dataclass(frozen=True)
class IncomeRecord:
    date: str  # ISO, first of month
    value: str  # weekly earnings, as reported
    footnotes: list[dict[str, Any]] = field(default_factory=list)

    @property
    def month(self) -> date:
        return date.fromisoformat(self.date)


@dataclass(frozen=True)
class CostRecord:
    type: str  # "single" | "household"
    date: str
    total_cost: int
    income: int
    income_schiller_index: float
    schiller_price: int
    mortgage_rate: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
