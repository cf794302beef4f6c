"""
Output for computed cost records.

Default is one plain line per record on stdout. JSON and a rich table are
available for humans and scripts.
"""
from __future__ import annotations

import json
from typing import Sequence

from rich.console import Console
from rich.table import Table

from affordability.models import CostRecord
from affordability.mortgage import costs_frame

FIELDS = ("type", "date", "total_cost", "income", "income_schiller_index", "schiller_price", "mortgage_rate")


def format_cost_record(record: CostRecord) -> str:
    d = record.to_dict()
    return "{" + ", ".join(f"{k}: {d[k]}" for k in FIELDS) + "}"


def print_total_costs(records: Sequence[CostRecord], console: Console | None = None) -> None:
    console = console or Console()
    for r in records:
        # markup/highlight off: output must be the exact line.
        console.print(format_cost_record(r), markup=False, highlight=False, soft_wrap=True)


def print_total_costs_json(records: Sequence[CostRecord], console: Console | None = None) -> None:
    console = console or Console()
    console.print_json(json.dumps([r.to_dict() for r in records]))


def render_cost_table(records: Sequence[CostRecord]) -> Table:
    df = costs_frame(records)
    table = Table(title="30y mortgage cost vs income (Case-Shiller)", show_lines=False)
    table.add_column("Type", style="cyan")
    table.add_column("Date")
    table.add_column("Total cost", justify="right")
    table.add_column("Income", justify="right")
    table.add_column("Cost / income", justify="right", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Rate %", justify="right")
    for row in df.itertuples(index=False):
        table.add_row(
            row.type,
            row.date,
            f"{int(row.total_cost):,}",
            f"{int(row.income):,}",
            f"{row.income_schiller_index:.3f}",
            f"{int(row.schiller_price):,}",
            f"{row.mortgage_rate:.3f}",
        )
    return table


def print_cost_table(records: Sequence[CostRecord], console: Console | None = None) -> None:
    console = console or Console()
    console.print(render_cost_table(records))
