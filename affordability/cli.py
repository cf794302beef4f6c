"""
Housing affordability CLI

    affordability -b BLS_KEY -f FRED_KEY [-s 2015-01-01]

Prints one record per aligned month: the 30-year mortgage cost of a
Case-Shiller-priced home over single and household income.
"""
from __future__ import annotations

from datetime import date

import typer
from rich.console import Console
from rich.markup import escape

from affordability.config import ALIGN_MODES, build_run_config, load_settings
from affordability.errors import AlignmentError, FetchError
from affordability.utils.dates import parse_ymd
from affordability.utils.logging import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Housing affordability: 30y mortgage cost of a Case-Shiller home vs. BLS weekly earnings.",
)


def _parse_date_opt(value: str | None, flag: str) -> date | None:
    if not value:
        return None
    try:
        return parse_ymd(value)
    except ValueError:
        raise typer.BadParameter(f"expected an ISO date (YYYY-MM-DD), got {value!r}", param_hint=flag)


@app.command()
def costs(
    bls_api_key: str = typer.Option(None, "--bls-api-key", "-b", help="BLS API key (default: $BLS_API_KEY)"),
    fred_api_key: str = typer.Option(None, "--fred-api-key", "-f", help="FRED API key (default: $FRED_API_KEY)"),
    start_date: str = typer.Option(None, "--start-date", "-s", help="Start date YYYY-MM-DD (default: ~10 years ago)"),
    end_date: str = typer.Option(None, "--end-date", help="End date YYYY-MM-DD (default: today)"),
    align: str = typer.Option("date", "--align", help=f"Series alignment: {' | '.join(ALIGN_MODES)}"),
    income_from_start: bool = typer.Option(
        False, "--income-from-start", help="Cut the wage series at the start date instead of a fixed 10y lookback"
    ),
    parallel: bool = typer.Option(False, "--parallel", help="Fetch the three series concurrently"),
    json_out: bool = typer.Option(False, "--json", help="Machine-readable JSON output"),
    table: bool = typer.Option(False, "--table", help="Render a table instead of plain lines"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Total 30-year mortgage cost over single / household income, per month."""
    from affordability.pipeline import run
    from affordability.report import print_cost_table, print_total_costs, print_total_costs_json

    configure_logging(verbose)
    err = Console(stderr=True)

    start = _parse_date_opt(start_date, "--start-date")
    end = _parse_date_opt(end_date, "--end-date")
    try:
        config = build_run_config(
            load_settings(),
            bls_api_key=bls_api_key,
            fred_api_key=fred_api_key,
            start_date=start,
            end_date=end,
            income_from_start=income_from_start,
            align=align.strip().lower(),
            parallel=parallel,
        )
    except ValueError as e:
        err.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)

    try:
        records = run(config, verbose=verbose)
    except (FetchError, AlignmentError, ValueError) as e:
        err.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console = Console()
    if json_out:
        print_total_costs_json(records, console)
    elif table:
        print_cost_table(records, console)
    else:
        print_total_costs(records, console)


def main():
    app()


if __name__ == "__main__":
    main()
