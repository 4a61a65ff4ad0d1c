"""Mini README: Entry point CLI for the Freightboard finance service.

This script exposes a Typer CLI with two commands: ``run`` starts the
FastAPI application under uvicorn with configurable host, port and
production flags, and ``simulate`` projects a JSON snapshot of finance
records straight from the terminal. Settings come from environment
variables when available.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from freightboard.configuration import get_settings
from freightboard.errors import DateRangeError
from freightboard.finance import (
    CashFlowPlanner,
    FinanceSnapshot,
    SimulationView,
    SortDirection,
    SortKey,
    SortState,
)
from freightboard.logging_utils import configure_root_logger
from freightboard.scheduling import FixedClock, SystemClock, to_date_only

cli = typer.Typer(help="Launch and use the Freightboard cash-flow engine.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 sentinel, so point operators at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Freightboard on "
        f"{effective_host}:{effective_port}.\n"
        "API docs at "
        f"http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "freightboard.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def simulate(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON snapshot of records."),
    from_date: Optional[str] = typer.Option(None, "--from", help="Range start (YYYY-MM-DD)."),
    to_date: Optional[str] = typer.Option(None, "--to", help="Range end (YYYY-MM-DD)."),
    view: SimulationView = typer.Option(SimulationView.COMBINED, help="Which events to include."),
    sort: SortKey = typer.Option(SortKey.DATE, help="Sort column."),
    direction: Optional[SortDirection] = typer.Option(None, help="Sort direction (defaults per column)."),
    opening_balance: float = typer.Option(0.0, help="Balance before the first event."),
    today: Optional[str] = typer.Option(None, help="Pin 'today' (YYYY-MM-DD) for reproducible output."),
    as_json: bool = typer.Option(False, "--json", help="Print the projection as JSON."),
) -> None:
    """Project a running balance for the records in SNAPSHOT_PATH."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    if today:
        pinned = to_date_only(today)
        if not pinned:
            raise typer.BadParameter(f"Not a valid date: {today}", param_hint="--today")
        clock = FixedClock(pinned)
    else:
        clock = SystemClock(settings.business_timezone)

    try:
        payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        typer.echo(f"Snapshot is not valid JSON: {error}", err=True)
        raise typer.Exit(code=1) from error
    if not isinstance(payload, dict):
        typer.echo("Snapshot must be a JSON object.", err=True)
        raise typer.Exit(code=1)

    planner = CashFlowPlanner(clock)
    try:
        window = planner.resolve_window(from_date, to_date)
    except DateRangeError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2) from error

    projection = planner.project(
        FinanceSnapshot.from_dict(payload),
        window,
        view=view,
        sort_state=SortState(key=sort, direction=direction or sort.default_direction),
        opening_balance=opening_balance,
    )
    if as_json:
        typer.echo(json.dumps(projection.as_dict(), indent=2))
        return

    typer.echo(f"Range {window.from_date} .. {window.to_date} ({view.value})")
    for row in projection.rows:
        event = row.event
        sign = "+" if event.is_income else "-"
        typer.echo(
            f"{event.date}  {event.kind.value:<8} {event.label[:32]:<32} "
            f"{sign}{event.amount:>11.2f} {row.running_balance:>12.2f}"
        )
    result = projection.simulation
    if not result.is_chronological:
        typer.echo("Note: rows are not in date order; running balances follow the table order.")
    typer.echo(
        f"Income {result.total_income:.2f} | Out {result.total_out:.2f} | "
        f"Projected {result.projected_balance:.2f}"
    )


if __name__ == "__main__":
    cli()
