"""Mini README: Entry point CLI for the Mill Records desk.

This script exposes a Typer CLI that allows staff to start the FastAPI
application with configurable host, port, and production flags, and to
export records, print dashboard figures or a receipt straight from the
configured store. It ensures consistent logging and draws settings from
environment variables when available.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from millrecords.configuration import get_settings
from millrecords.export import CsvExporter
from millrecords.logging_utils import configure_root_logger
from millrecords.records import (
    FilterCriteria,
    MillRecordsError,
    TransactionBook,
    aggregate_stats,
    build_receipt,
    filter_transactions,
    render_receipt_text,
)
from millrecords.storage import REGISTRY
from millrecords.utils.formatting import format_currency, format_number

cli = typer.Typer(help="Launch and manage the Mill Records desk.")


def _load_book() -> TransactionBook:
    """Open the configured store and load its records."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    REGISTRY.load_plugins()
    book = TransactionBook(REGISTRY.create(settings.store_backend, settings))
    asyncio.run(book.refresh())
    return book


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

    # Browsers cannot open the 0.0.0.0 sentinel, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Mill Records on "
        f"{effective_host}:{effective_port}.\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
        + (
            " (use your machine's IP address for remote access)."
            if effective_host in {"0.0.0.0", "::"}
            else ""
        )
    )
    uvicorn.run(
        "millrecords.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def export(
    output_directory: Optional[Path] = typer.Option(
        None, "--output-directory", "-o", help="Folder for the CSV (defaults to the data directory)."
    ),
    search: Optional[str] = typer.Option(None, help="Customer name or contact to match."),
    crop: Optional[str] = typer.Option(None, help="Crop type to keep, or 'all'."),
    date_from: Optional[str] = typer.Option(None, help="Earliest date, YYYY-MM-DD."),
    date_to: Optional[str] = typer.Option(None, help="Latest date, YYYY-MM-DD."),
) -> None:
    """Write the (optionally filtered) records to milling-records-<date>.csv."""

    try:
        book = _load_book()
    except MillRecordsError as error:
        typer.echo(f"Could not load records: {error}", err=True)
        raise typer.Exit(code=1) from error
    criteria = FilterCriteria(
        search_text=search, crop_type=crop, date_from=date_from, date_to=date_to
    )
    records = filter_transactions(book.list_transactions(), criteria)
    target = CsvExporter().export_to_directory(
        records, output_directory or get_settings().data_directory
    )
    typer.echo(f"Exported {len(records)} of {len(book)} transactions to {target}")


@cli.command()
def summary() -> None:
    """Print the dashboard statistics for every stored record."""

    try:
        book = _load_book()
    except MillRecordsError as error:
        typer.echo(f"Could not load records: {error}", err=True)
        raise typer.Exit(code=1) from error
    currency = get_settings().currency
    stats = aggregate_stats(book.list_transactions())
    typer.echo(f"Transactions:        {stats.transaction_count}")
    typer.echo(f"Total revenue:       {format_currency(stats.total_revenue, currency)}")
    typer.echo(f"Outstanding balance: {format_currency(stats.total_outstanding_balance, currency)}")
    typer.echo(f"Total quantity:      {format_number(stats.total_quantity_kg)} kg")
    typer.echo(f"Unique customers:    {stats.unique_customer_count}")
    for crop, quantity in stats.quantity_by_crop.items():
        typer.echo(f"  {crop:<10} {format_number(quantity)} kg")
    typer.echo("Revenue, last 7 days:")
    for entry in stats.daily_revenue_last_7_days:
        typer.echo(f"  {entry.day} {entry.label}  {format_currency(entry.revenue, currency)}")


@cli.command()
def receipt(transaction_id: str = typer.Argument(..., help="Id of the transaction.")) -> None:
    """Print a plain-text receipt for one transaction."""

    settings = get_settings()
    try:
        book = _load_book()
        transaction = book.get(transaction_id)
    except MillRecordsError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error
    typer.echo(
        render_receipt_text(
            build_receipt(
                transaction, business_name=settings.business_name, currency=settings.currency
            )
        ),
        nl=False,
    )


if __name__ == "__main__":
    cli()
