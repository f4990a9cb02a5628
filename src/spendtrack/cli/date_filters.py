"""CLI helpers for parsing dates and date ranges."""

from datetime import date, datetime

import click

from spendtrack.utils.date_parser import parse_date, parse_datetime


def parse_cli_date(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse a calendar date option, exiting with an error message on failure."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_cli_bound(ctx: click.Context, value: str | None, label: str) -> datetime | None:
    """Parse an explicit range bound for custom periods (UTC datetime)."""
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a listing filter range; a lone bound is an error."""
    if bool(start_date) != bool(end_date):
        click.echo("Error: --start-date and --end-date must be given together.", err=True)
        ctx.exit(1)

    start = parse_cli_date(ctx, start_date, "start date")
    end = parse_cli_date(ctx, end_date, "end date")
    if start is not None and end is not None and end < start:
        click.echo(f"Error: End date {end} is before start date {start}.", err=True)
        ctx.exit(1)
    return start, end
