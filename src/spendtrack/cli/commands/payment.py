"""Payment (income) commands."""

import calendar
from datetime import date

import click
from spendtrack.cli.date_filters import parse_cli_date, resolve_cli_date_range
from spendtrack.cli.error_handling import HANDLED_ERRORS, handle_domain_error
from spendtrack.domain.payment import PaymentService
from spendtrack.utils.amount_parser import parse_amount


@click.group()
def payment_group():
    """Manage payments received."""
    pass


@payment_group.command("add")
@click.option("--name", required=True, help="Short description (e.g., 'June salary')")
@click.option("--amount", required=True, help="Amount received (e.g., 2500.00)")
@click.option(
    "--date",
    "date_str",
    default="today",
    show_default=True,
    help="Payment date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--category", help="Payment type (e.g., salary, refund)")
@click.option("--detail", help="Longer note")
@click.pass_context
def add_payment(
    ctx,
    name: str,
    amount: str,
    date_str: str,
    category: str | None,
    detail: str | None,
):
    """Record a payment.

    Examples:
        spendtrack payment add --name Salary --amount 2500 --category salary
    """
    db = ctx.obj["db"]
    service = PaymentService(db)

    payment_date = parse_cli_date(ctx, date_str)
    try:
        payment_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        payment_id = service.create_payment(
            user_id=ctx.obj["user_id"],
            name=name,
            amount=payment_amount,
            date=payment_date,
            category=category,
            detail=detail,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created payment {payment_id}")
    click.echo(f"  Date: {payment_date}")
    click.echo(f"  Amount: ${payment_amount:,.2f}")


@payment_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=10, show_default=True, help="Payments per page")
@click.pass_context
def list_payments(ctx, start_date: str, end_date: str, page: int, limit: int):
    """List payments, newest first."""
    db = ctx.obj["db"]
    service = PaymentService(db)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        result = service.list_payments(
            ctx.obj["user_id"], page=page, limit=limit, start_date=start, end_date=end
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not result.items:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {result.total} payment(s) (page {result.page} of {result.total_pages}):")
    click.echo("-" * 80)
    for txn in result.items:
        amount_str = f"${txn.amount:,.2f}"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:>12}  "
            f"{(txn.category or '')[:15]:<15} {txn.name[:30]}"
        )


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: int, yes: bool) -> None:
    """Delete a payment."""
    db = ctx.obj["db"]
    service = PaymentService(db)

    try:
        service.get_payment(ctx.obj["user_id"], payment_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(f"Are you sure you want to delete payment {payment_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_payment(ctx.obj["user_id"], payment_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted payment {payment_id}")


@payment_group.command("summary")
@click.option("--year", type=int, help="Year (defaults to the current year)")
@click.pass_context
def payment_summary(ctx, year: int | None):
    """Show payment totals per month of a year."""
    db = ctx.obj["db"]
    service = PaymentService(db)
    year = year or date.today().year

    try:
        months = service.get_monthly_summary(ctx.obj["user_id"], year)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not months:
        click.echo(f"No payments in {year}.")
        return

    click.echo(f"\nPayments for {year}")
    click.echo("=" * 50)
    for item in months:
        click.echo(
            f"{calendar.month_name[item.month]:<12} {f'${item.total:,.2f}':>14}  "
            f"({len(item.names)} payment(s))"
        )


def register_commands(cli: click.Group) -> None:
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
