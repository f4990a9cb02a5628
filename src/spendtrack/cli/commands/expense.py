"""Expense management commands."""

from datetime import date

import click
from spendtrack.cli.date_filters import parse_cli_date, resolve_cli_date_range
from spendtrack.cli.error_handling import HANDLED_ERRORS, handle_domain_error
from spendtrack.domain.entities import PaymentMethod
from spendtrack.domain.expense import ExpenseService
from spendtrack.utils.amount_parser import parse_amount

PAYMENT_METHODS = [method.value for method in PaymentMethod]


def _parse_amount_or_exit(ctx, amount: str):
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@click.group()
def expense_group():
    """Manage expenses."""
    pass


@expense_group.command("add")
@click.option("--name", required=True, help="Short description of the expense")
@click.option("--amount", required=True, help="Amount spent (e.g., 12.50)")
@click.option("--category", required=True, help="Category label (e.g., 'Groceries')")
@click.option(
    "--date",
    "date_str",
    default="today",
    show_default=True,
    help="Expense date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--detail", help="Longer note")
@click.option(
    "--method",
    type=click.Choice(PAYMENT_METHODS),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="Payment method",
)
@click.option("--goal", "goal_id", type=int, help="Budget goal ID to book the expense against")
@click.option("--time", "time_str", help="Time of day as HH:MM")
@click.pass_context
def add_expense(
    ctx,
    name: str,
    amount: str,
    category: str,
    date_str: str,
    detail: str | None,
    method: str,
    goal_id: int | None,
    time_str: str | None,
):
    """Add an expense.

    Examples:
        spendtrack expense add --name "Weekly shop" --amount 54.20 --category Groceries
        spendtrack expense add --name Taxi --amount 18 --category Transport --date yesterday
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = ExpenseService(db)

    expense_date = parse_cli_date(ctx, date_str)
    expense_amount = _parse_amount_or_exit(ctx, amount)

    try:
        expense_id = service.create_expense(
            user_id=user_id,
            name=name,
            amount=expense_amount,
            date=expense_date,
            category=category,
            detail=detail,
            payment_method=PaymentMethod(method),
            budget_goal_id=goal_id,
            time=time_str,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created expense {expense_id}")
    click.echo(f"  Name: {name.strip()}")
    click.echo(f"  Date: {expense_date}")
    click.echo(f"  Amount: ${expense_amount:,.2f}")
    click.echo(f"  Category: {category.strip()}")


@expense_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--category", help="Only show this category")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=10, show_default=True, help="Expenses per page")
@click.pass_context
def list_expenses(ctx, start_date: str, end_date: str, category: str, page: int, limit: int):
    """List expenses, newest first."""
    db = ctx.obj["db"]
    service = ExpenseService(db)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        result = service.list_expenses(
            ctx.obj["user_id"],
            page=page,
            limit=limit,
            start_date=start,
            end_date=end,
            category=category,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not result.items:
        click.echo("No expenses found.")
        return

    click.echo(f"\nFound {result.total} expense(s) (page {result.page} of {result.total_pages}):")
    click.echo("-" * 90)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>12}  {'Category':<20} {'Name':<30}")
    click.echo("-" * 90)
    for txn in result.items:
        amount_str = f"${txn.amount:,.2f}"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:>12}  "
            f"{(txn.category or '')[:20]:<20} {txn.name[:30]:<30}"
        )
    click.echo("-" * 90)
    page_total = sum(txn.amount for txn in result.items)
    click.echo(f"{'TOTAL':<6} {'':<12} {f'${page_total:,.2f}':>12}  Count: {len(result.items)}")


@expense_group.command("update")
@click.argument("expense_id", type=int)
@click.option("--name", help="Short description of the expense")
@click.option("--amount", help="Amount spent")
@click.option("--category", help="Category label")
@click.option("--date", "date_str", help="Expense date (YYYY-MM-DD or relative)")
@click.option("--detail", help="Longer note")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--goal", "goal_id", type=int, help="Budget goal ID")
@click.option("--clear-goal", is_flag=True, help="Unlink the expense from its budget goal")
@click.option("--time", "time_str", help="Time of day as HH:MM")
@click.pass_context
def update_expense(
    ctx,
    expense_id: int,
    name: str | None,
    amount: str | None,
    category: str | None,
    date_str: str | None,
    detail: str | None,
    method: str | None,
    goal_id: int | None,
    clear_goal: bool,
    time_str: str | None,
) -> None:
    """Update an expense.

    Updates only the fields that are provided.

    Examples:
        spendtrack expense update 3 --amount 20.00
        spendtrack expense update 3 --clear-goal
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)

    if goal_id is not None and clear_goal:
        click.echo("Error: --goal and --clear-goal cannot be combined.", err=True)
        ctx.exit(1)

    expense_amount = _parse_amount_or_exit(ctx, amount) if amount is not None else None
    expense_date = parse_cli_date(ctx, date_str)

    try:
        service.update_expense(
            ctx.obj["user_id"],
            expense_id,
            name=name,
            amount=expense_amount,
            date=expense_date,
            category=category,
            detail=detail,
            payment_method=PaymentMethod(method) if method else None,
            budget_goal_id=goal_id,
            time=time_str,
            clear_budget_goal=clear_goal,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated expense {expense_id}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_expense(ctx, expense_id: int, yes: bool) -> None:
    """Delete an expense.

    Examples:
        spendtrack expense delete 3
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)

    try:
        service.get_expense(ctx.obj["user_id"], expense_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(f"Are you sure you want to delete expense {expense_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_expense(ctx.obj["user_id"], expense_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted expense {expense_id}")


@expense_group.command("summary")
@click.option("--year", type=int, help="Year (defaults to the current year)")
@click.option("--month", type=int, help="Month 1-12 (defaults to the current month)")
@click.pass_context
def expense_summary(ctx, year: int | None, month: int | None):
    """Show expense totals per category for one month."""
    db = ctx.obj["db"]
    service = ExpenseService(db)
    today = date.today()
    year = year or today.year
    month = month or today.month

    try:
        totals = service.get_monthly_summary(ctx.obj["user_id"], year, month)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not totals:
        click.echo(f"No expenses in {year}-{month:02d}.")
        return

    click.echo(f"\nExpenses for {year}-{month:02d}")
    click.echo("=" * 50)
    for item in totals:
        click.echo(f"{item.category:<30} {f'${item.amount:,.2f}':>19}")
    click.echo("-" * 50)
    grand_total = sum(item.amount for item in totals)
    click.echo(f"{'Total':<30} {f'${grand_total:,.2f}':>19}")


def register_commands(cli: click.Group) -> None:
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
