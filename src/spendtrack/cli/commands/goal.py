"""Budget goal commands."""

import click
from spendtrack.cli.date_filters import parse_cli_date, resolve_cli_date_range
from spendtrack.cli.error_handling import HANDLED_ERRORS, handle_domain_error
from spendtrack.domain.budget_goal import BudgetGoalService
from spendtrack.domain.entities import GoalPriority, GoalStatus
from spendtrack.utils.amount_parser import parse_amount

STATUSES = [status.value for status in GoalStatus]
PRIORITIES = [priority.value for priority in GoalPriority]


def _parse_amount_or_exit(ctx, amount: str, label: str = "amount"):
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def goal_group():
    """Manage budget goals."""
    pass


@goal_group.command("add")
@click.option("--name", required=True, help="Goal name")
@click.option("--amount", required=True, help="Budgeted amount")
@click.option(
    "--deadline",
    required=True,
    help="Deadline (YYYY-MM-DD or relative like 'next month')",
)
@click.option("--category", help="Category label")
@click.option("--detail", help="Longer note")
@click.option(
    "--priority",
    type=click.Choice(PRIORITIES),
    default=GoalPriority.MEDIUM.value,
    show_default=True,
    help="Priority",
)
@click.pass_context
def add_goal(
    ctx,
    name: str,
    amount: str,
    deadline: str,
    category: str | None,
    detail: str | None,
    priority: str,
):
    """Create a budget goal.

    Examples:
        spendtrack goal add --name "Holiday" --amount 1200 --deadline 2024-08-01
    """
    db = ctx.obj["db"]
    service = BudgetGoalService(db)

    goal_amount = _parse_amount_or_exit(ctx, amount)
    goal_date = parse_cli_date(ctx, deadline, "deadline")

    try:
        goal_id = service.create_budget_goal(
            user_id=ctx.obj["user_id"],
            name=name,
            amount=goal_amount,
            date=goal_date,
            category=category,
            detail=detail,
            priority=GoalPriority(priority),
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created budget goal {goal_id}")
    click.echo(f"  Amount: ${goal_amount:,.2f}")
    click.echo(f"  Deadline: {goal_date}")


@goal_group.command("list")
@click.option("--start-date", help="Earliest deadline")
@click.option("--end-date", help="Latest deadline")
@click.option("--status", type=click.Choice(STATUSES), help="Only show goals with this status")
@click.option("--category", help="Only show this category")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=10, show_default=True, help="Goals per page")
@click.pass_context
def list_goals(
    ctx,
    start_date: str,
    end_date: str,
    status: str | None,
    category: str | None,
    page: int,
    limit: int,
):
    """List budget goals with the spending booked against each."""
    db = ctx.obj["db"]
    service = BudgetGoalService(db)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        result = service.list_budget_goals(
            ctx.obj["user_id"],
            page=page,
            limit=limit,
            start_date=start,
            end_date=end,
            status=GoalStatus(status) if status else None,
            category=category,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not result.items:
        click.echo("No budget goals found.")
        return

    click.echo(f"\nFound {result.total} goal(s) (page {result.page} of {result.total_pages}):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Deadline':<12} {'Amount':>12} {'Spent':>12}  {'Status':<11} "
        f"{'Progress':>8}  {'Name':<30}"
    )
    click.echo("-" * 100)
    for item in result.items:
        goal = item.goal
        click.echo(
            f"{goal.id:<6} {str(goal.date):<12} {f'${goal.amount:,.2f}':>12} "
            f"{f'${item.current_spending:,.2f}':>12}  {goal.status.value:<11} "
            f"{f'{goal.progress}%':>8}  {goal.name[:30]:<30}"
        )


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--name", help="Goal name")
@click.option("--amount", help="Budgeted amount")
@click.option("--deadline", help="Deadline (YYYY-MM-DD or relative)")
@click.option("--category", help="Category label")
@click.option("--detail", help="Longer note")
@click.option("--status", type=click.Choice(STATUSES), help="Goal status")
@click.option("--priority", type=click.Choice(PRIORITIES), help="Priority")
@click.pass_context
def update_goal(
    ctx,
    goal_id: int,
    name: str | None,
    amount: str | None,
    deadline: str | None,
    category: str | None,
    detail: str | None,
    status: str | None,
    priority: str | None,
) -> None:
    """Update a budget goal.

    Updates only the fields that are provided.

    Examples:
        spendtrack goal update 2 --status terminated
    """
    db = ctx.obj["db"]
    service = BudgetGoalService(db)

    goal_amount = _parse_amount_or_exit(ctx, amount) if amount is not None else None
    goal_date = parse_cli_date(ctx, deadline, "deadline")

    try:
        service.update_budget_goal(
            ctx.obj["user_id"],
            goal_id,
            name=name,
            amount=goal_amount,
            date=goal_date,
            category=category,
            detail=detail,
            status=GoalStatus(status) if status else None,
            priority=GoalPriority(priority) if priority else None,
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated budget goal {goal_id}")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_goal(ctx, goal_id: int, yes: bool) -> None:
    """Delete a budget goal."""
    db = ctx.obj["db"]
    service = BudgetGoalService(db)

    try:
        service.get_budget_goal(ctx.obj["user_id"], goal_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(f"Are you sure you want to delete budget goal {goal_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_budget_goal(ctx.obj["user_id"], goal_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted budget goal {goal_id}")


@goal_group.command("progress")
@click.argument("goal_id", type=int)
@click.option("--current-amount", help="Record the amount saved so far")
@click.pass_context
def goal_progress(ctx, goal_id: int, current_amount: str | None) -> None:
    """Show or record progress toward a budget goal.

    Examples:
        spendtrack goal progress 2
        spendtrack goal progress 2 --current-amount 300
    """
    db = ctx.obj["db"]
    service = BudgetGoalService(db)
    user_id = ctx.obj["user_id"]

    try:
        if current_amount is not None:
            service.record_progress(
                user_id, goal_id, _parse_amount_or_exit(ctx, current_amount, "current amount")
            )
        progress = service.get_progress(user_id, goal_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Budget goal {goal_id}: {progress.progress}% ({progress.status.value})")
    click.echo(f"  Saved: ${progress.current_amount:,.2f} of ${progress.amount:,.2f}")


@goal_group.command("expenses")
@click.argument("goal_id", type=int)
@click.pass_context
def goal_expenses(ctx, goal_id: int) -> None:
    """List the expenses booked against a budget goal."""
    db = ctx.obj["db"]
    service = BudgetGoalService(db)

    try:
        expenses = service.get_expenses_for_goal(ctx.obj["user_id"], goal_id)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not expenses:
        click.echo(f"No expenses booked against budget goal {goal_id}.")
        return
    for txn in expenses:
        click.echo(f"{txn.id:<6} {str(txn.date):<12} {f'${txn.amount:,.2f}':>12}  {txn.name}")


def register_commands(cli: click.Group) -> None:
    """Register budget goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
