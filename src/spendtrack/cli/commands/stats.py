"""Analytics commands: period stats, goal stats and the weekly dashboard."""

import click
from spendtrack.cli.date_filters import parse_cli_bound
from spendtrack.cli.error_handling import HANDLED_ERRORS, handle_domain_error
from spendtrack.domain.analytics import DEFAULT_CLOSEST_COUNT, AnalyticsService
from spendtrack.domain.entities import PeriodToken

PERIODS = ", ".join(token.value for token in PeriodToken)


def _money(amount) -> str:
    return f"${amount:,.2f}"


def _interval_label(interval) -> str:
    return f"{interval.first_day} to {interval.last_day}"


@click.command("stats")
@click.option("--period", default=PeriodToken.MONTHLY.value, show_default=True, help=f"One of: {PERIODS}")
@click.option("--start-date", help="Start of a custom period (date or ISO timestamp)")
@click.option("--end-date", help="End of a custom period (date or ISO timestamp)")
@click.pass_context
def stats(ctx, period: str, start_date: str | None, end_date: str | None):
    """Show spending statistics for a period compared with the one before.

    Examples:
        spendtrack stats --period weekly
        spendtrack stats --period custom --start-date 2024-06-01 --end-date 2024-06-30
    """
    db = ctx.obj["db"]
    service = AnalyticsService(db)
    start = parse_cli_bound(ctx, start_date, "start date")
    end = parse_cli_bound(ctx, end_date, "end date")

    try:
        report = service.get_stats_by_period(ctx.obj["user_id"], period, start, end)
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    result = report.stats
    click.echo(f"\nSpending for {report.period.value} period ({_interval_label(report.interval)})")
    click.echo("=" * 60)
    click.echo(f"{'Total spent':<30} {_money(result.total_spent):>29}")
    click.echo(f"{'Daily average':<30} {_money(result.daily_average):>29}")
    click.echo(f"{'Tracking streak':<30} {f'{result.tracking_streak} day(s)':>29}")
    click.echo(f"{'Velocity':<30} {report.velocity.message:>29}")

    click.echo("\nTrend:")
    for bucket in result.trend:
        click.echo(f"  {bucket.label:<28} {_money(bucket.amount):>29}")

    if result.categories:
        click.echo("\nCategories:")
        for item in result.categories:
            click.echo(f"  {item.category:<28} {_money(item.amount):>29}")


@click.command("goal-stats")
@click.option("--period", default=PeriodToken.MONTHLY.value, show_default=True, help=f"One of: {PERIODS}")
@click.option("--start-date", help="Start of a custom period (date or ISO timestamp)")
@click.option("--end-date", help="End of a custom period (date or ISO timestamp)")
@click.option(
    "--closest",
    type=int,
    default=DEFAULT_CLOSEST_COUNT,
    show_default=True,
    help="How many upcoming goals to show (0 shows all)",
)
@click.pass_context
def goal_stats(ctx, period: str, start_date: str | None, end_date: str | None, closest: int):
    """Show budget goal statistics for goals due in a period."""
    db = ctx.obj["db"]
    service = AnalyticsService(db)
    start = parse_cli_bound(ctx, start_date, "start date")
    end = parse_cli_bound(ctx, end_date, "end date")

    try:
        report = service.get_goal_stats_by_period(
            ctx.obj["user_id"], period, start, end, closest_count=closest
        )
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nBudget goals for {report.period.value} period ({_interval_label(report.interval)})")
    click.echo("=" * 60)
    click.echo(f"{'Total goals':<30} {report.total_goals:>29}")
    click.echo(f"{'Active budget':<30} {_money(report.total_active_budget):>29}")
    click.echo(f"{'Average achieved progress':<30} {f'{report.avg_achieved_progress:.1f}%':>29}")
    for status, count in sorted(report.status_counts.items()):
        click.echo(f"  {status:<28} {count:>29}")

    if report.overdue_goals:
        click.echo("\nOverdue:")
        for goal in report.overdue_goals:
            click.echo(f"  {goal.id:<5} {str(goal.date):<12} {goal.name}")
    if report.closest_goals:
        click.echo("\nComing up:")
        for goal in report.closest_goals:
            click.echo(f"  {goal.id:<5} {str(goal.date):<12} {goal.name}")


@click.command("weekly")
@click.pass_context
def weekly(ctx):
    """Show spending for each of the last seven days against income received."""
    db = ctx.obj["db"]
    service = AnalyticsService(db)

    try:
        week = service.get_weekly_stats(ctx.obj["user_id"])
    except HANDLED_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nLast 7 days")
    click.echo("=" * 40)
    for day in week.days:
        click.echo(f"{day.date.strftime('%a %Y-%m-%d'):<20} {_money(day.total):>19}")
    click.echo("-" * 40)
    click.echo(f"{'Spent':<20} {_money(week.week_total):>19}")
    click.echo(f"{'Received':<20} {_money(week.weekly_budget):>19}")
    click.echo(f"{'Balance left':<20} {_money(week.balance_left):>19}")
    click.echo(f"{'Daily average':<20} {_money(week.daily_average):>19}")
    if week.highest_day is not None:
        click.echo(f"{'Highest day':<20} {str(week.highest_day.date):>19}")
        click.echo(f"{'Lowest day':<20} {str(week.lowest_day.date):>19}")


def register_commands(cli: click.Group) -> None:
    """Register analytics commands with main CLI."""
    cli.add_command(stats)
    cli.add_command(goal_stats)
    cli.add_command(weekly)
