"""Period analytics over expenses, payments and budget goals."""

import logging
from datetime import datetime, time, timedelta, UTC
from decimal import Decimal
from typing import Callable, Optional, Union

from spendtrack.database.base import Database
from spendtrack.domain import aggregation, velocity
from spendtrack.domain.entities import (
    BudgetGoal,
    DayTotal,
    ExpenseStatsReport,
    GoalStatsReport,
    GoalStatus,
    PeriodToken,
    TransactionKind,
    WeeklyStats,
)
from spendtrack.domain.errors import InvalidArgumentError
from spendtrack.domain.periods import (
    Moment,
    as_utc,
    compute_range,
    parse_period,
    shift_interval_back,
)
from spendtrack.utils.amount_parser import coerce_amount

logger = logging.getLogger(__name__)

DEFAULT_CLOSEST_COUNT = 3
CLOSED_GOAL_STATUSES = (GoalStatus.ACHIEVED, GoalStatus.TERMINATED, GoalStatus.FAILED)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _deadline(goal: BudgetGoal) -> datetime:
    """Goal deadline as UTC midnight of its date."""
    return datetime.combine(goal.date, time.min, tzinfo=UTC)


def _by_deadline(goal: BudgetGoal):
    return goal.date, goal.id


class AnalyticsService:
    """Service computing dashboard analytics for one user at a time.

    The service holds no per-request state; ``clock`` only supplies the
    default "now" and can be replaced in tests.
    """

    def __init__(self, db: Database, clock: Optional[Callable[[], datetime]] = None):
        """Initialize analytics service.

        Args:
            db: Database instance
            clock: Callable returning the current UTC time
        """
        self.db = db
        self.clock = clock or _utcnow

    def _now(self, now: Optional[Moment]) -> datetime:
        return as_utc(now) if now is not None else as_utc(self.clock())

    def get_stats_by_period(
        self,
        user_id: int,
        period: Union[str, PeriodToken],
        start_date: Optional[Moment] = None,
        end_date: Optional[Moment] = None,
        now: Optional[Moment] = None,
    ) -> ExpenseStatsReport:
        """Expense statistics for a period, compared with the period before.

        Args:
            user_id: User whose expenses are analysed
            period: weekly, monthly, quarterly, yearly or custom
            start_date: Start bound for custom periods
            end_date: End bound for custom periods
            now: Reference time (defaults to the service clock)

        Returns:
            ExpenseStatsReport with totals, trend, categories and velocity

        Raises:
            InvalidArgumentError: For an unknown period or a bad custom range
            UpstreamFailureError: If the store fails
        """
        token = parse_period(period)
        interval = compute_range(token, self._now(now), start_date, end_date)

        logger.debug(
            "Querying expenses for user %s from %s to %s", user_id, interval.start, interval.end
        )
        expenses = self.db.list_transactions(
            user_id,
            TransactionKind.EXPENSE,
            start_date=interval.first_day,
            end_date=interval.last_day,
        )
        stats = aggregation.aggregate(expenses, interval, aggregation.bucketing_for(token))

        previous_total = Decimal("0")
        if token is not PeriodToken.CUSTOM:
            previous = shift_interval_back(interval, token)
            logger.debug(
                "Querying previous %s total for user %s from %s to %s",
                token.noun,
                user_id,
                previous.start,
                previous.end,
            )
            previous_total = self.db.sum_transactions(
                user_id,
                TransactionKind.EXPENSE,
                start_date=previous.first_day,
                end_date=previous.last_day,
            )

        return ExpenseStatsReport(
            period=token,
            interval=interval,
            stats=stats,
            velocity=velocity.compare(token, stats.total_spent, previous_total),
        )

    def get_goal_stats_by_period(
        self,
        user_id: int,
        period: Union[str, PeriodToken],
        start_date: Optional[Moment] = None,
        end_date: Optional[Moment] = None,
        closest_count: int = DEFAULT_CLOSEST_COUNT,
        now: Optional[Moment] = None,
    ) -> GoalStatsReport:
        """Budget goal statistics for goals with deadlines inside a period.

        Overdue goals have a deadline before ``now`` and are not achieved,
        terminated or failed. Closest goals are active goals with a deadline
        at or after ``now``, soonest first, at most ``closest_count`` of them
        (all of them when ``closest_count`` is 0).

        Raises:
            InvalidArgumentError: For an unknown period, a bad custom range or
                a negative closest_count
            UpstreamFailureError: If the store fails
        """
        token = parse_period(period)
        if closest_count < 0:
            raise InvalidArgumentError("closest_count cannot be negative")
        current = self._now(now)
        interval = compute_range(token, current, start_date, end_date)

        logger.debug(
            "Querying budget goals for user %s from %s to %s", user_id, interval.start, interval.end
        )
        goals = self.db.list_budget_goals(
            user_id, start_date=interval.first_day, end_date=interval.last_day
        )

        status_counts: dict[str, int] = {}
        total_active_budget = Decimal("0")
        achieved_progress: list[int] = []
        for goal in goals:
            status_counts[goal.status.value] = status_counts.get(goal.status.value, 0) + 1
            if goal.status is GoalStatus.ACTIVE:
                total_active_budget += goal.amount
            elif goal.status is GoalStatus.ACHIEVED:
                achieved_progress.append(goal.progress)

        overdue = [
            goal
            for goal in goals
            if _deadline(goal) < current and goal.status not in CLOSED_GOAL_STATUSES
        ]
        closest = [
            goal
            for goal in goals
            if _deadline(goal) >= current and goal.status is GoalStatus.ACTIVE
        ]

        return GoalStatsReport(
            period=token,
            interval=interval,
            status_counts=status_counts,
            total_goals=len(goals),
            total_active_budget=total_active_budget,
            avg_achieved_progress=(
                sum(achieved_progress) / len(achieved_progress) if achieved_progress else 0.0
            ),
            overdue_goals=tuple(sorted(overdue, key=_by_deadline)),
            closest_goals=tuple(sorted(closest, key=_by_deadline)[: closest_count or None]),
        )

    def get_weekly_stats(self, user_id: int, now: Optional[Moment] = None) -> WeeklyStats:
        """Day-by-day spending for the last seven days against income received.

        Returns:
            WeeklyStats where ``weekly_budget`` is the payment total over the
            same seven days
        """
        interval = compute_range(PeriodToken.WEEKLY, self._now(now))
        expenses = self.db.list_transactions(
            user_id,
            TransactionKind.EXPENSE,
            start_date=interval.first_day,
            end_date=interval.last_day,
        )
        weekly_budget = self.db.sum_transactions(
            user_id,
            TransactionKind.PAYMENT,
            start_date=interval.first_day,
            end_date=interval.last_day,
        )

        totals = {
            interval.first_day + timedelta(days=offset): Decimal("0")
            for offset in range(interval.day_count)
        }
        for expense in aggregation.in_interval(expenses, interval):
            totals[expense.date] += coerce_amount(expense.amount)
        days = tuple(DayTotal(date=day, total=total) for day, total in totals.items())

        week_total = sum((day.total for day in days), Decimal("0"))
        spending_days = [day for day in days if day.total > 0]
        return WeeklyStats(
            days=days,
            week_total=week_total,
            weekly_budget=weekly_budget,
            balance_left=weekly_budget - week_total,
            daily_average=week_total / len(days),
            highest_day=max(spending_days, key=lambda day: day.total) if spending_days else None,
            lowest_day=min(spending_days, key=lambda day: day.total) if spending_days else None,
        )
