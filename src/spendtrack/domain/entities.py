"""Domain model entities for spendtrack.

These are pure data classes representing business concepts, independent of
database schema. Analytics results (intervals, stats, velocity) live here too
so that every layer passes the same immutable values around.
"""

from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

from spendtrack.domain.errors import InvalidArgumentError, range_reversed


class TransactionKind(str, Enum):
    """Direction of a recorded money movement."""

    EXPENSE = "expense"
    PAYMENT = "payment"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    ACHIEVED = "achieved"
    FAILED = "failed"
    TERMINATED = "terminated"
    OTHER = "other"


class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PeriodToken(str, Enum):
    """Symbolic name selecting a date-range rule."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    @property
    def days(self) -> Optional[int]:
        """Window length in days, or None for custom ranges."""
        return _PERIOD_DAYS.get(self)

    @property
    def noun(self) -> str:
        """Word used in velocity messages ("last week", "last month", ...)."""
        return _PERIOD_NOUNS.get(self, "period")


_PERIOD_DAYS = {
    PeriodToken.WEEKLY: 7,
    PeriodToken.MONTHLY: 30,
    PeriodToken.QUARTERLY: 90,
    PeriodToken.YEARLY: 365,
}

_PERIOD_NOUNS = {
    PeriodToken.WEEKLY: "week",
    PeriodToken.MONTHLY: "month",
    PeriodToken.QUARTERLY: "quarter",
    PeriodToken.YEARLY: "year",
}


class Bucketing(str, Enum):
    """Granularity of a spending trend series."""

    DAILY = "daily"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Transaction:
    """Expense or payment domain entity."""

    id: int
    user_id: int
    kind: TransactionKind
    name: str
    amount: Decimal
    date: date
    category: Optional[str]
    detail: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    budget_goal_id: Optional[int] = None
    time: Optional[str] = None
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BudgetGoal:
    """Budget goal domain entity."""

    id: int
    user_id: int
    name: str
    amount: Decimal
    remaining_balance: Decimal
    date: date
    category: Optional[str]
    detail: Optional[str] = None
    status: GoalStatus = GoalStatus.ACTIVE
    priority: GoalPriority = GoalPriority.MEDIUM
    progress: int = 0
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DateInterval:
    """Inclusive [start, end] range of UTC datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidArgumentError(range_reversed(self.start, self.end))

    @property
    def first_day(self) -> date:
        """First calendar day whose midnight lies inside the interval.

        An interval shorter than a day that contains no midnight covers the
        single calendar day of its end.
        """
        day = self.start.date()
        if datetime.combine(day, time.min, tzinfo=self.start.tzinfo) < self.start:
            day += timedelta(days=1)
        return min(day, self.last_day)

    @property
    def last_day(self) -> date:
        """Last calendar day whose midnight lies inside the interval."""
        return self.end.date()

    @property
    def day_count(self) -> int:
        """Inclusive number of calendar days covered, never less than 1."""
        return (self.last_day - self.first_day).days + 1

    def contains_day(self, day: date) -> bool:
        """Check whether a calendar date is one of the covered days."""
        return self.first_day <= day <= self.last_day


@dataclass(frozen=True)
class TrendBucket:
    """Single point of a trend series."""

    label: str
    amount: Decimal


@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount for one category label."""

    category: str
    amount: Decimal


@dataclass(frozen=True)
class PeriodStats:
    """Aggregated spending over an interval."""

    total_spent: Decimal
    daily_average: Decimal
    trend: tuple[TrendBucket, ...] = ()
    categories: tuple[CategoryTotal, ...] = ()
    tracking_streak: int = 0


@dataclass(frozen=True)
class VelocityResult:
    """Change in spending against the previous period."""

    percent_change: Optional[float]
    message: str


@dataclass(frozen=True)
class ExpenseStatsReport:
    """Expense analytics for one period: stats plus velocity."""

    period: PeriodToken
    interval: DateInterval
    stats: PeriodStats
    velocity: VelocityResult


@dataclass(frozen=True)
class GoalStatsReport:
    """Budget goal analytics for one period."""

    period: PeriodToken
    interval: DateInterval
    status_counts: dict[str, int]
    total_goals: int
    total_active_budget: Decimal
    avg_achieved_progress: float
    overdue_goals: tuple[BudgetGoal, ...] = ()
    closest_goals: tuple[BudgetGoal, ...] = ()


@dataclass(frozen=True)
class DayTotal:
    """Spending total for one calendar day."""

    date: date
    total: Decimal


@dataclass(frozen=True)
class WeeklyStats:
    """Dashboard view of the last seven days."""

    days: tuple[DayTotal, ...]
    week_total: Decimal
    weekly_budget: Decimal
    balance_left: Decimal
    daily_average: Decimal
    highest_day: Optional[DayTotal] = None
    lowest_day: Optional[DayTotal] = None


@dataclass(frozen=True)
class GoalWithSpending:
    """Budget goal together with the expenses booked against it."""

    goal: BudgetGoal
    current_spending: Decimal


@dataclass(frozen=True)
class GoalProgress:
    progress: int
    status: GoalStatus
    amount: Decimal
    current_amount: Decimal


@dataclass(frozen=True)
class GoalCategorySummary:
    """Budget goals of one category within a month."""

    category: str
    total_amount: Decimal
    average_progress: float
    goals: tuple[str, ...]
    count: int


@dataclass(frozen=True)
class MonthTotal:
    """Payments received in one calendar month."""

    month: int
    total: Decimal
    names: tuple[str, ...] = ()


T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a paginated listing."""

    items: tuple[T, ...]
    total: int
    page: int
    total_pages: int
