"""Budget goal domain service."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from dateutil.relativedelta import relativedelta

from spendtrack.database.base import Database
from spendtrack.domain.aggregation import UNCATEGORIZED
from spendtrack.domain.entities import (
    BudgetGoal,
    GoalCategorySummary,
    GoalPriority,
    GoalProgress,
    GoalStatus,
    GoalWithSpending,
    Page,
    Transaction,
    TransactionKind,
)
from spendtrack.domain.errors import NotFoundError, ValidationError, budget_goal_not_found
from spendtrack.domain.transaction import (
    total_pages,
    validate_amount,
    validate_detail,
    validate_name,
    validate_page,
)

logger = logging.getLogger(__name__)

CATEGORY_MAX_LENGTH = 60


def _validate_category(category: Optional[str]) -> Optional[str]:
    if category is None:
        return None
    cleaned = category.strip()
    if len(cleaned) > CATEGORY_MAX_LENGTH:
        raise ValidationError(f"Category cannot exceed {CATEGORY_MAX_LENGTH} characters")
    return cleaned or None


def progress_percent(current_amount: Decimal, goal_amount: Decimal) -> int:
    """Share of the goal reached, rounded half-up and capped at 100."""
    ratio = Decimal(current_amount) / Decimal(goal_amount) * 100
    return min(100, int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


class BudgetGoalService:
    """Service for managing budget goals."""

    def __init__(self, db: Database):
        """Initialize budget goal service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, user_id: int, goal_id: int) -> BudgetGoal:
        goal = self.db.get_budget_goal(goal_id)
        if goal is None or goal.is_deleted or goal.user_id != user_id:
            raise NotFoundError(budget_goal_not_found(goal_id))
        return goal

    def create_budget_goal(
        self,
        user_id: int,
        name: str,
        amount: Decimal,
        date: date,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        status: GoalStatus = GoalStatus.ACTIVE,
        priority: GoalPriority = GoalPriority.MEDIUM,
    ) -> int:
        """Create a budget goal; its remaining balance starts at the full amount.

        Args:
            user_id: Owner of the goal
            name: Goal name, 2 to 100 characters
            amount: Budgeted amount, greater than zero
            date: Deadline of the goal
            category: Optional category label, up to 60 characters
            detail: Optional note
            status: Initial status
            priority: Priority

        Returns:
            Budget goal ID
        """
        goal_id = self.db.create_budget_goal(
            user_id=user_id,
            name=validate_name(name, "Goal name"),
            amount=validate_amount(amount),
            date=date,
            category=_validate_category(category),
            detail=validate_detail(detail),
            status=GoalStatus(status),
            priority=GoalPriority(priority),
        )
        logger.info("Created budget goal %s for user %s", goal_id, user_id)
        return goal_id

    def get_budget_goal(self, user_id: int, goal_id: int) -> BudgetGoal:
        """Get a budget goal by ID.

        Raises:
            NotFoundError: If the goal does not exist for this user
        """
        return self._require(user_id, goal_id)

    def list_budget_goals(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[GoalStatus] = None,
        category: Optional[str] = None,
    ) -> Page[GoalWithSpending]:
        """List goals newest first, each with the expenses booked against it."""
        validate_page(page, limit)
        if start_date is None or end_date is None:
            start_date = end_date = None
        statuses = [GoalStatus(status)] if status is not None else None

        total = self.db.count_budget_goals(
            user_id, start_date=start_date, end_date=end_date, statuses=statuses, category=category
        )
        goals = self.db.list_budget_goals(
            user_id,
            start_date=start_date,
            end_date=end_date,
            statuses=statuses,
            category=category,
            limit=limit,
            offset=(page - 1) * limit,
            newest_first=True,
        )
        spending = self.db.sum_expenses_by_goal(user_id, [goal.id for goal in goals])
        items = tuple(
            GoalWithSpending(goal=goal, current_spending=spending.get(goal.id, Decimal("0")))
            for goal in goals
        )
        return Page(items=items, total=total, page=page, total_pages=total_pages(total, limit))

    def update_budget_goal(
        self,
        user_id: int,
        goal_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        status: Optional[GoalStatus] = None,
        priority: Optional[GoalPriority] = None,
    ) -> BudgetGoal:
        """Update the provided fields of a goal and return it."""
        self._require(user_id, goal_id)
        self.db.update_budget_goal(
            goal_id,
            name=validate_name(name, "Goal name") if name is not None else None,
            amount=validate_amount(amount) if amount is not None else None,
            date=date,
            category=_validate_category(category),
            detail=validate_detail(detail),
            status=GoalStatus(status) if status is not None else None,
            priority=GoalPriority(priority) if priority is not None else None,
        )
        logger.info("Updated budget goal %s for user %s", goal_id, user_id)
        return self._require(user_id, goal_id)

    def delete_budget_goal(self, user_id: int, goal_id: int) -> None:
        """Soft-delete a budget goal."""
        self._require(user_id, goal_id)
        self.db.soft_delete_budget_goal(goal_id)
        logger.info("Deleted budget goal %s for user %s", goal_id, user_id)

    def get_progress(self, user_id: int, goal_id: int) -> GoalProgress:
        goal = self._require(user_id, goal_id)
        return GoalProgress(
            progress=goal.progress,
            status=goal.status,
            amount=goal.amount,
            current_amount=Decimal(goal.progress) * goal.amount / 100,
        )

    def record_progress(self, user_id: int, goal_id: int, current_amount: Decimal) -> BudgetGoal:
        """Store progress toward a goal; reaching 100% marks it achieved."""
        goal = self._require(user_id, goal_id)
        if current_amount < 0:
            raise ValidationError("Current amount cannot be negative")

        progress = progress_percent(current_amount, goal.amount)
        status = GoalStatus.ACHIEVED if progress >= 100 else None
        self.db.update_budget_goal(goal_id, progress=progress, status=status)
        return self._require(user_id, goal_id)

    def get_expenses_for_goal(self, user_id: int, goal_id: int) -> list[Transaction]:
        """Expenses booked against a goal, most recent date first."""
        self._require(user_id, goal_id)
        expenses = self.db.list_transactions(
            user_id, TransactionKind.EXPENSE, budget_goal_id=goal_id
        )
        return sorted(expenses, key=lambda txn: (txn.date, txn.id), reverse=True)

    def get_monthly_summary(self, user_id: int, year: int, month: int) -> list[GoalCategorySummary]:
        """Goals with deadlines in a calendar month, grouped by category."""
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        first = date(year, month, 1)
        goals = self.db.list_budget_goals(
            user_id, start_date=first, end_date=first + relativedelta(months=1, days=-1)
        )

        grouped: dict[str, list[BudgetGoal]] = {}
        for goal in goals:
            grouped.setdefault(goal.category or UNCATEGORIZED, []).append(goal)

        return [
            GoalCategorySummary(
                category=category,
                total_amount=sum((goal.amount for goal in members), Decimal("0")),
                average_progress=sum(goal.progress for goal in members) / len(members),
                goals=tuple(goal.name for goal in members),
                count=len(members),
            )
            for category, members in grouped.items()
        ]

    def get_budget_goals_by_date_range(
        self, user_id: int, start_date: Optional[date], end_date: Optional[date]
    ) -> list[BudgetGoal]:
        """Goals with deadlines in an inclusive date range.

        Raises:
            ValidationError: If either bound is missing
        """
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        return self.db.list_budget_goals(user_id, start_date=start_date, end_date=end_date)
