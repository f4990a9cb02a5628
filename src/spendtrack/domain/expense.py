"""Expense domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from spendtrack.domain.aggregation import UNCATEGORIZED
from spendtrack.domain.entities import (
    CategoryTotal,
    Page,
    PaymentMethod,
    Transaction,
    TransactionKind,
)
from spendtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_goal_not_found,
    expense_not_found,
)
from spendtrack.domain.transaction import (
    TransactionService,
    validate_amount,
    validate_detail,
    validate_name,
    validate_time,
)

logger = logging.getLogger(__name__)


def _today() -> date:
    return date.today()


def _validate_category(category: Optional[str]) -> str:
    cleaned = (category or "").strip()
    if not cleaned:
        raise ValidationError("Category is required")
    return cleaned


def _validate_expense_date(expense_date: date, today: date) -> date:
    if expense_date > today:
        raise ValidationError("Expense date cannot be in the future")
    return expense_date


class ExpenseService(TransactionService):
    """Service for managing user expenses."""

    kind = TransactionKind.EXPENSE

    def _not_found(self, transaction_id: int) -> str:
        return expense_not_found(transaction_id)

    def _check_goal(self, user_id: int, budget_goal_id: int) -> None:
        goal = self.db.get_budget_goal(budget_goal_id)
        if goal is None or goal.is_deleted or goal.user_id != user_id:
            raise NotFoundError(budget_goal_not_found(budget_goal_id))

    def create_expense(
        self,
        user_id: int,
        name: str,
        amount: Decimal,
        date: date,
        category: str,
        detail: Optional[str] = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        budget_goal_id: Optional[int] = None,
        time: Optional[str] = None,
        today: Optional[date] = None,
    ) -> int:
        """Record a new expense.

        Args:
            user_id: Owner of the expense
            name: Short description, 2 to 100 characters
            amount: Amount spent, greater than zero
            date: Day the expense occurred, not in the future
            category: Category label (any non-empty string)
            detail: Optional longer note, up to 500 characters
            payment_method: How it was paid
            budget_goal_id: Optional budget goal to book the expense against
            time: Optional time of day as HH:MM
            today: Reference day for the future-date check (defaults to today)

        Returns:
            Expense ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the budget goal does not exist for this user
        """
        name = validate_name(name, "Expense name")
        amount = validate_amount(amount)
        _validate_expense_date(date, today or _today())
        category = _validate_category(category)
        detail = validate_detail(detail)
        time = validate_time(time)
        if budget_goal_id is not None:
            self._check_goal(user_id, budget_goal_id)

        expense_id = self.db.create_transaction(
            user_id=user_id,
            kind=self.kind,
            name=name,
            amount=amount,
            date=date,
            category=category,
            detail=detail,
            payment_method=PaymentMethod(payment_method),
            budget_goal_id=budget_goal_id,
            time=time,
        )
        logger.info("Created expense %s for user %s", expense_id, user_id)
        return expense_id

    def get_expense(self, user_id: int, expense_id: int) -> Transaction:
        """Get an expense by ID.

        Raises:
            NotFoundError: If the expense does not exist for this user
        """
        return self.get_transaction(user_id, expense_id)

    def list_expenses(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Page[Transaction]:
        """List expenses newest first with optional date-range and category filters."""
        return self.list_transactions(
            user_id,
            page=page,
            limit=limit,
            start_date=start_date,
            end_date=end_date,
            category=category,
        )

    def update_expense(
        self,
        user_id: int,
        expense_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        budget_goal_id: Optional[int] = None,
        time: Optional[str] = None,
        clear_budget_goal: bool = False,
        today: Optional[date] = None,
    ) -> Transaction:
        """Update the provided fields of an expense.

        Returns:
            The updated expense

        Raises:
            NotFoundError: If the expense or budget goal does not exist
            ValidationError: If any provided field is invalid
        """
        self._require(user_id, expense_id)

        if name is not None:
            name = validate_name(name, "Expense name")
        if amount is not None:
            amount = validate_amount(amount)
        if date is not None:
            _validate_expense_date(date, today or _today())
        if category is not None:
            category = _validate_category(category)
        if detail is not None:
            detail = validate_detail(detail)
        if time is not None:
            time = validate_time(time)
        if budget_goal_id is not None and not clear_budget_goal:
            self._check_goal(user_id, budget_goal_id)

        self.db.update_transaction(
            expense_id,
            name=name,
            amount=amount,
            date=date,
            category=category,
            detail=detail,
            payment_method=PaymentMethod(payment_method) if payment_method else None,
            budget_goal_id=budget_goal_id,
            time=time,
            clear_budget_goal=clear_budget_goal,
        )
        logger.info("Updated expense %s for user %s", expense_id, user_id)
        return self.get_transaction(user_id, expense_id)

    def delete_expense(self, user_id: int, expense_id: int) -> None:
        """Soft-delete an expense."""
        self.delete_transaction(user_id, expense_id)

    def get_monthly_summary(self, user_id: int, year: int, month: int) -> list[CategoryTotal]:
        """Category totals for one calendar month, largest first.

        Raises:
            ValidationError: If month is outside 1..12
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        first = date(year, month, 1)
        last = first + relativedelta(months=1, days=-1)

        totals: dict[str, Decimal] = {}
        for category, amount in self.db.sum_transactions_by_category(
            user_id, self.kind, first, last
        ):
            label = (category or "").strip() or UNCATEGORIZED
            totals[label] = totals.get(label, Decimal("0")) + amount
        ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return [CategoryTotal(category=label, amount=amount) for label, amount in ordered]

    def get_expenses_by_date_range(
        self, user_id: int, start_date: Optional[date], end_date: Optional[date]
    ) -> list[Transaction]:
        """All expenses in an inclusive date range.

        Raises:
            ValidationError: If either bound is missing
        """
        return self.get_by_date_range(user_id, start_date, end_date)
