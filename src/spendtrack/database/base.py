"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

from spendtrack.domain.entities import (
    BudgetGoal,
    GoalPriority,
    GoalStatus,
    PaymentMethod,
    Transaction,
    TransactionKind,
)


class Database(ABC):
    """Abstract store for transactions and budget goals.

    Implementations raise UpstreamFailureError when the backing store fails;
    no operation returns partial results.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        kind: TransactionKind,
        name: str,
        amount: Decimal,
        date: date,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        budget_goal_id: Optional[int] = None,
        time: Optional[str] = None,
    ) -> int:
        """Create an expense or payment. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, including soft-deleted ones."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        budget_goal_id: Optional[int] = None,
        time: Optional[str] = None,
        clear_budget_goal: bool = False,
    ) -> None:
        """Update the given transaction fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def soft_delete_transaction(self, transaction_id: int) -> None:
        """Flag a transaction as deleted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        kind: Optional[TransactionKind] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        budget_goal_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> list[Transaction]:
        """List live (not deleted) transactions with optional filters.

        Args:
            user_id: Owner of the transactions
            kind: Optional expense/payment filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            category: Optional exact category filter
            budget_goal_id: Optional budget goal filter
            limit: Optional page size
            offset: Rows to skip
            newest_first: Order by creation time descending instead of by date
        """
        pass

    @abstractmethod
    def count_transactions(
        self,
        user_id: int,
        kind: Optional[TransactionKind] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> int:
        """Count live transactions matching the filters."""
        pass

    @abstractmethod
    def sum_transactions(
        self,
        user_id: int,
        kind: TransactionKind,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Sum amounts of live transactions in an inclusive date range."""
        pass

    @abstractmethod
    def sum_transactions_by_category(
        self,
        user_id: int,
        kind: TransactionKind,
        start_date: date,
        end_date: date,
    ) -> list[tuple[Optional[str], Decimal]]:
        """Sum live transaction amounts per category label."""
        pass

    @abstractmethod
    def sum_expenses_by_goal(self, user_id: int, goal_ids: Sequence[int]) -> dict[int, Decimal]:
        """Sum live expenses linked to each of the given budget goals."""
        pass

    # Budget goal operations
    @abstractmethod
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
        """Create a budget goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_budget_goal(self, goal_id: int) -> Optional[BudgetGoal]:
        """Get budget goal by ID, including soft-deleted ones."""
        pass

    @abstractmethod
    def update_budget_goal(
        self,
        goal_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        remaining_balance: Optional[Decimal] = None,
        date: Optional[date] = None,
        category: Optional[str] = None,
        detail: Optional[str] = None,
        status: Optional[GoalStatus] = None,
        priority: Optional[GoalPriority] = None,
        progress: Optional[int] = None,
    ) -> None:
        """Update the given budget goal fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def soft_delete_budget_goal(self, goal_id: int) -> None:
        """Flag a budget goal as deleted."""
        pass

    @abstractmethod
    def list_budget_goals(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Sequence[GoalStatus]] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> list[BudgetGoal]:
        """List live budget goals with deadlines in an optional date range.

        Goals come back by deadline ascending unless newest_first is set.
        """
        pass

    @abstractmethod
    def count_budget_goals(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Sequence[GoalStatus]] = None,
        category: Optional[str] = None,
    ) -> int:
        """Count live budget goals matching the filters."""
        pass
