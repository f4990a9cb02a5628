"""Mapper functions to convert SQLAlchemy rows into domain entities.

Enumerated columns are stored as plain strings; this layer turns them back
into the domain enums.
"""

from decimal import Decimal

from spendtrack.domain import entities as domain
from spendtrack.database.models import (
    BudgetGoal as ORMBudgetGoal,
    Transaction as ORMTransaction,
)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    method = orm_transaction.payment_method
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        kind=domain.TransactionKind(orm_transaction.kind),
        name=orm_transaction.name,
        amount=Decimal(str(orm_transaction.amount)),
        date=orm_transaction.date,
        category=orm_transaction.category,
        detail=orm_transaction.detail,
        payment_method=domain.PaymentMethod(method) if method else None,
        budget_goal_id=orm_transaction.budget_goal_id,
        time=orm_transaction.time,
        is_deleted=orm_transaction.is_deleted,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def budget_goal_to_domain(orm_goal: ORMBudgetGoal) -> domain.BudgetGoal:
    """Convert SQLAlchemy BudgetGoal model to domain BudgetGoal entity."""
    return domain.BudgetGoal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        name=orm_goal.name,
        amount=Decimal(str(orm_goal.amount)),
        remaining_balance=Decimal(str(orm_goal.remaining_balance)),
        date=orm_goal.date,
        category=orm_goal.category,
        detail=orm_goal.detail,
        status=domain.GoalStatus(orm_goal.status),
        priority=domain.GoalPriority(orm_goal.priority),
        progress=orm_goal.progress,
        is_deleted=orm_goal.is_deleted,
        created_at=orm_goal.created_at,
        updated_at=orm_goal.updated_at,
    )
