"""Shared pytest fixtures for spendtrack tests."""

import os
import tempfile
from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from spendtrack.database.factories import create_sqlite_database
from spendtrack.domain.analytics import AnalyticsService
from spendtrack.domain.budget_goal import BudgetGoalService
from spendtrack.domain.entities import Transaction, TransactionKind
from spendtrack.domain.expense import ExpenseService
from spendtrack.domain.payment import PaymentService

USER_ID = 1
OTHER_USER_ID = 2

# Fixed reference moment used by analytics tests
NOW = datetime(2024, 6, 10, 15, 30, tzinfo=UTC)
TODAY = NOW.date()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def goal_service(temp_db):
    """Create a BudgetGoalService with a temporary database."""
    return BudgetGoalService(temp_db)


@pytest.fixture
def analytics_service(temp_db):
    """Create an AnalyticsService whose clock is pinned to NOW."""
    return AnalyticsService(temp_db, clock=lambda: NOW)


@pytest.fixture
def add_expense(temp_db):
    """Insert an expense straight into the store, bypassing validation."""

    def _add(amount, day, category="Food", name="Expense", user_id=USER_ID, **kwargs):
        return temp_db.create_transaction(
            user_id=user_id,
            kind=TransactionKind.EXPENSE,
            name=name,
            amount=Decimal(str(amount)),
            date=day,
            category=category,
            **kwargs,
        )

    return _add


@pytest.fixture
def add_payment(temp_db):
    """Insert a payment straight into the store."""

    def _add(amount, day, name="Salary", user_id=USER_ID):
        return temp_db.create_transaction(
            user_id=user_id,
            kind=TransactionKind.PAYMENT,
            name=name,
            amount=Decimal(str(amount)),
            date=day,
        )

    return _add


@pytest.fixture
def make_transaction():
    """Build in-memory Transaction entities for pure aggregation tests."""
    counter = iter(range(1, 10_000))

    def _make(amount, day: date, category="Food", is_deleted=False):
        return Transaction(
            id=next(counter),
            user_id=USER_ID,
            kind=TransactionKind.EXPENSE,
            name="Expense",
            amount=amount,
            date=day,
            category=category,
            is_deleted=is_deleted,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
