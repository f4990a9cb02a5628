"""Tests for ExpenseService."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import OTHER_USER_ID, USER_ID
from spendtrack.domain.aggregation import UNCATEGORIZED
from spendtrack.domain.entities import PaymentMethod, TransactionKind
from spendtrack.domain.errors import NotFoundError, ValidationError

TODAY = date(2024, 6, 10)


def _create(service, **overrides):
    fields = {
        "user_id": USER_ID,
        "name": "Groceries",
        "amount": Decimal("42.50"),
        "date": date(2024, 6, 1),
        "category": "Food",
        "today": TODAY,
    }
    fields.update(overrides)
    return service.create_expense(**fields)


class TestCreateExpense:
    def test_create_and_get(self, expense_service):
        expense_id = _create(expense_service, detail=" weekly shop ", time="18:45")

        expense = expense_service.get_expense(USER_ID, expense_id)

        assert expense.id == expense_id
        assert expense.kind is TransactionKind.EXPENSE
        assert expense.name == "Groceries"
        assert expense.amount == Decimal("42.50")
        assert expense.date == date(2024, 6, 1)
        assert expense.category == "Food"
        assert expense.detail == "weekly shop"
        assert expense.time == "18:45"
        assert expense.payment_method is PaymentMethod.CASH
        assert expense.is_deleted is False

    def test_name_is_stripped(self, expense_service):
        expense_id = _create(expense_service, name="  Coffee  ")

        assert expense_service.get_expense(USER_ID, expense_id).name == "Coffee"

    @pytest.mark.parametrize("name", ["", "a", " b ", "x" * 101])
    def test_invalid_name(self, expense_service, name):
        with pytest.raises(ValidationError):
            _create(expense_service, name=name)

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), Decimal("Infinity")])
    def test_invalid_amount(self, expense_service, amount):
        with pytest.raises(ValidationError, match="Amount"):
            _create(expense_service, amount=amount)

    def test_future_date_rejected(self, expense_service):
        with pytest.raises(ValidationError, match="future"):
            _create(expense_service, date=date(2024, 6, 11))

    def test_today_is_allowed(self, expense_service):
        expense_id = _create(expense_service, date=TODAY)

        assert expense_service.get_expense(USER_ID, expense_id).date == TODAY

    @pytest.mark.parametrize("category", ["", "   ", None])
    def test_category_required(self, expense_service, category):
        with pytest.raises(ValidationError, match="Category"):
            _create(expense_service, category=category)

    def test_detail_too_long(self, expense_service):
        with pytest.raises(ValidationError, match="Detail"):
            _create(expense_service, detail="x" * 501)

    @pytest.mark.parametrize("value", ["7:30", "24:00", "12:60", "noon"])
    def test_invalid_time(self, expense_service, value):
        with pytest.raises(ValidationError, match="time"):
            _create(expense_service, time=value)

    def test_unknown_payment_method(self, expense_service):
        with pytest.raises(ValueError):
            _create(expense_service, payment_method="cheque")

    def test_budget_goal_must_belong_to_user(self, expense_service, goal_service):
        goal_id = goal_service.create_budget_goal(
            OTHER_USER_ID, "Holiday", Decimal("500"), date(2024, 8, 1)
        )

        with pytest.raises(NotFoundError, match="Budget goal"):
            _create(expense_service, budget_goal_id=goal_id)

    def test_linked_to_budget_goal(self, expense_service, goal_service):
        goal_id = goal_service.create_budget_goal(
            USER_ID, "Holiday", Decimal("500"), date(2024, 8, 1)
        )

        expense_id = _create(expense_service, budget_goal_id=goal_id)

        assert expense_service.get_expense(USER_ID, expense_id).budget_goal_id == goal_id


class TestGetExpense:
    def test_missing(self, expense_service):
        with pytest.raises(NotFoundError, match="Expense 999 not found"):
            expense_service.get_expense(USER_ID, 999)

    def test_other_users_expense_is_not_found(self, expense_service):
        expense_id = _create(expense_service)

        with pytest.raises(NotFoundError):
            expense_service.get_expense(OTHER_USER_ID, expense_id)

    def test_payment_is_not_an_expense(self, expense_service, payment_service):
        payment_id = payment_service.create_payment(
            USER_ID, "Salary", Decimal("1000"), date(2024, 6, 1)
        )

        with pytest.raises(NotFoundError):
            expense_service.get_expense(USER_ID, payment_id)


class TestListExpenses:
    def test_pagination_newest_first(self, expense_service):
        ids = [_create(expense_service, name=f"Item {n}") for n in range(5)]

        first = expense_service.list_expenses(USER_ID, page=1, limit=2)
        last = expense_service.list_expenses(USER_ID, page=3, limit=2)

        assert first.total == 5
        assert first.total_pages == 3
        assert [txn.id for txn in first.items] == [ids[4], ids[3]]
        assert [txn.id for txn in last.items] == [ids[0]]

    def test_date_range_and_category_filters(self, expense_service):
        _create(expense_service, date=date(2024, 5, 1))
        in_range = _create(expense_service, date=date(2024, 6, 2))
        _create(expense_service, date=date(2024, 6, 3), category="Travel")

        page = expense_service.list_expenses(
            USER_ID, start_date=date(2024, 6, 1), end_date=date(2024, 6, 30), category="Food"
        )

        assert [txn.id for txn in page.items] == [in_range]
        assert page.total == 1

    def test_single_bound_is_ignored(self, expense_service):
        _create(expense_service, date=date(2024, 5, 1))

        page = expense_service.list_expenses(USER_ID, start_date=date(2024, 6, 1))

        assert page.total == 1

    def test_empty(self, expense_service):
        page = expense_service.list_expenses(USER_ID)

        assert page.items == ()
        assert page.total == 0
        assert page.total_pages == 0

    def test_invalid_page(self, expense_service):
        with pytest.raises(ValidationError):
            expense_service.list_expenses(USER_ID, page=0)


class TestUpdateExpense:
    def test_update_fields(self, expense_service):
        expense_id = _create(expense_service)

        updated = expense_service.update_expense(
            USER_ID,
            expense_id,
            amount=Decimal("10"),
            category="Dining",
            payment_method=PaymentMethod.DEBIT_CARD,
            today=TODAY,
        )

        assert updated.amount == Decimal("10")
        assert updated.category == "Dining"
        assert updated.payment_method is PaymentMethod.DEBIT_CARD
        assert updated.name == "Groceries"

    def test_clear_budget_goal(self, expense_service, goal_service):
        goal_id = goal_service.create_budget_goal(USER_ID, "Trip", Decimal("300"), date(2024, 7, 1))
        expense_id = _create(expense_service, budget_goal_id=goal_id)

        updated = expense_service.update_expense(USER_ID, expense_id, clear_budget_goal=True)

        assert updated.budget_goal_id is None

    def test_validation_applies(self, expense_service):
        expense_id = _create(expense_service)

        with pytest.raises(ValidationError):
            expense_service.update_expense(USER_ID, expense_id, date=date(2030, 1, 1), today=TODAY)

    def test_missing(self, expense_service):
        with pytest.raises(NotFoundError):
            expense_service.update_expense(USER_ID, 42, name="Nothing")


class TestDeleteExpense:
    def test_soft_delete_hides_expense(self, expense_service, temp_db):
        expense_id = _create(expense_service)

        expense_service.delete_expense(USER_ID, expense_id)

        with pytest.raises(NotFoundError):
            expense_service.get_expense(USER_ID, expense_id)
        assert temp_db.get_transaction(expense_id).is_deleted is True
        assert expense_service.list_expenses(USER_ID).total == 0

    def test_delete_twice(self, expense_service):
        expense_id = _create(expense_service)
        expense_service.delete_expense(USER_ID, expense_id)

        with pytest.raises(NotFoundError):
            expense_service.delete_expense(USER_ID, expense_id)


class TestMonthlySummary:
    def test_category_totals_descending(self, expense_service, add_expense):
        add_expense(10, date(2024, 6, 1), category="Food")
        add_expense(25, date(2024, 6, 2), category="Food")
        add_expense(50, date(2024, 6, 30), category="Rent")
        add_expense(5, date(2024, 6, 15), category=None)
        add_expense(99, date(2024, 7, 1), category="Rent")

        summary = expense_service.get_monthly_summary(USER_ID, 2024, 6)

        assert [(item.category, item.amount) for item in summary] == [
            ("Rent", Decimal("50")),
            ("Food", Decimal("35")),
            (UNCATEGORIZED, Decimal("5")),
        ]

    def test_invalid_month(self, expense_service):
        with pytest.raises(ValidationError, match="Month"):
            expense_service.get_monthly_summary(USER_ID, 2024, 13)


class TestExpensesByDateRange:
    def test_inclusive_range(self, expense_service, add_expense):
        add_expense(1, date(2024, 6, 1))
        add_expense(2, date(2024, 6, 30))
        add_expense(3, date(2024, 7, 1))

        expenses = expense_service.get_expenses_by_date_range(
            USER_ID, date(2024, 6, 1), date(2024, 6, 30)
        )

        assert [txn.amount for txn in expenses] == [Decimal("1"), Decimal("2")]

    def test_both_bounds_required(self, expense_service):
        with pytest.raises(ValidationError, match="required"):
            expense_service.get_expenses_by_date_range(USER_ID, date(2024, 6, 1), None)

    def test_reversed_range(self, expense_service):
        with pytest.raises(ValidationError):
            expense_service.get_expenses_by_date_range(
                USER_ID, date(2024, 6, 30), date(2024, 6, 1)
            )
