"""Payment (income) domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from spendtrack.domain.entities import MonthTotal, Page, Transaction, TransactionKind
from spendtrack.domain.errors import payment_not_found
from spendtrack.domain.transaction import (
    TransactionService,
    validate_amount,
    validate_detail,
    validate_name,
)

logger = logging.getLogger(__name__)


class PaymentService(TransactionService):
    """Service for managing payments received by a user."""

    kind = TransactionKind.PAYMENT

    def _not_found(self, transaction_id: int) -> str:
        return payment_not_found(transaction_id)

    def create_payment(
        self,
        user_id: int,
        name: str,
        amount: Decimal,
        date: date,
        category: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> int:
        """Record a payment.

        Args:
            user_id: Owner of the payment
            name: Short description, 2 to 100 characters
            amount: Amount received, greater than zero
            date: Day the payment was received
            category: Optional payment type (salary, refund, ...)
            detail: Optional note

        Returns:
            Payment ID
        """
        payment_id = self.db.create_transaction(
            user_id=user_id,
            kind=self.kind,
            name=validate_name(name, "Payment name"),
            amount=validate_amount(amount),
            date=date,
            category=(category or "").strip() or None,
            detail=validate_detail(detail),
        )
        logger.info("Created payment %s for user %s", payment_id, user_id)
        return payment_id

    def get_payment(self, user_id: int, payment_id: int) -> Transaction:
        return self.get_transaction(user_id, payment_id)

    def list_payments(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Page[Transaction]:
        return self.list_transactions(
            user_id,
            page=page,
            limit=limit,
            start_date=start_date,
            end_date=end_date,
            category=category,
        )

    def update_payment(
        self,
        user_id: int,
        payment_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> Transaction:
        """Update the provided fields of a payment and return it."""
        self._require(user_id, payment_id)
        self.db.update_transaction(
            payment_id,
            name=validate_name(name, "Payment name") if name is not None else None,
            amount=validate_amount(amount) if amount is not None else None,
            date=date,
            category=category.strip() if category is not None else None,
            detail=validate_detail(detail),
        )
        logger.info("Updated payment %s for user %s", payment_id, user_id)
        return self.get_transaction(user_id, payment_id)

    def delete_payment(self, user_id: int, payment_id: int) -> None:
        self.delete_transaction(user_id, payment_id)

    def get_monthly_summary(self, user_id: int, year: int) -> list[MonthTotal]:
        """Payment totals per calendar month of a year.

        Only months with payments are returned, in calendar order.
        """
        payments = self.db.list_transactions(
            user_id,
            self.kind,
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
        )
        totals: dict[int, Decimal] = {}
        names: dict[int, list[str]] = {}
        for payment in payments:
            month = payment.date.month
            totals[month] = totals.get(month, Decimal("0")) + payment.amount
            names.setdefault(month, []).append(payment.name)
        return [
            MonthTotal(month=month, total=totals[month], names=tuple(names[month]))
            for month in sorted(totals)
        ]

    def get_payments_by_date_range(
        self, user_id: int, start_date: Optional[date], end_date: Optional[date]
    ) -> list[Transaction]:
        return self.get_by_date_range(user_id, start_date, end_date)
