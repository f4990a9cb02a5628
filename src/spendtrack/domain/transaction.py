"""Shared behaviour of the expense and payment services."""

import logging
import math
import re
from datetime import date
from decimal import Decimal
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain.entities import Page, Transaction, TransactionKind
from spendtrack.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DETAIL_MAX_LENGTH = 500
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_name(name: Optional[str], label: str = "Name") -> str:
    """Return the stripped name or raise ValidationError."""
    cleaned = (name or "").strip()
    if len(cleaned) < NAME_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {NAME_MIN_LENGTH} characters long")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationError(f"{label} cannot exceed {NAME_MAX_LENGTH} characters")
    return cleaned


def validate_amount(amount: Decimal) -> Decimal:
    if amount is None or not Decimal(amount).is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    return Decimal(amount)


def validate_detail(detail: Optional[str]) -> Optional[str]:
    if detail is None:
        return None
    detail = detail.strip()
    if len(detail) > DETAIL_MAX_LENGTH:
        raise ValidationError(f"Detail cannot exceed {DETAIL_MAX_LENGTH} characters")
    return detail


def validate_time(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not TIME_PATTERN.match(value):
        raise ValidationError(f"Invalid time format '{value}' (expected HH:MM)")
    return value


def validate_page(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("Page must be 1 or greater")
    if limit < 1:
        raise ValidationError("Limit must be 1 or greater")


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


class TransactionService:
    """Common operations for one kind of transaction.

    Subclasses set ``kind`` and add their own validation and summaries.
    """

    kind: TransactionKind

    def __init__(self, db: Database):
        """Initialize the service.

        Args:
            db: Database instance
        """
        self.db = db

    def _not_found(self, transaction_id: int) -> str:
        return f"Transaction {transaction_id} not found"

    def _require(self, user_id: int, transaction_id: int) -> Transaction:
        """Return a live transaction of this kind owned by the user."""
        txn = self.db.get_transaction(transaction_id)
        if (
            txn is None
            or txn.is_deleted
            or txn.user_id != user_id
            or txn.kind != self.kind
        ):
            raise NotFoundError(self._not_found(transaction_id))
        return txn

    def get_transaction(self, user_id: int, transaction_id: int) -> Transaction:
        """Get a transaction by ID.

        Raises:
            NotFoundError: If it does not exist, is deleted or belongs to another user
        """
        return self._require(user_id, transaction_id)

    def list_transactions(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Page[Transaction]:
        """List transactions newest first, one page at a time.

        The date filter applies only when both bounds are given.
        """
        validate_page(page, limit)
        if start_date is None or end_date is None:
            start_date = end_date = None

        total = self.db.count_transactions(
            user_id, self.kind, start_date=start_date, end_date=end_date, category=category
        )
        items = self.db.list_transactions(
            user_id,
            self.kind,
            start_date=start_date,
            end_date=end_date,
            category=category,
            limit=limit,
            offset=(page - 1) * limit,
            newest_first=True,
        )
        return Page(items=tuple(items), total=total, page=page, total_pages=total_pages(total, limit))

    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        """Soft-delete a transaction so it drops out of every report."""
        self._require(user_id, transaction_id)
        self.db.soft_delete_transaction(transaction_id)
        logger.info("Deleted %s %s for user %s", self.kind.value, transaction_id, user_id)

    def get_by_date_range(
        self, user_id: int, start_date: Optional[date], end_date: Optional[date]
    ) -> list[Transaction]:
        """All transactions in an inclusive date range, oldest first.

        Raises:
            ValidationError: If either bound is missing or the range is reversed
        """
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        if end_date < start_date:
            raise ValidationError(f"End date {end_date} is before start date {start_date}")
        return self.db.list_transactions(
            user_id, self.kind, start_date=start_date, end_date=end_date
        )
