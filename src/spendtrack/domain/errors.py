"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidArgumentError(ValidationError):
    """Invalid analytics argument (unknown period, bad or missing range)."""


class NotFoundError(DomainError):
    """Requested record does not exist for this user."""


class UpstreamFailureError(RuntimeError):
    """The backing store failed to complete a read or write."""


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def budget_goal_not_found(goal_id: int) -> str:
    """Return message for missing budget goal."""
    return f"Budget goal {goal_id} not found"


def invalid_period(value: object, allowed: list[str]) -> str:
    """Return message for an unrecognised period token."""
    return f"Invalid period '{value}'. Must be one of: {', '.join(allowed)}"


def custom_range_incomplete() -> str:
    return "Custom period requires both start date and end date"


def range_reversed(start: object, end: object) -> str:
    return f"End date {end} is before start date {start}"
