"""Date parsing utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _relative_date(text: str, today: date) -> Optional[date]:
    """Resolve phrases like 'yesterday', 'last month' or 'this week'."""
    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in fixed:
        return fixed[text]

    prefix, _, unit = text.partition(" ")
    if prefix not in ("last", "this", "next") or not unit:
        return None

    step = {"last": -1, "this": 0, "next": 1}[prefix]
    if unit == "month":
        return today.replace(day=1) + relativedelta(months=step)
    if unit == "year":
        return today.replace(month=1, day=1) + relativedelta(years=step)
    if unit == "week":
        # Weeks start on Monday
        return today - timedelta(days=today.weekday()) + timedelta(weeks=step)
    if unit in WEEKDAYS and prefix == "last":
        days_ago = (today.weekday() - WEEKDAYS.index(unit)) % 7 or 7
        return today - timedelta(days=days_ago)
    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones ("today", "yesterday", "last month", "this year", "last friday").

    Args:
        date_str: Date string in various formats
        today: Reference day for relative phrases (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    relative = _relative_date(text, today or date.today())
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(value: str) -> datetime:
    """Parse an explicit range bound, keeping any time of day.

    Bare dates become UTC midnight and naive timestamps are read as UTC.
    Relative phrases resolve to midnight of the day they name.
    """
    text = value.strip()
    relative = _relative_date(text.lower(), date.today())
    if relative is not None:
        return datetime(relative.year, relative.month, relative.day, tzinfo=UTC)

    try:
        parsed = date_parser.isoparse(text)
    except ValueError:
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse date '{value}': {e}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
