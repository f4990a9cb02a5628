"""Period tokens to concrete date intervals.

Named periods are rolling windows ending today (UTC): 7, 30, 90 or 365
calendar days including today. Custom periods take explicit bounds as given.
The previous period used for velocity comparisons follows calendar rules
instead (previous week, calendar month, calendar quarter, calendar year).
"""

from datetime import date, datetime, time, timedelta, UTC
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from spendtrack.domain.entities import DateInterval, PeriodToken
from spendtrack.domain.errors import (
    InvalidArgumentError,
    custom_range_incomplete,
    invalid_period,
)

Moment = Union[date, datetime]


def parse_period(value: Union[str, PeriodToken, None]) -> PeriodToken:
    """Return the PeriodToken for a string or token.

    Raises:
        InvalidArgumentError: If value names no known period
    """
    if isinstance(value, PeriodToken):
        return value
    try:
        return PeriodToken(str(value).strip().lower())
    except ValueError:
        raise InvalidArgumentError(
            invalid_period(value, [token.value for token in PeriodToken])
        ) from None


def as_utc(value: Moment) -> datetime:
    """Normalise a date or datetime to an aware UTC datetime.

    Dates map to UTC midnight; naive datetimes are taken to be UTC already.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_day(value: Moment) -> datetime:
    return datetime.combine(as_utc(value).date(), time.min, tzinfo=UTC)


def end_of_day(value: Moment) -> datetime:
    return datetime.combine(as_utc(value).date(), time.max, tzinfo=UTC)


def compute_range(
    period: Union[str, PeriodToken],
    now: Moment,
    explicit_start: Optional[Moment] = None,
    explicit_end: Optional[Moment] = None,
) -> DateInterval:
    """Turn a period token into a concrete inclusive interval.

    Args:
        period: Period token or its string value
        now: Reference moment; only its UTC calendar day matters
        explicit_start: Start bound, required for custom periods
        explicit_end: End bound, required for custom periods

    Returns:
        DateInterval covering the period

    Raises:
        InvalidArgumentError: For unknown periods, a custom period missing a
            bound, or an end before the start
    """
    token = parse_period(period)

    if token is PeriodToken.CUSTOM:
        if explicit_start is None or explicit_end is None:
            raise InvalidArgumentError(custom_range_incomplete())
        return DateInterval(start=as_utc(explicit_start), end=as_utc(explicit_end))

    end = end_of_day(now)
    start = start_of_day(end - timedelta(days=token.days - 1))
    return DateInterval(start=start, end=end)


def shift_interval_back(interval: DateInterval, period: Union[str, PeriodToken]) -> DateInterval:
    """Return the period immediately preceding an interval of the given kind.

    Raises:
        InvalidArgumentError: For custom periods, which have no predecessor
    """
    token = parse_period(period)
    anchor = start_of_day(interval.start)

    if token is PeriodToken.WEEKLY:
        return DateInterval(
            start=anchor - timedelta(days=7),
            end=end_of_day(anchor - timedelta(days=1)),
        )

    if token is PeriodToken.MONTHLY:
        first = anchor.replace(day=1) - relativedelta(months=1)
        return _span(first, relativedelta(months=1))

    if token is PeriodToken.QUARTERLY:
        quarter_month = (anchor.month - 1) // 3 * 3 + 1
        first = anchor.replace(month=quarter_month, day=1) - relativedelta(months=3)
        return _span(first, relativedelta(months=3))

    if token is PeriodToken.YEARLY:
        first = anchor.replace(month=1, day=1) - relativedelta(years=1)
        return _span(first, relativedelta(years=1))

    raise InvalidArgumentError("Custom periods have no previous period")


def _span(first: datetime, length: relativedelta) -> DateInterval:
    """Interval from first through the day before first + length."""
    return DateInterval(start=first, end=end_of_day(first + length - timedelta(days=1)))
