"""Spending aggregation over a date interval."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from dateutil.relativedelta import relativedelta

from spendtrack.domain.entities import (
    Bucketing,
    CategoryTotal,
    DateInterval,
    PeriodStats,
    PeriodToken,
    Transaction,
    TrendBucket,
)
from spendtrack.utils.amount_parser import coerce_amount

UNCATEGORIZED = "Uncategorized"


def bucketing_for(period: PeriodToken) -> Bucketing:
    """Daily trend for short windows, monthly for quarters and years."""
    if period in (PeriodToken.QUARTERLY, PeriodToken.YEARLY):
        return Bucketing.MONTHLY
    return Bucketing.DAILY


def in_interval(
    transactions: Iterable[Transaction], interval: DateInterval
) -> list[Transaction]:
    """Keep live transactions whose date falls inside the interval."""
    return [
        txn
        for txn in transactions
        if not txn.is_deleted and interval.contains_day(txn.date)
    ]


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((coerce_amount(txn.amount) for txn in transactions), Decimal("0"))


def iter_days(interval: DateInterval) -> Iterable[date]:
    day = interval.first_day
    while day <= interval.last_day:
        yield day
        day += timedelta(days=1)


def iter_months(interval: DateInterval) -> Iterable[date]:
    """First day of every calendar month overlapping the interval."""
    month = interval.first_day.replace(day=1)
    while month <= interval.last_day:
        yield month
        month += relativedelta(months=1)


def daily_trend(transactions: Sequence[Transaction], interval: DateInterval) -> list[TrendBucket]:
    """One bucket per day labelled "Day N", zero-filled."""
    totals: dict[date, Decimal] = {day: Decimal("0") for day in iter_days(interval)}
    for txn in transactions:
        if txn.date in totals:
            totals[txn.date] += coerce_amount(txn.amount)
    return [
        TrendBucket(label=f"Day {index}", amount=amount)
        for index, amount in enumerate(totals.values(), start=1)
    ]


def monthly_trend(transactions: Sequence[Transaction], interval: DateInterval) -> list[TrendBucket]:
    """One bucket per calendar month labelled like "Jun 2024", zero-filled."""
    totals: dict[tuple[int, int], Decimal] = {}
    labels: dict[tuple[int, int], str] = {}
    for month in iter_months(interval):
        key = (month.year, month.month)
        totals[key] = Decimal("0")
        labels[key] = month.strftime("%b %Y")
    for txn in transactions:
        key = (txn.date.year, txn.date.month)
        if key in totals:
            totals[key] += coerce_amount(txn.amount)
    return [TrendBucket(label=labels[key], amount=amount) for key, amount in totals.items()]


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Sum amounts per category label, largest first.

    Categories with equal totals keep the order in which they were first seen.
    """
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        label = (txn.category or "").strip() or UNCATEGORIZED
        totals[label] = totals.get(label, Decimal("0")) + coerce_amount(txn.amount)
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=label, amount=amount) for label, amount in ordered]


def tracking_streak(transactions: Iterable[Transaction], interval: DateInterval) -> int:
    """Longest run of consecutive days in the interval with any transaction."""
    active_days = {txn.date for txn in transactions}
    longest = current = 0
    for day in iter_days(interval):
        if day in active_days:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def aggregate(
    transactions: Iterable[Transaction],
    interval: DateInterval,
    bucketing: Bucketing = Bucketing.DAILY,
) -> PeriodStats:
    """Compute totals, trend, category breakdown and streak for an interval.

    Args:
        transactions: Candidate transactions; deleted ones and those outside
            the interval are ignored
        interval: Interval to aggregate over
        bucketing: Trend granularity

    Returns:
        PeriodStats for the interval
    """
    counted = in_interval(transactions, interval)
    total = sum_amounts(counted)

    if bucketing is Bucketing.MONTHLY:
        trend = monthly_trend(counted, interval)
    else:
        trend = daily_trend(counted, interval)

    return PeriodStats(
        total_spent=total,
        daily_average=total / interval.day_count,
        trend=tuple(trend),
        categories=tuple(category_breakdown(counted)),
        tracking_streak=tracking_streak(counted, interval),
    )
