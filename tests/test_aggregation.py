"""Tests for spending aggregation."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from spendtrack.domain.aggregation import (
    UNCATEGORIZED,
    aggregate,
    bucketing_for,
    category_breakdown,
    tracking_streak,
)
from spendtrack.domain.entities import Bucketing, PeriodToken
from spendtrack.domain.periods import compute_range

NOW = datetime(2024, 6, 10, 15, 30, tzinfo=UTC)


@pytest.fixture
def week():
    """2024-06-04 through 2024-06-10."""
    return compute_range("weekly", NOW)


class TestBucketing:
    @pytest.mark.parametrize(
        "period,expected",
        [
            (PeriodToken.WEEKLY, Bucketing.DAILY),
            (PeriodToken.MONTHLY, Bucketing.DAILY),
            (PeriodToken.CUSTOM, Bucketing.DAILY),
            (PeriodToken.QUARTERLY, Bucketing.MONTHLY),
            (PeriodToken.YEARLY, Bucketing.MONTHLY),
        ],
    )
    def test_bucketing_for_period(self, period, expected):
        assert bucketing_for(period) is expected


class TestAggregate:
    def test_weekly_totals_and_daily_trend(self, week, make_transaction):
        transactions = [
            make_transaction(Decimal("20"), date(2024, 6, 5)),
            make_transaction(Decimal("30"), date(2024, 6, 7)),
        ]

        stats = aggregate(transactions, week)

        assert stats.total_spent == Decimal("50")
        assert stats.daily_average == Decimal("50") / 7
        assert [bucket.label for bucket in stats.trend] == [f"Day {n}" for n in range(1, 8)]
        assert [bucket.amount for bucket in stats.trend] == [
            Decimal("0"),
            Decimal("20"),
            Decimal("0"),
            Decimal("30"),
            Decimal("0"),
            Decimal("0"),
            Decimal("0"),
        ]

    def test_empty_input_gives_zeroed_stats(self, week):
        stats = aggregate([], week)

        assert stats.total_spent == Decimal("0")
        assert stats.daily_average == Decimal("0")
        assert len(stats.trend) == 7
        assert all(bucket.amount == 0 for bucket in stats.trend)
        assert stats.categories == ()
        assert stats.tracking_streak == 0

    def test_ignores_deleted_and_out_of_range_transactions(self, week, make_transaction):
        transactions = [
            make_transaction(Decimal("10"), date(2024, 6, 4)),
            make_transaction(Decimal("99"), date(2024, 6, 5), is_deleted=True),
            make_transaction(Decimal("40"), date(2024, 6, 3)),
            make_transaction(Decimal("40"), date(2024, 6, 11)),
        ]

        stats = aggregate(transactions, week)

        assert stats.total_spent == Decimal("10")
        assert [category.amount for category in stats.categories] == [Decimal("10")]

    @pytest.mark.parametrize("bad_amount", [None, Decimal("-5"), Decimal("NaN"), "abc"])
    def test_unusable_amounts_count_as_zero(self, week, make_transaction, bad_amount):
        transactions = [
            make_transaction(Decimal("12.50"), date(2024, 6, 6)),
            make_transaction(bad_amount, date(2024, 6, 6)),
        ]

        stats = aggregate(transactions, week)

        assert stats.total_spent == Decimal("12.50")

    def test_monthly_buckets_for_quarter(self, make_transaction):
        quarter = compute_range("quarterly", NOW)  # 2024-03-13 .. 2024-06-10
        transactions = [
            make_transaction(Decimal("5"), date(2024, 3, 20)),
            make_transaction(Decimal("7"), date(2024, 5, 1)),
            make_transaction(Decimal("3"), date(2024, 5, 31)),
        ]

        stats = aggregate(transactions, quarter, Bucketing.MONTHLY)

        assert [bucket.label for bucket in stats.trend] == [
            "Mar 2024",
            "Apr 2024",
            "May 2024",
            "Jun 2024",
        ]
        assert [bucket.amount for bucket in stats.trend] == [
            Decimal("5"),
            Decimal("0"),
            Decimal("10"),
            Decimal("0"),
        ]
        assert stats.daily_average == Decimal("15") / 90

    def test_custom_range_starting_mid_day_skips_that_day(self, make_transaction):
        interval = compute_range(
            "custom",
            NOW,
            datetime(2024, 6, 1, 12, 0, tzinfo=UTC),
            datetime(2024, 6, 3, 23, 0, tzinfo=UTC),
        )
        transactions = [
            make_transaction(Decimal("100"), date(2024, 6, 1)),
            make_transaction(Decimal("8"), date(2024, 6, 2)),
            make_transaction(Decimal("2"), date(2024, 6, 3)),
        ]

        stats = aggregate(transactions, interval)

        assert stats.total_spent == Decimal("10")
        assert [bucket.label for bucket in stats.trend] == ["Day 1", "Day 2"]
        assert stats.daily_average == Decimal("5")

    def test_custom_range_within_one_day_has_one_bucket(self, make_transaction):
        interval = compute_range(
            "custom",
            NOW,
            datetime(2024, 6, 4, 12, 0, tzinfo=UTC),
            datetime(2024, 6, 4, 18, 0, tzinfo=UTC),
        )

        empty = aggregate([], interval)
        stats = aggregate([make_transaction(Decimal("6"), date(2024, 6, 4))], interval)

        assert len(empty.trend) == interval.day_count == 1
        assert stats.total_spent == Decimal("6")
        assert [bucket.amount for bucket in stats.trend] == [Decimal("6")]
        assert stats.daily_average == Decimal("6")
        assert stats.tracking_streak == 1

    def test_single_day_range_divides_by_one(self, make_transaction):
        interval = compute_range("custom", NOW, date(2024, 6, 1), date(2024, 6, 1))

        stats = aggregate([make_transaction(Decimal("9"), date(2024, 6, 1))], interval)

        assert stats.daily_average == Decimal("9")

    def test_repeated_calls_are_equal_and_do_not_mutate(self, week, make_transaction):
        transactions = [
            make_transaction(Decimal("20"), date(2024, 6, 5), category="Food"),
            make_transaction(Decimal("30"), date(2024, 6, 7), category="Travel"),
        ]
        snapshot = list(transactions)

        assert aggregate(transactions, week) == aggregate(transactions, week)
        assert transactions == snapshot


class TestCategoryBreakdown:
    def test_sorted_descending_by_amount(self, make_transaction):
        transactions = [
            make_transaction(Decimal("5"), date(2024, 6, 5), category="Food"),
            make_transaction(Decimal("30"), date(2024, 6, 5), category="Rent"),
            make_transaction(Decimal("10"), date(2024, 6, 6), category="Food"),
        ]

        result = category_breakdown(transactions)

        assert [(item.category, item.amount) for item in result] == [
            ("Rent", Decimal("30")),
            ("Food", Decimal("15")),
        ]

    def test_missing_category_is_uncategorized(self, make_transaction):
        transactions = [
            make_transaction(Decimal("5"), date(2024, 6, 5), category=None),
            make_transaction(Decimal("6"), date(2024, 6, 5), category="   "),
        ]

        result = category_breakdown(transactions)

        assert len(result) == 1
        assert result[0].category == UNCATEGORIZED
        assert result[0].amount == Decimal("11")

    def test_ties_keep_first_seen_order(self, make_transaction):
        transactions = [
            make_transaction(Decimal("10"), date(2024, 6, 5), category="Books"),
            make_transaction(Decimal("10"), date(2024, 6, 5), category="Art"),
            make_transaction(Decimal("20"), date(2024, 6, 5), category="Gym"),
        ]

        result = category_breakdown(transactions)

        assert [item.category for item in result] == ["Gym", "Books", "Art"]


class TestTrackingStreak:
    def test_longest_run_of_consecutive_days(self, week, make_transaction):
        transactions = [
            make_transaction(Decimal("1"), date(2024, 6, 4)),
            make_transaction(Decimal("1"), date(2024, 6, 5)),
            make_transaction(Decimal("1"), date(2024, 6, 7)),
            make_transaction(Decimal("1"), date(2024, 6, 8)),
            make_transaction(Decimal("1"), date(2024, 6, 9)),
        ]

        assert tracking_streak(transactions, week) == 3

    def test_several_transactions_on_one_day_count_once(self, week, make_transaction):
        transactions = [
            make_transaction(Decimal("1"), date(2024, 6, 10)),
            make_transaction(Decimal("2"), date(2024, 6, 10)),
        ]

        assert tracking_streak(transactions, week) == 1
