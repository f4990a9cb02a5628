"""Spending velocity: current period against the one before it."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from spendtrack.domain.entities import PeriodToken, VelocityResult
from spendtrack.domain.periods import parse_period
from spendtrack.utils.amount_parser import coerce_amount

# Changes strictly below this many percent read as "similar"
SIMILAR_THRESHOLD = Decimal("5")

NOT_AVAILABLE_MESSAGE = "not available for custom range"
NO_PREVIOUS_DATA_MESSAGE = "no data from previous period"


def percent_change(current_total: Decimal, previous_total: Decimal) -> Decimal:
    return (current_total - previous_total) / previous_total * 100


def compare(
    period: Union[str, PeriodToken],
    current_total: Decimal,
    previous_total: Decimal,
) -> VelocityResult:
    """Compare spending totals of two consecutive periods.

    Args:
        period: Period kind; custom periods are never compared
        current_total: Total spent in the current period
        previous_total: Total spent in the period before it

    Returns:
        VelocityResult with the percent change (None when not comparable)
        and a short message
    """
    token = parse_period(period)
    if token is PeriodToken.CUSTOM:
        return VelocityResult(percent_change=None, message=NOT_AVAILABLE_MESSAGE)

    current = coerce_amount(current_total)
    previous = coerce_amount(previous_total)
    if previous == 0:
        return VelocityResult(percent_change=None, message=NO_PREVIOUS_DATA_MESSAGE)

    change = percent_change(current, previous)
    magnitude = abs(change)

    if magnitude < SIMILAR_THRESHOLD:
        message = f"similar spending to last {token.noun}"
    else:
        rounded = magnitude.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        direction = "more" if change > 0 else "less"
        message = f"spending {rounded}% {direction} than last {token.noun}"

    return VelocityResult(percent_change=float(change), message=message)
