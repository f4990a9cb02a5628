"""Utility functions for spendtrack."""

from spendtrack.utils.date_parser import parse_date, parse_datetime
from spendtrack.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_datetime", "parse_amount", "coerce_amount"]
