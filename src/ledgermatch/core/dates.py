#!/usr/bin/env python3
"""
FinancialDate Primitive Type and Date Arithmetic

Immutable date wrapper plus the day-difference helpers used by match scoring.
All difference helpers tolerate malformed input: an unparseable date yields
UNPARSEABLE_DAYS so that downstream ceiling checks reject the pair.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

logger = logging.getLogger(__name__)

# Sentinel difference for dates that could not be parsed
UNPARSEABLE_DAYS = 999

# Days a refund may post after its order date without a date penalty
RETURN_GRACE_DAYS = 7


@dataclass(frozen=True, order=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        Raises:
            ValueError: If the string does not match the format
        """
        return cls(date=datetime.strptime(date_str, format).date())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def __str__(self) -> str:
        return self.to_iso_string()

    def __repr__(self) -> str:
        return f"FinancialDate(date={self.date!r})"


def parse_date(value: Any) -> date | None:
    """
    Leniently coerce a value to a calendar date.

    Accepts date, datetime (time is dropped), FinancialDate, pandas Timestamps
    and ISO strings (a trailing time part is ignored). Anything else, including
    None and NaT, returns None.
    """
    if value is None or value != value:  # NaN / NaT compare unequal to themselves
        return None
    if isinstance(value, FinancialDate):
        return value.date
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()[:10]
        try:
            return datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            return None
    if hasattr(value, "date") and callable(value.date):
        try:
            result = value.date()
        except (ValueError, TypeError):
            return None
        return result if isinstance(result, date) else None
    return None


def signed_days_difference(date_a: Any, date_b: Any) -> int:
    """
    Days from date_b to date_a (date_a - date_b), sign preserved.

    Returns UNPARSEABLE_DAYS if either date cannot be parsed.
    """
    a = parse_date(date_a)
    b = parse_date(date_b)
    if a is None or b is None:
        logger.warning("Could not parse dates: %r, %r", date_a, date_b)
        return UNPARSEABLE_DAYS
    return (a - b).days


def days_difference(date_a: Any, date_b: Any) -> int:
    """
    Absolute whole-day difference between two dates.

    Returns UNPARSEABLE_DAYS if either date cannot be parsed.
    """
    diff = signed_days_difference(date_a, date_b)
    if diff == UNPARSEABLE_DAYS:
        return UNPARSEABLE_DAYS
    return abs(diff)


def matching_days_difference(
    transaction_date: Any,
    order_date: Any,
    is_return: bool,
    grace_days: int = RETURN_GRACE_DAYS,
) -> int:
    """
    Effective day difference used for scoring a transaction against an order.

    Refunds post some days after the retailer records the return. When the order
    is a return and the transaction is on or after the order date, the first
    grace_days are forgiven: within the grace window the pair counts as a same-day
    match, beyond it only the excess counts. Every other case is the plain
    absolute difference.
    """
    if is_return:
        actual = signed_days_difference(transaction_date, order_date)
        if actual != UNPARSEABLE_DAYS and actual >= 0:
            if actual <= grace_days:
                return 0
            return actual - grace_days

    return days_difference(transaction_date, order_date)
