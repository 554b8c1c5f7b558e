#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer milliunits internally.
Ledger amounts arrive as milliunits, so they enter without any loss, and
sub-cent differences stay visible to the matching tolerance checks.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from .currency import (
    cents_to_milliunits,
    decimal_to_milliunits,
    milliunits_to_cents,
    milliunits_to_decimal,
    milliunits_to_dollars_str,
    parse_dollars_to_milliunits,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in milliunits (1000 = $1.00).

    Supports both positive (inflow/refund) and negative (outflow/expense) amounts.

    Examples:
        >>> expense = Money.from_milliunits(-25990)
        >>> str(expense)
        '$-25.99'
        >>> expense.abs().to_cents()
        2599
        >>> (Money.from_dollars("100.00") + Money.from_dollars("50.00")).to_decimal()
        Decimal('150')
    """

    milliunits: int

    @classmethod
    def from_milliunits(cls, milliunits: int) -> "Money":
        """Create Money from ledger milliunits."""
        return cls(milliunits=int(milliunits))

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(milliunits=cents_to_milliunits(cents))

    @classmethod
    def from_dollars(cls, dollars: str | int | Decimal) -> "Money":
        """
        Parse from dollar string like '$123.45', an integer dollar count, or a Decimal.

        Args:
            dollars: String like "$12.34", integer like 12, or Decimal("12.34")

        Returns:
            Money object
        """
        if isinstance(dollars, str):
            return cls(milliunits=parse_dollars_to_milliunits(dollars))
        return cls(milliunits=decimal_to_milliunits(dollars))

    @classmethod
    def zero(cls) -> "Money":
        return cls(milliunits=0)

    @staticmethod
    def sum(values: Iterable["Money"]) -> "Money":
        """Sum an iterable of Money values (empty sums to zero)."""
        total = 0
        for value in values:
            total += value.milliunits
        return Money(milliunits=total)

    def to_milliunits(self) -> int:
        return self.milliunits

    def to_cents(self) -> int:
        """Get value in cents, rounded half away from zero."""
        return milliunits_to_cents(self.milliunits)

    def to_decimal(self) -> Decimal:
        """Get exact dollar value as a Decimal."""
        return milliunits_to_decimal(self.milliunits)

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(milliunits=abs(self.milliunits))

    def is_zero(self) -> bool:
        return self.milliunits == 0

    def is_outflow(self) -> bool:
        return self.milliunits < 0

    def is_inflow(self) -> bool:
        return self.milliunits > 0

    def __add__(self, other: "Money") -> "Money":
        return Money(milliunits=self.milliunits + other.milliunits)

    def __sub__(self, other: "Money") -> "Money":
        return Money(milliunits=self.milliunits - other.milliunits)

    def __mul__(self, scalar: int) -> "Money":
        return Money(milliunits=self.milliunits * scalar)

    def __neg__(self) -> "Money":
        return Money(milliunits=-self.milliunits)

    def __lt__(self, other: "Money") -> bool:
        return self.milliunits < other.milliunits

    def __le__(self, other: "Money") -> bool:
        return self.milliunits <= other.milliunits

    def __gt__(self, other: "Money") -> bool:
        return self.milliunits > other.milliunits

    def __ge__(self, other: "Money") -> bool:
        return self.milliunits >= other.milliunits

    def __str__(self) -> str:
        """Format as dollar string."""
        return f"${milliunits_to_dollars_str(self.milliunits)}"

    def __repr__(self) -> str:
        return f"Money(milliunits={self.milliunits})"
