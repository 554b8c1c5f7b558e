#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All amounts are carried as integer milliunits, the ledger's native unit.
Parsing of decimal strings goes through Decimal so that no float ever
touches a currency value.

Currency Systems:
- Ledger (YNAB) uses milliunits: 1000 milliunits = $1.00
- Cents are used for "same to the penny" comparisons: 100 cents = $1.00
- Display uses dollar strings: "$12.34"
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

MILLIUNITS_PER_DOLLAR = 1000
MILLIUNITS_PER_CENT = 10


def milliunits_to_cents(milliunits: int) -> int:
    """
    Convert milliunits to cents, rounding half away from zero.

    Sign is preserved.

    Example:
        milliunits_to_cents(-25993) -> -2599
        milliunits_to_cents(25996) -> 2600
    """
    value = Decimal(milliunits) / MILLIUNITS_PER_CENT
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_milliunits(cents: int) -> int:
    """
    Convert cents to milliunits.

    Example:
        cents_to_milliunits(4599) -> 45990
    """
    return cents * MILLIUNITS_PER_CENT


def milliunits_to_decimal(milliunits: int) -> Decimal:
    """Convert milliunits to a Decimal dollar value (exact)."""
    return Decimal(milliunits) / MILLIUNITS_PER_DOLLAR


def decimal_to_milliunits(value: Union[Decimal, int, str]) -> int:
    """
    Convert a decimal dollar value to milliunits, rounding half-up past the third place.

    Raises:
        InvalidOperation: If the value cannot be interpreted as a number
    """
    amount = Decimal(str(value)) * MILLIUNITS_PER_DOLLAR
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_dollars_to_milliunits(dollars_str: str) -> int:
    """
    Parse a dollar string to milliunits.

    Examples:
        parse_dollars_to_milliunits("12.34") -> 12340
        parse_dollars_to_milliunits("$1,234.56") -> 1234560
        parse_dollars_to_milliunits("-25.993") -> -25993
    """
    clean = dollars_str.replace("$", "").replace(",", "").strip()
    if not clean:
        return 0
    return decimal_to_milliunits(clean)


def safe_currency_to_milliunits(value: Union[str, int, float, Decimal, None]) -> int | None:
    """
    Convert loosely-typed currency input to milliunits.

    Returns None (not zero) for input that carries no amount, so callers can
    distinguish "absent" from "zero".

    Examples:
        safe_currency_to_milliunits("$45.99") -> 45990
        safe_currency_to_milliunits(45.99) -> 45990
        safe_currency_to_milliunits("n/a") -> None
    """
    if value is None:
        return None
    try:
        if isinstance(value, float):
            if value != value:  # NaN from pandas
                return None
            return decimal_to_milliunits(repr(value))
        if isinstance(value, (int, Decimal)):
            return decimal_to_milliunits(value)

        clean = str(value).replace("$", "").replace(",", "").strip()
        if not clean or clean.lower() in ("nan", "none", "null"):
            return None
        return decimal_to_milliunits(clean)
    except (ValueError, TypeError, InvalidOperation):
        return None


def milliunits_to_dollars_str(milliunits: int) -> str:
    """
    Format milliunits as a plain dollar string rounded to cents.

    Example:
        milliunits_to_dollars_str(-45990) -> "-45.99"
    """
    cents = milliunits_to_cents(milliunits)
    is_negative = cents < 0
    abs_cents = abs(cents)
    text = f"{abs_cents // 100}.{abs_cents % 100:02d}"
    return f"-{text}" if is_negative else text


def format_milliunits(milliunits: int) -> str:
    """Format milliunits as dollar string with $ prefix."""
    return f"${milliunits_to_dollars_str(milliunits)}"
