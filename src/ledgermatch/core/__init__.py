"""
Core Utilities Package

Shared primitives used by every other package:
- Integer-milliunit currency handling (Money)
- Calendar dates and the day arithmetic used by match scoring
- Configuration from environment, .env and YAML
- JSON file helpers
"""

from .config import Config, Environment, get_config, get_data_dir, is_test, reload_config
from .currency import (
    format_milliunits,
    milliunits_to_cents,
    parse_dollars_to_milliunits,
    safe_currency_to_milliunits,
)
from .dates import FinancialDate, days_difference, matching_days_difference, signed_days_difference
from .money import Money

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "get_data_dir",
    "is_test",
    "reload_config",
    # Currency
    "Money",
    "format_milliunits",
    "milliunits_to_cents",
    "parse_dollars_to_milliunits",
    "safe_currency_to_milliunits",
    # Dates
    "FinancialDate",
    "days_difference",
    "matching_days_difference",
    "signed_days_difference",
]
