"""
Ledgermatch - Retailer Order Reconciliation for YNAB

Matches ledger transactions against retailer purchase records and proposes
descriptive memos for the transactions it can identify.

Domain Packages:
- core: Money, dates, configuration and JSON helpers
- ynab: Ledger transactions, loading and the memo updater
- orders: Retailer order records and loading
- matching: Scoring, single and split-charge matching, memo synthesis,
  processed-transaction tracking and the batch orchestrator
- cli: Command-line interface

Example Usage:
    from ledgermatch.matching import ReconciliationOrchestrator, ProcessedLedger, AMAZON
    from ledgermatch.ynab import load_transactions
    from ledgermatch.orders import load_orders
"""

__version__ = "0.1.0"

from .core.config import Environment, get_config
from .core.dates import FinancialDate
from .core.money import Money

__all__ = [
    "Environment",
    "FinancialDate",
    "Money",
    "get_config",
]
