"""
YNAB Integration Package

The ledger side of reconciliation: transactions read from a cached YNAB
export, and the updater that writes proposed memos back through the ynab CLI.
"""

from .loader import load_transactions
from .models import Transaction
from .updater import LedgerUpdater, YnabCliUpdater

__all__ = [
    "LedgerUpdater",
    "Transaction",
    "YnabCliUpdater",
    "load_transactions",
]
