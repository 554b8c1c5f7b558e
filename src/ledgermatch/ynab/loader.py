#!/usr/bin/env python3
"""
Ledger Data Loader

Loads a cached YNAB transaction export (as written by `ynab list --format json`)
into Transaction domain models.
"""

import logging
from pathlib import Path
from typing import Any

from ..core.json_utils import read_json
from .models import Transaction

logger = logging.getLogger(__name__)


def load_transactions(path: str | Path, include_transfers: bool = False) -> list[Transaction]:
    """
    Load ledger transactions from a JSON export.

    Handles both a bare array and an object with a "transactions" key.
    Deleted transactions are always skipped; transfers are skipped unless
    include_transfers is set. Rows without an id or with an
    unparseable amount are logged and skipped.

    Raises:
        FileNotFoundError: If the export file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Transactions file not found: {path}")

    data: Any = read_json(path)

    if isinstance(data, dict):
        rows: list[dict[str, Any]] = data.get("transactions", [])
    elif isinstance(data, list):
        rows = data
    else:
        rows = []

    transactions: list[Transaction] = []
    for row in rows:
        if not isinstance(row, dict) or not row.get("id"):
            logger.warning("Skipping malformed transaction row: %r", row)
            continue

        try:
            transaction = Transaction.from_dict(row)
        except (ValueError, TypeError) as e:
            logger.warning("Failed to parse transaction %s in %s: %s", row.get("id"), path, e)
            continue

        if transaction.deleted:
            continue
        if transaction.is_transfer and not include_transfers:
            continue
        transactions.append(transaction)

    logger.info("Loaded %d transactions from %s", len(transactions), path)
    return transactions
