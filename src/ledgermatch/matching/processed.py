#!/usr/bin/env python3
"""
Processed Transaction Tracking

Two independent "already handled" signals:

- ProcessedLedger / ProcessedIdCheck: the authoritative, persisted set of
  transaction ids this tool has updated.
- MemoContentCheck: a heuristic over the memo text itself, catching
  transactions annotated by an earlier run (or by hand) that the id set does
  not know about.
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from ..core.json_utils import read_json, write_json
from ..ynab.models import Transaction

logger = logging.getLogger(__name__)

ITEM_COUNT_MARKER = "items:"
DEFAULT_MEMO_LENGTH_THRESHOLD = 100


class ProcessedLedger:
    """
    Persisted set of transaction ids already acted upon.

    Document format::

        {"processed_transaction_ids": ["tx1", "tx2"], "last_updated": "2024-01-20T10:00:00"}

    Ids are only ever added; clear() exists for manual resets from the CLI.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._ids: set[str] = set()
        self.last_updated: str | None = None

    def load(self) -> set[str]:
        """
        Read the id set from disk, replacing the in-memory set.

        A missing file is a first run and yields an empty set. An unreadable file
        is logged and also yields an empty set so the batch can proceed.
        """
        if not self.path.exists():
            logger.info("No processed transactions file at %s, starting fresh", self.path)
            self._ids = set()
            self.last_updated = None
            return set(self._ids)

        try:
            data = read_json(self.path)
            ids = data.get("processed_transaction_ids", [])
            self._ids = {str(tx_id) for tx_id in ids}
            self.last_updated = data.get("last_updated")
        except (OSError, json.JSONDecodeError, AttributeError, TypeError) as e:
            logger.warning("Could not read processed transactions from %s: %s", self.path, e)
            self._ids = set()
            self.last_updated = None

        logger.info("Loaded %d processed transaction ids", len(self._ids))
        return set(self._ids)

    def save(self, ids: Iterable[str] | None = None) -> None:
        """Write the id set (the in-memory set by default) in full."""
        if ids is not None:
            self._ids = set(ids)
        self.last_updated = datetime.now().isoformat()
        write_json(
            self.path,
            {
                "processed_transaction_ids": sorted(self._ids),
                "last_updated": self.last_updated,
            },
        )
        logger.info("Saved %d processed transaction ids to %s", len(self._ids), self.path)

    def contains(self, transaction_id: str) -> bool:
        return transaction_id in self._ids

    def mark_processed(self, transaction_id: str) -> None:
        self._ids.add(transaction_id)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._ids

    def statistics(self, transactions: list[Transaction]) -> dict[str, Any]:
        """How much of a transaction batch has already been processed."""
        processed = sum(1 for tx in transactions if tx.id in self._ids)
        return {
            "total_transactions": len(transactions),
            "processed_transactions": processed,
            "unprocessed_transactions": len(transactions) - processed,
            "processed_ids_count": len(self._ids),
            "last_updated": self.last_updated,
        }

    def clear(self) -> None:
        """Forget every processed id and persist the empty set."""
        logger.warning("Clearing %d processed transaction ids", len(self._ids))
        self._ids = set()
        self.save()


class ProcessedCheck(Protocol):
    """Decides whether a transaction has already been annotated."""

    def is_processed(self, transaction: Transaction) -> bool: ...


class ProcessedIdCheck:
    """Idempotence by id: the transaction is in the processed ledger."""

    def __init__(self, ledger: ProcessedLedger):
        self.ledger = ledger

    def is_processed(self, transaction: Transaction) -> bool:
        return self.ledger.contains(transaction.id)


class MemoContentCheck:
    """
    Idempotence by memo content.

    A memo that contains an item-count marker or a retailer order marker, or is
    longer than max_length, is treated as already annotated.
    """

    def __init__(self, markers: Iterable[str] = (), max_length: int = DEFAULT_MEMO_LENGTH_THRESHOLD):
        self.markers = (ITEM_COUNT_MARKER, *markers)
        self.max_length = max_length

    def is_processed(self, transaction: Transaction) -> bool:
        if not transaction.has_memo:
            return False
        memo = transaction.memo or ""
        if any(marker in memo for marker in self.markers):
            return True
        return len(memo) > self.max_length
