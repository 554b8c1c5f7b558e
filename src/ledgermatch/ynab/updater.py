#!/usr/bin/env python3
"""
Ledger Update Collaborators

The reconciliation engine only needs one capability from the ledger: replace a
transaction's memo. LedgerUpdater captures that and YnabCliUpdater implements it
by driving the `ynab` command-line tool.
"""

import logging
import subprocess
from typing import Protocol

logger = logging.getLogger(__name__)


class LedgerUpdater(Protocol):
    """Anything that can write a memo onto a ledger transaction."""

    def update(self, transaction_id: str, memo: str) -> bool:
        """
        Replace the memo of a transaction.

        Returns:
            True on success, False if the ledger rejected the update
        """
        ...


class YnabCliUpdater:
    """Updates transaction memos by shelling out to the `ynab` CLI tool."""

    def __init__(self, command: str = "ynab", budget_id: str | None = None, timeout: int = 30):
        self.command = command
        self.budget_id = budget_id
        self.timeout = timeout

    def build_command(self, transaction_id: str, memo: str) -> list[str]:
        cmd = [self.command, "update", "transaction", transaction_id, "--memo", memo]
        if self.budget_id:
            cmd.extend(["--budget", self.budget_id])
        return cmd

    def update(self, transaction_id: str, memo: str) -> bool:
        cmd = self.build_command(transaction_id, memo)
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.error("YNAB CLI tool not found: %s", self.command)
            return False
        except subprocess.TimeoutExpired:
            logger.error("YNAB CLI timed out updating transaction %s", transaction_id)
            return False

        if result.returncode != 0:
            logger.error("YNAB CLI failed for transaction %s: %s", transaction_id, result.stderr.strip())
            return False
        return True
