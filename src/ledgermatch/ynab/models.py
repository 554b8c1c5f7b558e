#!/usr/bin/env python3
"""
Ledger Domain Models

Transactions as the ledger (YNAB) reports them, normalized onto the Money and
FinancialDate primitives. Amounts arrive in milliunits.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..core.dates import FinancialDate, parse_date
from ..core.money import Money

logger = logging.getLogger(__name__)


@dataclass
class Transaction:
    """
    Ledger transaction.

    amount follows the ledger's sign convention: negative is an outflow
    (purchase), positive an inflow (refund). A date or amount that the ledger
    export could not supply is None and is treated as "no match possible"
    by the scorer rather than as an error.
    """

    id: str
    date: FinancialDate | None
    amount: Money | None
    payee_name: str | None = None
    memo: str | None = None
    account_id: str | None = None
    transfer_account_id: str | None = None
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """
        Create Transaction from a ledger API dict.

        Args:
            data: Dictionary from the YNAB API (transactions.json); amount in milliunits

        Returns:
            Transaction instance
        """
        parsed_date = parse_date(data.get("date"))
        if parsed_date is None and data.get("date") is not None:
            logger.warning("Transaction %s has unparseable date %r", data.get("id"), data.get("date"))

        amount = data.get("amount")
        return cls(
            id=str(data["id"]),
            date=FinancialDate(date=parsed_date) if parsed_date else None,
            amount=Money.from_milliunits(amount) if amount is not None else None,
            payee_name=data.get("payee_name"),
            memo=data.get("memo"),
            account_id=data.get("account_id"),
            transfer_account_id=data.get("transfer_account_id"),
            deleted=bool(data.get("deleted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ledger's dict shape (amount in milliunits)."""
        return {
            "id": self.id,
            "date": self.date.to_iso_string() if self.date else None,
            "amount": self.amount.to_milliunits() if self.amount is not None else None,
            "payee_name": self.payee_name,
            "memo": self.memo,
            "account_id": self.account_id,
            "transfer_account_id": self.transfer_account_id,
            "deleted": self.deleted,
        }

    @property
    def has_memo(self) -> bool:
        """True for a memo with content; the literal string "null" counts as empty."""
        return bool(self.memo) and self.memo != "null"

    @property
    def is_transfer(self) -> bool:
        return self.transfer_account_id is not None
