#!/usr/bin/env python3
"""
Matching Domain Models

Match results produced by the matchers and the per-batch outcome produced by
the orchestrator. Matches are transient: they are consumed within a batch
and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..orders.models import Order
from ..ynab.models import Transaction


class ConfidenceClass(Enum):
    """Discrete confidence bucket derived once from a numeric score."""

    HIGH = "high"  # >= 0.80, applied automatically
    MEDIUM = "medium"  # 0.60 - 0.80
    LOW = "low"  # < 0.60

    @classmethod
    def from_score(cls, score: float) -> "ConfidenceClass":
        if score >= ConfidenceThresholds.HIGH:
            return cls.HIGH
        if score >= ConfidenceThresholds.MEDIUM:
            return cls.MEDIUM
        return cls.LOW


class ConfidenceThresholds:
    """Score thresholds shared by the matchers and the orchestrator."""

    # Matchers discard anything below this floor
    MINIMUM = 0.5

    HIGH = 0.8
    MEDIUM = 0.6


@dataclass
class Match:
    """
    A proposed link between ledger transaction(s) and one order.

    A single match has one transaction. A group match has two or more
    transactions, sorted by date, that together settle one split-charge order;
    proposed_memos[k] belongs to transactions[k].
    """

    transactions: list[Transaction]
    order: Order
    retailer: str
    confidence_score: float
    proposed_memos: list[str]
    match_reason: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.transactions:
            raise ValueError("Match must have at least one transaction")
        if len(self.proposed_memos) != len(self.transactions):
            raise ValueError(
                f"Match needs one memo per transaction, got {len(self.proposed_memos)} "
                f"for {len(self.transactions)}"
            )
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(f"Confidence must be between 0.0 and 1.0, got {self.confidence_score}")

    @property
    def is_group(self) -> bool:
        return len(self.transactions) > 1

    @property
    def transaction(self) -> Transaction:
        """The (first) matched transaction."""
        return self.transactions[0]

    @property
    def proposed_memo(self) -> str:
        """Memo proposed for the (first) matched transaction."""
        return self.proposed_memos[0]

    @property
    def confidence_class(self) -> ConfidenceClass:
        return ConfidenceClass.from_score(self.confidence_score)

    def updates(self) -> list[tuple[Transaction, str]]:
        """(transaction, memo) pairs this match would write."""
        return list(zip(self.transactions, self.proposed_memos))

    def to_dict(self) -> dict[str, Any]:
        return {
            "retailer": self.retailer,
            "order_id": self.order.order_id,
            "order": self.order.to_dict(),
            "transaction_ids": [tx.id for tx in self.transactions],
            "is_group": self.is_group,
            "confidence_score": round(self.confidence_score, 4),
            "confidence_class": self.confidence_class.value,
            "proposed_memos": list(self.proposed_memos),
            "match_reason": list(self.match_reason),
        }


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation batch."""

    dry_run: bool
    matches: list[Match] = field(default_factory=list)
    updated: int = 0
    failed: int = 0
    high_confidence: int = 0
    medium_confidence: int = 0
    low_confidence: int = 0
    candidates: int = 0

    def count(self, confidence: ConfidenceClass) -> None:
        if confidence is ConfidenceClass.HIGH:
            self.high_confidence += 1
        elif confidence is ConfidenceClass.MEDIUM:
            self.medium_confidence += 1
        else:
            self.low_confidence += 1

    def summary(self) -> dict[str, int]:
        return {
            "updated": self.updated,
            "high_confidence": self.high_confidence,
            "medium_confidence": self.medium_confidence,
            "low_confidence": self.low_confidence,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "summary": {
                **self.summary(),
                "failed": self.failed,
                "candidates": self.candidates,
                "matches": len(self.matches),
            },
            "matches": [match.to_dict() for match in self.matches],
        }
