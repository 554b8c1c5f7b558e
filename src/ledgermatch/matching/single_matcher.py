#!/usr/bin/env python3
"""
Single Transaction Matcher

Pairs each eligible transaction with the one order it best matches.
"""

import logging

from ..orders.models import Order
from ..ynab.models import Transaction
from .memo import MemoSynthesizer
from .models import ConfidenceThresholds, Match
from .processed import MemoContentCheck, ProcessedCheck
from .retailers import RetailerProfile
from .scorer import MatchScorer

logger = logging.getLogger(__name__)


class SingleMatcher:
    """
    Best-order matcher for one retailer.

    Transactions are skipped when their memo shows they were already annotated
    or when nothing about them points at the retailer. Orders are not claimed
    exclusively: two transactions may both pick the same order here, and
    split-charge orders are resolved separately by GroupMatcher.
    """

    def __init__(
        self,
        profile: RetailerProfile,
        scorer: MatchScorer | None = None,
        memo_synthesizer: MemoSynthesizer | None = None,
        processed_check: ProcessedCheck | None = None,
        min_confidence: float = ConfidenceThresholds.MINIMUM,
    ):
        self.profile = profile
        self.scorer = scorer or MatchScorer(profile)
        self.memo_synthesizer = memo_synthesizer or MemoSynthesizer(profile)
        self.processed_check = processed_check or MemoContentCheck([profile.order_marker])
        self.min_confidence = min_confidence

    def eligible(self, transactions: list[Transaction]) -> list[Transaction]:
        """Transactions not yet annotated that carry a retailer signal."""
        return [
            tx
            for tx in transactions
            if not self.processed_check.is_processed(tx) and self.profile.is_candidate(tx)
        ]

    def find_matches(self, transactions: list[Transaction], orders: list[Order]) -> list[Match]:
        """
        Match each eligible transaction to its best-scoring order.

        Only a strictly higher score displaces the current best, so among equal
        scores the earliest order in the list wins. Matches scoring below
        min_confidence are dropped.
        """
        candidates = self.eligible(transactions)
        logger.info(
            "%s: %d of %d transactions are match candidates",
            self.profile.name,
            len(candidates),
            len(transactions),
        )
        if not candidates or not orders:
            return []

        matches = []
        for tx in candidates:
            best_order: Order | None = None
            best_score = 0.0
            best_reasons: list[str] = []

            for order in orders:
                result = self.scorer.evaluate(tx, order)
                if result.score > best_score:
                    best_order = order
                    best_score = result.score
                    best_reasons = result.reasons

            if best_order is None or best_score < self.min_confidence:
                logger.debug("%s: no match for transaction %s", self.profile.name, tx.id)
                continue

            memo = self.memo_synthesizer.propose(tx, best_order)
            matches.append(
                Match(
                    transactions=[tx],
                    order=best_order,
                    retailer=self.profile.name,
                    confidence_score=best_score,
                    proposed_memos=[memo],
                    match_reason=best_reasons,
                )
            )
            logger.debug(
                "%s: transaction %s -> order %s (%.2f)",
                self.profile.name,
                tx.id,
                best_order.order_id,
                best_score,
            )

        logger.info("%s: found %d single matches", self.profile.name, len(matches))
        return matches
