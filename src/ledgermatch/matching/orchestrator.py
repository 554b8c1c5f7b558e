#!/usr/bin/env python3
"""
Reconciliation Orchestrator

Runs one batch end to end:

    filter processed -> single match -> group match -> gate -> apply/skip -> persist

Only HIGH confidence matches are written to the ledger. MEDIUM and LOW matches
are reported and counted but never applied. In dry-run mode nothing is written
and the processed ledger is left untouched.
"""

import logging

from ..orders.models import Order
from ..ynab.models import Transaction
from ..ynab.updater import LedgerUpdater
from .group_matcher import GroupMatcher
from .models import ConfidenceClass, Match, ReconciliationResult
from .processed import (
    DEFAULT_MEMO_LENGTH_THRESHOLD,
    MemoContentCheck,
    ProcessedIdCheck,
    ProcessedLedger,
)
from .retailers import RetailerProfile
from .single_matcher import SingleMatcher

logger = logging.getLogger(__name__)


class ReconciliationOrchestrator:
    """Matches a transaction batch against every configured retailer's orders."""

    def __init__(
        self,
        profiles: list[RetailerProfile],
        ledger: ProcessedLedger,
        updater: LedgerUpdater | None = None,
        memo_length_threshold: int = DEFAULT_MEMO_LENGTH_THRESHOLD,
    ):
        if not profiles:
            raise ValueError("At least one retailer profile is required")
        self.profiles = profiles
        self.ledger = ledger
        self.updater = updater
        self.id_check = ProcessedIdCheck(ledger)
        self.content_check = MemoContentCheck(
            [profile.order_marker for profile in profiles], max_length=memo_length_threshold
        )

    def filter_unprocessed(self, transactions: list[Transaction]) -> list[Transaction]:
        """Drop transactions either idempotence check reports as already handled."""
        remaining = []
        for tx in transactions:
            if self.id_check.is_processed(tx):
                logger.debug("Skipping %s: already in processed ledger", tx.id)
            elif self.content_check.is_processed(tx):
                logger.debug("Skipping %s: memo already annotated", tx.id)
            else:
                remaining.append(tx)
        logger.info("%d of %d transactions not yet processed", len(remaining), len(transactions))
        return remaining

    def match(
        self, transactions: list[Transaction], orders_by_retailer: dict[str, list[Order]]
    ) -> tuple[list[Match], int]:
        """
        Single then group matching for each retailer in turn.

        A transaction claimed by one retailer is not offered to the next.

        Returns:
            (matches, number of transactions that were candidates for any retailer)
        """
        orders_by_key = {name.lower(): orders for name, orders in orders_by_retailer.items()}
        pool = list(transactions)
        matches: list[Match] = []
        candidate_ids: set[str] = set()

        for profile in self.profiles:
            orders = orders_by_key.get(profile.name.lower(), [])
            single = SingleMatcher(profile, processed_check=self.content_check)
            candidates = single.eligible(pool)
            candidate_ids.update(tx.id for tx in candidates)
            if not orders:
                logger.info("%s: no orders supplied, skipping", profile.name)
                continue

            retailer_matches = single.find_matches(pool, orders)
            claimed = {tx.id for m in retailer_matches for tx in m.transactions}

            matched_orders = {m.order.order_id for m in retailer_matches}
            split_orders = [order for order in orders if order.is_split and order.order_id not in matched_orders]
            if profile.split_charges and split_orders:
                leftovers = [tx for tx in candidates if tx.id not in claimed]
                group_matches = GroupMatcher(profile).find_matches(leftovers, split_orders)
                claimed.update(tx.id for m in group_matches for tx in m.transactions)
                retailer_matches.extend(group_matches)

            matches.extend(retailer_matches)
            pool = [tx for tx in pool if tx.id not in claimed]

        return matches, len(candidate_ids)

    def run(
        self,
        transactions: list[Transaction],
        orders_by_retailer: dict[str, list[Order]],
        dry_run: bool = True,
    ) -> ReconciliationResult:
        """
        Reconcile one batch.

        Raises:
            ValueError: If not a dry run and no ledger updater was supplied
        """
        if not dry_run and self.updater is None:
            raise ValueError("A ledger updater is required unless running dry")

        mode = "DRY RUN" if dry_run else "APPLY"
        logger.info("Reconciling %d transactions (%s)", len(transactions), mode)

        unprocessed = self.filter_unprocessed(transactions)
        matches, candidates = self.match(unprocessed, orders_by_retailer)

        result = ReconciliationResult(dry_run=dry_run, matches=matches, candidates=candidates)
        for match in matches:
            confidence = match.confidence_class
            result.count(confidence)
            if confidence is not ConfidenceClass.HIGH:
                logger.info(
                    "Not applying %s match for order %s (score %.2f)",
                    confidence.value,
                    match.order.order_id,
                    match.confidence_score,
                )
                continue
            if dry_run:
                for tx, memo in match.updates():
                    logger.info("[DRY RUN] Would update %s: %s", tx.id, memo)
                continue
            self._apply(match, result)

        if not dry_run:
            self.ledger.save()

        logger.info(
            "Reconciliation complete: %d updated, %d failed, high=%d medium=%d low=%d",
            result.updated,
            result.failed,
            result.high_confidence,
            result.medium_confidence,
            result.low_confidence,
        )
        return result

    def _apply(self, match: Match, result: ReconciliationResult) -> None:
        """Write each member's memo; a failure is logged and the batch carries on."""
        if self.updater is None:
            raise ValueError("A ledger updater is required to apply matches")
        for tx, memo in match.updates():
            try:
                updated = self.updater.update(tx.id, memo)
            except Exception:
                logger.exception("Error updating transaction %s", tx.id)
                updated = False

            if updated:
                self.ledger.mark_processed(tx.id)
                tx.memo = memo
                result.updated += 1
                logger.info("Updated transaction %s: %s", tx.id, memo)
            else:
                result.failed += 1
                logger.error("Failed to update transaction %s", tx.id)
