#!/usr/bin/env python3
"""
Split-Charge Group Matcher

Some orders are settled with several card charges. This matcher looks for a
group of otherwise unmatched transactions whose amounts add up to such an
order's total.

Candidate groups are enumerated over the date-sorted transactions: each group
starts at some transaction and draws its other members only from the
transactions dated within PROXIMITY_DAYS after it. Because the list is sorted,
every pair in a group is then within PROXIMITY_DAYS of each other, and the
search stays bounded by the window size rather than the batch size.
"""

import logging
from collections.abc import Iterator
from itertools import combinations

from ..core.dates import days_difference
from ..orders.models import Order
from ..ynab.models import Transaction
from .memo import MemoSynthesizer
from .models import ConfidenceThresholds, Match
from .retailers import RetailerProfile
from .scorer import MatchScorer

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 2
MAX_GROUP_SIZE = 5

# Every transaction in a group is within this many days of every other
PROXIMITY_DAYS = 7


def _by_date(transactions: list[Transaction]) -> list[Transaction]:
    """Dated transactions sorted by date, then id for a stable order."""
    dated = [tx for tx in transactions if tx.date is not None]
    return sorted(dated, key=lambda tx: (tx.date, tx.id))


def candidate_groups(
    transactions: list[Transaction],
    max_size: int = MAX_GROUP_SIZE,
    proximity_days: int = PROXIMITY_DAYS,
) -> Iterator[list[Transaction]]:
    """
    Yield date-proximate groups of MIN_GROUP_SIZE..max_size transactions.

    Groups come out by start position, then size, then member position, each
    group itself in date order. Transactions without a date are never grouped.
    """
    ordered = _by_date(transactions)
    for start, first in enumerate(ordered):
        window = []
        for later in ordered[start + 1 :]:
            if days_difference(later.date, first.date) > proximity_days:
                break
            window.append(later)

        for size in range(MIN_GROUP_SIZE - 1, max_size):
            if size > len(window):
                break
            for rest in combinations(window, size):
                yield [first, *rest]


class GroupMatcher:
    """Matches groups of transactions to one retailer's split-charge orders."""

    def __init__(
        self,
        profile: RetailerProfile,
        scorer: MatchScorer | None = None,
        memo_synthesizer: MemoSynthesizer | None = None,
        min_confidence: float = ConfidenceThresholds.MINIMUM,
        max_group_size: int = MAX_GROUP_SIZE,
    ):
        self.profile = profile
        self.scorer = scorer or MatchScorer(profile)
        self.memo_synthesizer = memo_synthesizer or MemoSynthesizer(profile)
        self.min_confidence = min_confidence
        self.max_group_size = max_group_size

    def find_matches(self, unmatched: list[Transaction], split_orders: list[Order]) -> list[Match]:
        """
        Find group matches among transactions no single match claimed.

        The first group (in enumeration order) that an order accepts wins it; no
        search is made for a better overall partition. A transaction joins at
        most one group and an order is matched at most once.
        """
        orders = [order for order in split_orders if order.is_split]
        if len(unmatched) < MIN_GROUP_SIZE or not orders:
            return []

        assigned: set[str] = set()
        matched_orders: set[str] = set()
        matches = []

        for group in candidate_groups(unmatched, self.max_group_size):
            if len(matched_orders) == len(orders):
                break
            if any(tx.id in assigned for tx in group):
                continue

            for order in orders:
                if order.order_id in matched_orders:
                    continue
                if not all(self.scorer.within_date_ceiling(tx, order) for tx in group):
                    continue

                result = self.scorer.evaluate_group(group, order)
                if result.score < self.min_confidence:
                    continue

                assigned.update(tx.id for tx in group)
                matched_orders.add(order.order_id)
                matches.append(
                    Match(
                        transactions=list(group),
                        order=order,
                        retailer=self.profile.name,
                        confidence_score=result.score,
                        proposed_memos=self.memo_synthesizer.propose_group(group, order),
                        match_reason=result.reasons,
                    )
                )
                logger.debug(
                    "%s: %d transactions -> split order %s (%.2f)",
                    self.profile.name,
                    len(group),
                    order.order_id,
                    result.score,
                )
                break

        logger.info("%s: found %d split-charge group matches", self.profile.name, len(matches))
        return matches
