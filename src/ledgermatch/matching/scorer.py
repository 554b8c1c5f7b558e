#!/usr/bin/env python3
"""
Match Scoring

Confidence scores in [0, 1] for a (transaction, order) pair and for a
(transaction group, split-charge order) pair.

Amount agreement is a hard gate, not a weighted term: amounts must agree to
within one cent or the score is zero. Dates further apart than the hard
ceiling are likewise rejected outright.
"""

import logging
from dataclasses import dataclass, field

from ..core.dates import days_difference, matching_days_difference, signed_days_difference
from ..core.money import Money
from ..orders.models import Order
from ..ynab.models import Transaction
from .retailers import RetailerProfile

logger = logging.getLogger(__name__)

# One cent, in milliunits
AMOUNT_TOLERANCE = Money.from_milliunits(10)

# Never match a transaction to an order whose dates are further apart than this
MAX_MATCH_DAYS = 14

# Date score decays linearly to zero over this many days
DATE_DECAY_DAYS = 7


@dataclass(frozen=True)
class Weights:
    base: float
    date: float
    payee: float


SINGLE_WEIGHTS = Weights(base=0.70, date=0.20, payee=0.10)
GROUP_WEIGHTS = Weights(base=0.50, date=0.30, payee=0.20)


@dataclass
class MatchScore:
    """A score plus the human-readable factors that produced it."""

    score: float
    reasons: list[str] = field(default_factory=list)

    @classmethod
    def rejected(cls, reason: str) -> "MatchScore":
        return cls(score=0.0, reasons=[reason])


def _date_score(days: float) -> float:
    return max(0.0, 1.0 - days / DATE_DECAY_DAYS)


def _signs_agree(amount: Money, order: Order) -> bool:
    """A refund must land as an inflow and a purchase as an outflow."""
    if order.is_return:
        return amount.is_inflow()
    return amount.is_outflow()


class MatchScorer:
    """Scores transactions against one retailer's orders."""

    def __init__(self, profile: RetailerProfile):
        self.profile = profile

    def score(self, transaction: Transaction, order: Order) -> float:
        """Confidence score for a single transaction against an order."""
        return self.evaluate(transaction, order).score

    def score_group(self, transactions: list[Transaction], order: Order) -> float:
        """Confidence score for a group of transactions against a split-charge order."""
        return self.evaluate_group(transactions, order).score

    def amount_targets(self, order: Order) -> list[Money]:
        """Amounts a single transaction may equal: the order total, plus each charge when enabled."""
        targets = [order.total_amount.abs()] if order.total_amount is not None else []
        if self.profile.match_individual_charges and order.is_split:
            targets.extend(charge.abs() for charge in order.split_charge_amounts)
        return targets

    def evaluate(self, transaction: Transaction, order: Order) -> MatchScore:
        """Score a single transaction against an order, keeping the reasons."""
        amount = transaction.amount
        if amount is None or amount.is_zero() or order.total_amount is None or order.total_amount.is_zero():
            return MatchScore.rejected("missing amount")

        if not _signs_agree(amount, order):
            return MatchScore.rejected("amount sign mismatch")

        targets = self.amount_targets(order)
        magnitude = amount.abs()
        best_index, best_target = min(
            enumerate(targets), key=lambda pair: abs((magnitude - pair[1]).to_milliunits())
        )
        if (magnitude - best_target).abs() > AMOUNT_TOLERANCE:
            return MatchScore.rejected("amount mismatch")

        reasons = []
        if best_index > 0:
            reasons.append("matches charge amount")
        elif magnitude.to_cents() == best_target.to_cents():
            reasons.append("exact amount match")
        else:
            reasons.append("close amount match")

        score = SINGLE_WEIGHTS.base

        days = matching_days_difference(transaction.date, order.order_date, order.is_return)
        if days > MAX_MATCH_DAYS:
            logger.debug(
                "Date difference %d exceeds max %d for %s / %s, rejecting",
                days,
                MAX_MATCH_DAYS,
                transaction.id,
                order.order_id,
            )
            return MatchScore.rejected("dates too far apart")

        score += _date_score(days) * SINGLE_WEIGHTS.date
        if order.is_return and signed_days_difference(transaction.date, order.order_date) > 0:
            reasons.append("return grace period")
        if days == 0:
            reasons.append("same date")
        elif days <= 3:
            reasons.append("close date match")

        if self.profile.is_retailer_payee(transaction.payee_name):
            score += SINGLE_WEIGHTS.payee
            reasons.append(f"{self.profile.name} payee")

        final = round(min(1.0, score), 4)
        logger.debug("Score %s -> %s: days=%d score=%.4f", transaction.id, order.order_id, days, final)
        return MatchScore(score=final, reasons=reasons)

    def within_date_ceiling(self, transaction: Transaction, order: Order) -> bool:
        return days_difference(transaction.date, order.order_date) <= MAX_MATCH_DAYS

    def evaluate_group(self, transactions: list[Transaction], order: Order) -> MatchScore:
        """
        Score a group of transactions against a split-charge order.

        The summed magnitudes must equal the order total; the date term uses the
        average distance of each member to the order date; the payee term needs
        every member to be a retailer payee.
        """
        if not transactions or order.total_amount is None or order.total_amount.is_zero():
            return MatchScore.rejected("missing amount")

        amounts = [tx.amount for tx in transactions]
        if any(amount is None or amount.is_zero() for amount in amounts):
            return MatchScore.rejected("missing amount")
        if not all(_signs_agree(amount, order) for amount in amounts):  # type: ignore[arg-type]
            return MatchScore.rejected("amount sign mismatch")

        total = Money.sum(amount.abs() for amount in amounts)  # type: ignore[union-attr]
        if (total - order.total_amount.abs()).abs() > AMOUNT_TOLERANCE:
            return MatchScore.rejected("amount mismatch")

        score = GROUP_WEIGHTS.base
        reasons = [f"sum matches order total ({len(transactions)} charges)"]

        average_days = sum(days_difference(tx.date, order.order_date) for tx in transactions) / len(transactions)
        score += _date_score(average_days) * GROUP_WEIGHTS.date
        if average_days <= 3:
            reasons.append("close date match")

        if all(self.profile.is_retailer_payee(tx.payee_name) for tx in transactions):
            score += GROUP_WEIGHTS.payee
            reasons.append(f"all {self.profile.name} payees")

        return MatchScore(score=round(min(1.0, score), 4), reasons=reasons)
