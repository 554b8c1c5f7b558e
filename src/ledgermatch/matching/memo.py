#!/usr/bin/env python3
"""
Memo Synthesis

Builds the human-readable annotation proposed for a matched transaction and
sanitizes it to the character set the ledger accepts.
"""

import re

from ..orders.models import Order, OrderItem
from ..ynab.models import Transaction
from .retailers import RetailerProfile

MAX_MEMO_LENGTH = 500
SEPARATOR = " | "

# Item titles listed in a multi-item summary before the ellipsis
MAX_SUMMARY_ITEMS = 3
ELLIPSIS = " ..."

_SPACE_RUN = re.compile(r" {3,}")


def sanitize(text: str, allowed_punctuation: str = "_-+:'|.,&") -> str:
    """
    Restrict a memo to letters, digits, space and the allowed punctuation.

    Every other character becomes a space, runs of three or more spaces become
    exactly two, and the result is cut to MAX_MEMO_LENGTH characters. Applying
    it to its own output changes nothing.
    """
    disallowed = re.compile(f"[^a-zA-Z0-9 {re.escape(allowed_punctuation)}]")
    cleaned = disallowed.sub(" ", text)
    cleaned = _SPACE_RUN.sub("  ", cleaned)
    return cleaned[:MAX_MEMO_LENGTH]


class MemoSynthesizer:
    """Proposes memos for one retailer's matches."""

    def __init__(self, profile: RetailerProfile):
        self.profile = profile

    def placeholder(self, order: Order) -> str:
        """Memo used when the order's items are unknown."""
        kind = "Return" if order.is_return else "Order"
        text = f"{self.profile.name} {kind} (Couldn't identify items)"
        if not order.is_return and self.profile.is_subscription(order):
            text = self.profile.subscription_marker + text
        return text

    def clean_title(self, item: OrderItem, order: Order) -> str:
        """Item title cut at its first comma, without the subscription suffix."""
        title = item.title
        suffix = self.profile.subscription_suffix
        if suffix and self.profile.is_subscription(order) and title.endswith(suffix):
            title = title[: -len(suffix)].strip()
        return title.split(",")[0]

    def summarize(self, order: Order) -> str:
        """
        One-line description of an order's contents.

        Examples:
            "Wireless Headphones"
            "4 items: Paper Towels, Dish Soap, Sponges ..."
            "S&S: Coffee Pods"
        """
        if order.item_count == 1:
            summary = self.clean_title(order.items[0], order)
        else:
            titles = [self.clean_title(item, order) for item in order.items[:MAX_SUMMARY_ITEMS]]
            summary = f"{order.item_count} items: {', '.join(titles)}"
            if order.item_count > MAX_SUMMARY_ITEMS:
                summary += ELLIPSIS

        if self.profile.is_subscription(order):
            summary = self.profile.subscription_marker + summary
        return summary

    def headline(self, order: Order, charge_index: int | None = None, charge_count: int | None = None) -> str:
        """Summary wrapped in the order header when the retailer uses one."""
        summary = self.summarize(order)
        if charge_index is not None and charge_count is not None:
            return f"{self.profile.order_marker}: {order.order_id} (Charge {charge_index} of {charge_count}) - {summary}"
        if self.profile.order_header:
            return f"{self.profile.order_marker}: {order.order_id} - {summary}"
        return summary

    def propose(
        self,
        transaction: Transaction,
        order: Order,
        charge_index: int | None = None,
        charge_count: int | None = None,
    ) -> str:
        """
        Memo for a transaction matched to an order.

        charge_index and charge_count give the transaction's 1-based position in a
        split-charge group; leave them unset for single matches. Any memo already
        on the transaction is kept in front of the new text.
        """
        if not order.items:
            text = self.placeholder(order)
            if transaction.has_memo:
                existing = sanitize(transaction.memo or "", self.profile.memo_allowed_punctuation)
                return f"{existing}{SEPARATOR}{text}"[:MAX_MEMO_LENGTH]
            return text

        allowed = self.profile.memo_allowed_punctuation
        if charge_index is not None and "(" not in allowed:
            allowed += "()"

        text = self.headline(order, charge_index, charge_count)
        if transaction.has_memo:
            text = f"{transaction.memo}{SEPARATOR}{text}"
        return sanitize(text, allowed)

    def propose_group(self, transactions: list[Transaction], order: Order) -> list[str]:
        """One memo per member of a date-sorted group, numbered in order."""
        count = len(transactions)
        return [self.propose(tx, order, index, count) for index, tx in enumerate(transactions, start=1)]
