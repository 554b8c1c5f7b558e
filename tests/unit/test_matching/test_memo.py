#!/usr/bin/env python3
"""Tests for memo synthesis and sanitization."""

import pytest

from ledgermatch.matching.memo import MAX_MEMO_LENGTH, MemoSynthesizer, sanitize
from ledgermatch.matching.retailers import AMAZON, WALMART
from tests.fixtures.builders import make_order, make_transaction


@pytest.mark.matching
class TestSanitize:
    def test_disallowed_characters_become_spaces(self):
        assert sanitize("Product with & special @ characters!") == "Product with & special  characters "

    def test_four_spaces_collapse_to_two(self):
        assert sanitize("Coffee    Filters") == "Coffee  Filters"

    def test_two_spaces_are_kept(self):
        assert sanitize("Coffee  Filters") == "Coffee  Filters"

    def test_allowed_punctuation_survives(self):
        text = "S&S: Paper_Towels - 2+1 pack | Brand's best, 12.5 oz"
        assert sanitize(text) == text

    def test_parentheses_need_profile_allow_list(self):
        assert sanitize("Order (Charge 1 of 2)") == "Order  Charge 1 of 2 "
        assert sanitize("Order (Charge 1 of 2)", WALMART.memo_allowed_punctuation) == "Order (Charge 1 of 2)"

    def test_truncates_to_cap(self):
        assert len(sanitize("a" * 600)) == MAX_MEMO_LENGTH

    @pytest.mark.parametrize(
        "text",
        [
            "Product with & special @ characters!",
            "émoji 🎧 headphones   (blue)",
            "x" * 498 + "!!!!",
            "tabs\tand\nnewlines",
        ],
    )
    def test_sanitize_is_idempotent(self, text):
        once = sanitize(text)
        assert sanitize(once) == once


@pytest.mark.matching
class TestAmazonMemo:
    def setup_method(self):
        self.memo = MemoSynthesizer(AMAZON)

    def test_single_item_uses_title(self):
        assert self.memo.propose(make_transaction(), make_order()) == "Wireless Headphones"

    def test_single_item_title_cut_at_comma(self):
        order = make_order(items=[("Echo Dot, 5th Gen, Charcoal", "49.99", 1)])
        assert self.memo.propose(make_transaction(), order) == "Echo Dot"

    def test_multiple_items(self):
        order = make_order(items=[("Paper Towels, 12 rolls", "10.00", 1), ("Dish Soap", "5.00", 2)])
        assert self.memo.propose(make_transaction(), order) == "2 items: Paper Towels, Dish Soap"

    def test_more_than_three_items_get_ellipsis(self):
        order = make_order(items=[("A", "1.00", 1), ("B", "1.00", 1), ("C", "1.00", 1), ("D", "1.00", 1)])
        assert self.memo.propose(make_transaction(), order) == "4 items: A, B, C ..."

    def test_subscription_order(self):
        order = make_order(order_id="SUB-123", items=[("Coffee Pods (Subscribe & Save)", "25.99", 1)])
        assert self.memo.propose(make_transaction(), order) == "S&S: Coffee Pods"

    def test_subscription_suffix_kept_on_regular_orders(self):
        order = make_order(items=[("Coffee Pods (Subscribe & Save)", "25.99", 1)])
        assert self.memo.summarize(order) == "Coffee Pods (Subscribe & Save)"

    def test_existing_memo_is_prepended(self):
        tx = make_transaction(memo="Gift for Sam")
        assert self.memo.propose(tx, make_order()) == "Gift for Sam | Wireless Headphones"

    @pytest.mark.parametrize("memo", [None, "", "null"])
    def test_empty_memo_is_not_prepended(self, memo):
        tx = make_transaction(memo=memo)
        assert self.memo.propose(tx, make_order()) == "Wireless Headphones"

    @pytest.mark.parametrize(
        "order_kwargs,expected",
        [
            ({}, "Amazon Order (Couldn't identify items)"),
            ({"is_return": True}, "Amazon Return (Couldn't identify items)"),
            ({"order_id": "SUB-9"}, "S&S: Amazon Order (Couldn't identify items)"),
        ],
    )
    def test_unknown_items_placeholder(self, order_kwargs, expected):
        order = make_order(items=[], **order_kwargs)
        assert self.memo.propose(make_transaction(), order) == expected

    def test_placeholder_keeps_existing_memo(self):
        tx = make_transaction(memo="Birthday!")
        order = make_order(items=[])
        assert self.memo.propose(tx, order) == "Birthday  | Amazon Order (Couldn't identify items)"

    def test_placeholder_with_long_existing_memo_respects_cap(self):
        tx = make_transaction(memo="x" * 499)
        memo = self.memo.propose(tx, make_order(items=[]))
        assert len(memo) == MAX_MEMO_LENGTH
        assert memo.startswith("x" * 499)

    def test_group_memos_keep_charge_label(self):
        txs = [make_transaction("a", amount="-20.00"), make_transaction("b", amount="-5.99")]
        assert self.memo.propose_group(txs, make_order(order_id="O1")) == [
            "Amazon Order: O1 (Charge 1 of 2) - Wireless Headphones",
            "Amazon Order: O1 (Charge 2 of 2) - Wireless Headphones",
        ]


@pytest.mark.matching
class TestWalmartMemo:
    def setup_method(self):
        self.memo = MemoSynthesizer(WALMART)
        self.order = make_order(order_id="1234", items=[("Test Product", "25.99", 1)])

    def test_single_charge_uses_order_header(self):
        tx = make_transaction(payee_name="WALMART")
        assert self.memo.propose(tx, self.order) == "Walmart Order: 1234 - Test Product"

    def test_existing_memo_is_prepended(self):
        tx = make_transaction(payee_name="WALMART", memo="Original memo")
        assert self.memo.propose(tx, self.order) == "Original memo | Walmart Order: 1234 - Test Product"

    def test_group_memos_are_numbered(self):
        group = [make_transaction("a", payee_name="WALMART"), make_transaction("b", payee_name="WALMART")]
        assert self.memo.propose_group(group, self.order) == [
            "Walmart Order: 1234 (Charge 1 of 2) - Test Product",
            "Walmart Order: 1234 (Charge 2 of 2) - Test Product",
        ]
