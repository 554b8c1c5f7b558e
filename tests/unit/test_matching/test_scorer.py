#!/usr/bin/env python3
"""Tests for single and group match scoring."""

from dataclasses import replace

import pytest

from ledgermatch.matching.retailers import AMAZON, WALMART
from ledgermatch.matching.scorer import MatchScorer
from tests.fixtures.builders import make_order, make_transaction


@pytest.mark.matching
class TestSingleScore:
    """Amount gate, date decay and payee bonus for one transaction."""

    def setup_method(self):
        self.scorer = MatchScorer(AMAZON)

    def test_perfect_match_scores_one(self):
        assert self.scorer.score(make_transaction(), make_order()) == 1.0

    def test_non_alias_payee_loses_payee_bonus(self):
        tx = make_transaction(payee_name="Corner Store")
        assert self.scorer.score(tx, make_order()) == pytest.approx(0.9)

    def test_transfer_payee_is_blacklisted(self):
        tx = make_transaction(payee_name="Transfer : Amazon Store Card")
        assert self.scorer.score(tx, make_order()) == pytest.approx(0.9)

    @pytest.mark.parametrize(
        "transaction_date,expected",
        [
            ("2023-05-15", 1.0),
            ("2023-05-18", 0.9143),
            ("2023-05-12", 0.9143),
            ("2023-05-22", 0.8),
            ("2023-05-29", 0.8),  # 14 days, at the ceiling
        ],
    )
    def test_date_decay(self, transaction_date, expected):
        tx = make_transaction(date=transaction_date)
        assert self.scorer.score(tx, make_order()) == pytest.approx(expected, abs=1e-4)

    def test_beyond_date_ceiling_is_rejected(self):
        tx = make_transaction(date="2023-05-30")
        assert self.scorer.score(tx, make_order()) == 0.0

    def test_amount_mismatch_is_hard_gate(self):
        tx = make_transaction(amount="-26.01")
        assert self.scorer.score(tx, make_order()) == 0.0

    def test_amount_within_one_cent_passes(self):
        tx = make_transaction(amount="-26.00")
        assert self.scorer.score(tx, make_order()) == 1.0

    @pytest.mark.parametrize(
        "tx_amount,order_amount,reason",
        [
            ("-25.993", "25.994", "exact amount match"),
            ("-25.994", "25.996", "close amount match"),
        ],
    )
    def test_sub_cent_amounts(self, tx_amount, order_amount, reason):
        result = self.scorer.evaluate(make_transaction(amount=tx_amount), make_order(total_amount=order_amount))
        assert result.score == 1.0
        assert reason in result.reasons

    @pytest.mark.parametrize(
        "tx_kwargs,order_kwargs",
        [
            ({"amount": None}, {}),
            ({}, {"total_amount": None}),
            ({"amount": "0"}, {"total_amount": "0"}),
            ({"date": None}, {}),
            ({}, {"order_date": None}),
        ],
    )
    def test_missing_data_scores_zero(self, tx_kwargs, order_kwargs):
        assert self.scorer.score(make_transaction(**tx_kwargs), make_order(**order_kwargs)) == 0.0

    def test_reasons_for_perfect_match(self):
        result = self.scorer.evaluate(make_transaction(), make_order())
        assert result.reasons == ["exact amount match", "same date", "Amazon payee"]


@pytest.mark.matching
class TestSignAgreement:
    """Refunds match inflows, purchases match outflows."""

    def setup_method(self):
        self.scorer = MatchScorer(AMAZON)

    def test_return_against_expense_is_rejected(self):
        order = make_order(is_return=True)
        assert self.scorer.score(make_transaction(amount="-25.99"), order) == 0.0

    def test_purchase_against_inflow_is_rejected(self):
        assert self.scorer.score(make_transaction(amount="25.99"), make_order()) == 0.0

    def test_purchase_total_may_be_negative(self):
        order = make_order(total_amount="-25.99")
        assert self.scorer.score(make_transaction(), order) == 1.0


@pytest.mark.matching
class TestReturnGrace:
    def setup_method(self):
        self.scorer = MatchScorer(AMAZON)
        self.order = make_order(order_date="2024-01-10", is_return=True)

    def test_refund_within_grace_is_same_day(self):
        tx = make_transaction(date="2024-01-15", amount="25.99")
        result = self.scorer.evaluate(tx, self.order)
        assert result.score == 1.0
        assert "return grace period" in result.reasons

    def test_refund_past_grace_counts_excess_days(self):
        tx = make_transaction(date="2024-01-20", amount="25.99")
        score = self.scorer.score(tx, self.order)
        assert score == pytest.approx(0.9143, abs=1e-4)
        assert score <= 0.92

    def test_refund_past_grace_and_ceiling_is_rejected(self):
        tx = make_transaction(date="2024-02-01", amount="25.99")  # 22 days, 15 effective
        assert self.scorer.score(tx, self.order) == 0.0


@pytest.mark.matching
class TestIndividualCharges:
    def test_charge_amount_matches_when_enabled(self):
        profile = replace(WALMART, match_individual_charges=True)
        order = make_order(total_amount="150.00", split_charge_amounts=["100.00", "50.00"])
        tx = make_transaction(amount="-100.00", payee_name="WALMART.COM")

        result = MatchScorer(profile).evaluate(tx, order)

        assert result.score == 1.0
        assert "matches charge amount" in result.reasons

    def test_charge_amount_ignored_by_default(self):
        order = make_order(total_amount="150.00", split_charge_amounts=["100.00", "50.00"])
        tx = make_transaction(amount="-100.00", payee_name="WALMART.COM")
        assert MatchScorer(WALMART).score(tx, order) == 0.0

    def test_total_takes_precedence_over_equal_charge(self):
        profile = replace(WALMART, match_individual_charges=True)
        order = make_order(total_amount="100.00", split_charge_amounts=["100.00", "50.00"])
        tx = make_transaction(amount="-100.00", payee_name="WALMART.COM")

        reasons = MatchScorer(profile).evaluate(tx, order).reasons

        assert "exact amount match" in reasons
        assert "matches charge amount" not in reasons


@pytest.mark.matching
class TestGroupScore:
    def setup_method(self):
        self.scorer = MatchScorer(WALMART)
        self.order = make_order(
            order_id="WM1",
            order_date="2024-01-20",
            total_amount="150.00",
            split_charge_amounts=["100.00", "50.00"],
        )

    def test_sum_and_average_date(self):
        group = [
            make_transaction("a", "2024-01-20", "-100.00", "WALMART.COM"),
            make_transaction("b", "2024-01-21", "-50.00", "WALMART.COM"),
        ]
        result = self.scorer.evaluate_group(group, self.order)

        assert result.score == pytest.approx(0.9786, abs=1e-4)
        assert result.reasons == ["sum matches order total (2 charges)", "close date match", "all Walmart payees"]

    def test_every_member_needs_retailer_payee(self):
        group = [
            make_transaction("a", "2024-01-20", "-100.00", "WALMART.COM"),
            make_transaction("b", "2024-01-21", "-50.00", "Gas Station"),
        ]
        assert self.scorer.score_group(group, self.order) == pytest.approx(0.7786, abs=1e-4)

    def test_sum_mismatch_is_rejected(self):
        group = [
            make_transaction("a", "2024-01-20", "-100.00", "WALMART.COM"),
            make_transaction("b", "2024-01-21", "-49.00", "WALMART.COM"),
        ]
        assert self.scorer.score_group(group, self.order) == 0.0

    def test_mixed_signs_are_rejected(self):
        group = [
            make_transaction("a", "2024-01-20", "-200.00", "WALMART.COM"),
            make_transaction("b", "2024-01-21", "50.00", "WALMART.COM"),
        ]
        assert self.scorer.score_group(group, self.order) == 0.0

    def test_empty_group_scores_zero(self):
        assert self.scorer.score_group([], self.order) == 0.0
