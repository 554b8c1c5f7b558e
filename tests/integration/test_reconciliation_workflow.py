#!/usr/bin/env python3
"""
End-to-end reconciliation over files on disk.

Loads a YNAB export and order files, runs a batch, applies it, and runs it
again to check nothing is applied twice.
"""

import json

import pytest

from ledgermatch.matching import (
    AMAZON,
    WALMART,
    ProcessedLedger,
    ReconciliationOrchestrator,
)
from ledgermatch.orders import load_orders
from ledgermatch.ynab import load_transactions
from tests.fixtures.builders import RecordingUpdater, ynab_transaction_dict


@pytest.fixture
def batch_files(tmp_path):
    transactions = tmp_path / "transactions.json"
    transactions.write_text(
        json.dumps(
            {
                "transactions": [
                    ynab_transaction_dict(id="tx1"),
                    ynab_transaction_dict(id="w1", date="2024-01-20", amount=-100000, payee_name="WALMART.COM"),
                    ynab_transaction_dict(id="w2", date="2024-01-21", amount=-50000, payee_name="WALMART.COM"),
                    ynab_transaction_dict(id="refund", date="2024-02-08", amount=19990, payee_name="Amazon.com"),
                    ynab_transaction_dict(id="coffee", payee_name="Coffee Shop", amount=-4500),
                ]
            }
        )
    )

    amazon = tmp_path / "amazon.json"
    amazon.write_text(
        json.dumps(
            [
                {
                    "order_id": "123",
                    "order_date": "2023-05-15",
                    "total_amount": "25.99",
                    "items": [{"title": "Wireless Headphones", "unit_price": "25.99", "quantity": 1}],
                },
                {
                    "order_id": "R-9",
                    "order_date": "2024-02-03",
                    "total_amount": "19.99",
                    "is_return": True,
                    "items": [{"title": "Phone Case, Blue", "unit_price": "19.99", "quantity": 1}],
                },
            ]
        )
    )

    walmart = tmp_path / "walmart.csv"
    walmart.write_text(
        "order_id,order_date,total_amount,item_title,item_unit_price,item_quantity,split_charge_amounts\n"
        "WM1,2024-01-20,150.00,Television,150.00,1,100.00;50.00\n"
    )
    return transactions, amazon, walmart


@pytest.mark.integration
class TestReconciliationWorkflow:
    def test_apply_then_rerun(self, batch_files, tmp_path):
        transactions_file, amazon_file, walmart_file = batch_files
        orders = {"amazon": load_orders(amazon_file), "walmart": load_orders(walmart_file)}
        ledger_path = tmp_path / "cache" / "processed.json"

        ledger = ProcessedLedger(ledger_path)
        ledger.load()
        updater = RecordingUpdater()
        orchestrator = ReconciliationOrchestrator([AMAZON, WALMART], ledger, updater)

        result = orchestrator.run(load_transactions(transactions_file), orders, dry_run=False)

        assert dict(updater.calls) == {
            "tx1": "Wireless Headphones",
            "refund": "Phone Case",
            "w1": "Walmart Order: WM1 (Charge 1 of 2) - Television",
            "w2": "Walmart Order: WM1 (Charge 2 of 2) - Television",
        }
        assert result.updated == 4
        assert result.high_confidence == 3
        assert result.candidates == 4

        # A later run over a fresh export applies nothing new
        ledger = ProcessedLedger(ledger_path)
        assert ledger.load() == {"tx1", "refund", "w1", "w2"}
        second_updater = RecordingUpdater()
        rerun = ReconciliationOrchestrator([AMAZON, WALMART], ledger, second_updater).run(
            load_transactions(transactions_file), orders, dry_run=False
        )

        assert rerun.matches == []
        assert second_updater.calls == []

    def test_dry_run_reports_without_side_effects(self, batch_files, tmp_path):
        transactions_file, amazon_file, walmart_file = batch_files
        ledger = ProcessedLedger(tmp_path / "processed.json")
        ledger.load()

        result = ReconciliationOrchestrator([AMAZON, WALMART], ledger).run(
            load_transactions(transactions_file),
            {"amazon": load_orders(amazon_file), "walmart": load_orders(walmart_file)},
        )

        assert result.high_confidence == 3
        assert result.updated == 0
        assert not (tmp_path / "processed.json").exists()
