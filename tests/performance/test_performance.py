#!/usr/bin/env python3
"""Performance tests with realistic data volumes."""

import time
from datetime import date, timedelta

import pytest

from ledgermatch.matching.orchestrator import ReconciliationOrchestrator
from ledgermatch.matching.processed import ProcessedLedger
from ledgermatch.matching.retailers import AMAZON, WALMART
from tests.fixtures.builders import make_order, make_transaction


@pytest.mark.slow
@pytest.mark.performance
def test_reconciliation_performance_large_batch(temp_dir):
    """Two years of daily retailer purchases reconcile in a dry run within budget."""
    base_date = date(2023, 1, 1)
    transactions = []
    orders = []
    for day in range(730):
        day_str = (base_date + timedelta(days=day)).isoformat()
        amount = f"{day + 5}.50"  # unique whole-dollar part per day
        transactions.append(make_transaction(f"txn-{day}", day_str, f"-{amount}", "AMAZON.COM"))
        orders.append(make_order(f"ORD-{day}", day_str, amount, items=[(f"Item {day}", amount, 1)]))

    # Unrelated payees that no retailer should consider
    transactions.extend(
        make_transaction(f"other-{n}", "2023-06-01", f"-{n + 1}.00", f"Grocer {n}") for n in range(500)
    )

    ledger = ProcessedLedger(temp_dir / "processed.json")
    ledger.load()
    orchestrator = ReconciliationOrchestrator([AMAZON, WALMART], ledger)

    start_time = time.time()
    result = orchestrator.run(transactions, {"amazon": orders, "walmart": []}, dry_run=True)
    total_time = time.time() - start_time

    assert total_time < 30.0
    assert len(result.matches) == 730
    assert result.high_confidence == 730
    assert result.candidates == 730
    assert result.updated == 0
