"""
Test Fixtures and Utilities

Builders for synthetic transactions and orders, and a ledger updater double
that records calls instead of contacting YNAB. All test data is synthetic.
"""
