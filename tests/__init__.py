"""
Test Suite for ledgermatch

Test Structure:
- fixtures/: Synthetic transactions, orders and a recording ledger updater
- unit/: Unit tests mirroring the src/ package structure
- integration/: CLI and end-to-end reconciliation tests

All test data is synthetic.
"""
