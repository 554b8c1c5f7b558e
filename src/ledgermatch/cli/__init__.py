"""
Command Line Interface Package

Command Structure:
- ledgermatch version / config: utility commands
- ledgermatch reconcile: match a transaction export against order files
- ledgermatch processed stats / reset: inspect or clear the processed ledger
"""
