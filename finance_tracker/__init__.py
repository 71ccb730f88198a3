"""
Finance Tracker - Source Package

A personal finance tracker for a single local user: accounts,
transactions, savings goals and debts, with balances and cashflow
summaries derived from them.

DESIGN PRINCIPLES:
1. The ledger engine owns every balance change
2. Every mutation is all-or-nothing
3. Storage is swappable (key-value slots, full overwrite)
4. Reports are pure functions over a snapshot
5. Persisted field names never change
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
