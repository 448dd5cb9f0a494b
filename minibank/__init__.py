"""
Minibank Personal Ledger

An in-memory personal-banking ledger: accounts with integer balances,
append-only operation histories, and deposit, withdrawal and transfer
actions that keep balances and histories consistent.
"""

__version__ = "1.0.0"
