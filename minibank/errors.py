"""
Ledger Error Taxonomy

Structured exceptions raised by the ledger core. Every ledger rejection is
a ValueError so callers that only care about "bad input" can catch that.
"""

from typing import Optional


class LedgerError(ValueError):
    """Base class for rejected ledger actions. State is never modified."""
    pass


class InvalidTarget(LedgerError):
    """Transfer target is missing or equal to the source account"""
    pass


class InsufficientBalance(LedgerError):
    """Amount exceeds the available balance of the source account"""

    def __init__(self, account_id: int, balance: int, amount: int):
        self.account_id = account_id
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient balance on account {account_id}: "
            f"balance {balance}, requested {amount}"
        )


class NoSelection(LedgerError):
    """Action attempted while the addressed account is not the selection"""
    pass


class DuplicateIdentifier(LedgerError):
    """An account identifier already exists in the repository"""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} already exists")


class AccountNotFound(LedgerError):
    """Account identifier does not resolve in the repository"""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class InvalidAmount(LedgerError):
    """Amount is not acceptable for the requested action"""
    pass


class GatewayUnavailable(Exception):
    """
    Remote account service failed (network, HTTP status or payload).

    Never raised out of the ledger core: the session catches it and falls
    back to local state.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Account service unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
