"""
Request dependencies and error mapping
"""

from fastapi import HTTPException, Request

from ..errors import (
    AccountNotFound, DuplicateIdentifier, InsufficientBalance, InvalidAmount,
    InvalidTarget, LedgerError, NoSelection
)
from ..session import BankSession


# Ledger rejection -> HTTP status
ERROR_STATUS = {
    AccountNotFound: 404,
    NoSelection: 409,
    DuplicateIdentifier: 409,
    InvalidTarget: 400,
    InsufficientBalance: 400,
    InvalidAmount: 400,
}


def get_session(request: Request) -> BankSession:
    """Session attached to the running application"""
    return request.app.state.session


def http_error(error: LedgerError) -> HTTPException:
    """Translate a ledger rejection into an HTTP error"""
    status_code = 400
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "message": str(error)}
    )
