"""
Ledger operation endpoints: deposit, withdraw and transfer on the selected account
"""

from fastapi import APIRouter, Depends

from .dependencies import get_session, http_error
from .schemas import AmountRequest, LedgerResultModel, TransferRequest, TransferResponse
from ..errors import LedgerError
from ..session import BankSession


router = APIRouter()


@router.post("/deposit")
async def deposit(request: AmountRequest, session: BankSession = Depends(get_session)):
    """Deposit into the selected account"""
    try:
        result = session.deposit(request.amount)
    except LedgerError as e:
        raise http_error(e)
    
    return LedgerResultModel.from_result(result).model_dump()


@router.post("/withdraw")
async def withdraw(request: AmountRequest, session: BankSession = Depends(get_session)):
    """Withdraw from the selected account"""
    try:
        result = session.withdraw(request.amount)
    except LedgerError as e:
        raise http_error(e)
    
    return LedgerResultModel.from_result(result).model_dump()


@router.post("/transfer")
async def transfer(request: TransferRequest, session: BankSession = Depends(get_session)):
    """Transfer from the selected account and report it to the account service"""
    try:
        outcome = await session.transfer(request.to_account_id, request.amount)
    except LedgerError as e:
        raise http_error(e)
    
    return TransferResponse.from_outcome(outcome).model_dump()
