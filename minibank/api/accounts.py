"""
Account management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from .dependencies import get_session, http_error
from .schemas import AccountModel, CreateAccountRequest, OperationModel
from ..errors import LedgerError
from ..session import BankSession


router = APIRouter()


@router.get("")
async def list_accounts(session: BankSession = Depends(get_session)):
    """List all accounts in display order"""
    return {
        "list": [AccountModel.from_account(a).model_dump() for a in session.accounts()]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    response: Response,
    session: BankSession = Depends(get_session)
):
    """Create a new account; a blank name is ignored"""
    try:
        account = session.create_account(request.name)
    except LedgerError as e:
        raise http_error(e)
    
    if account is None:
        response.status_code = status.HTTP_200_OK
        return {"account": None}
    
    return {
        "account": AccountModel.from_account(account).model_dump(),
        "message": "Account created successfully"
    }


@router.get("/{account_id}")
async def get_account(account_id: int, session: BankSession = Depends(get_session)):
    """Get account details"""
    account = session.get_account(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    
    return AccountModel.from_account(account).model_dump()


@router.get("/{account_id}/operations")
async def get_account_operations(account_id: int, session: BankSession = Depends(get_session)):
    """Get operation history for account, oldest first"""
    account = session.get_account(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    
    return {
        "operations": [OperationModel.from_operation(op).model_dump() for op in account.operations]
    }
