"""
Selection endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_session, http_error
from .schemas import AccountModel
from ..errors import LedgerError
from ..session import BankSession


router = APIRouter()


def _selection_payload(session: BankSession) -> dict:
    selected = session.selected_account()
    return {
        "selected_id": session.selection.selected_id,
        "account": AccountModel.from_account(selected).model_dump() if selected else None
    }


@router.get("")
async def get_selection(session: BankSession = Depends(get_session)):
    """Get the account currently in focus"""
    return _selection_payload(session)


@router.post("/{account_id}")
async def toggle_selection(account_id: int, session: BankSession = Depends(get_session)):
    """Select an account, or clear the selection if it is already selected"""
    try:
        session.select_account(account_id)
    except LedgerError as e:
        raise http_error(e)
    
    return _selection_payload(session)
