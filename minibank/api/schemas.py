"""
Pydantic schemas for API requests and responses
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from ..accounts import Account
from ..ledger import LedgerResult
from ..operations import Operation
from ..session import TransferOutcome


class OperationModel(BaseModel):
    id: int
    type: str = Field(..., description="deposit or withdraw, derived from the sign of value")
    value: int = Field(..., description="Signed delta applied to the balance")
    date: str
    description: Optional[str] = None
    
    @classmethod
    def from_operation(cls, operation: Operation) -> 'OperationModel':
        return cls(
            id=operation.id,
            type=operation.kind.value,
            value=operation.value,
            date=operation.date,
            description=operation.description
        )


class AccountModel(BaseModel):
    id: int
    name: str
    balance: int
    operations: List[OperationModel] = []
    
    @classmethod
    def from_account(cls, account: Account) -> 'AccountModel':
        return cls(
            id=account.id,
            name=account.name,
            balance=account.balance,
            operations=[OperationModel.from_operation(op) for op in account.operations]
        )


# Request schemas
class CreateAccountRequest(BaseModel):
    name: str = ""


class AmountRequest(BaseModel):
    amount: int = Field(..., description="Integer amount in currency units")


class TransferRequest(BaseModel):
    to_account_id: Optional[int] = Field(None, description="Target account")
    amount: int = Field(..., description="Integer amount in currency units")


# Response schemas
class LedgerResultModel(BaseModel):
    accounts: List[AccountModel]
    selected: Optional[AccountModel] = None
    operations: List[OperationModel] = []
    
    @classmethod
    def from_result(cls, result: LedgerResult) -> 'LedgerResultModel':
        return cls(
            accounts=[AccountModel.from_account(a) for a in result.accounts],
            selected=AccountModel.from_account(result.selected) if result.selected else None,
            operations=[OperationModel.from_operation(op) for op in result.operations]
        )


class TransferResponse(LedgerResultModel):
    notified: bool
    warning: Optional[str] = None
    
    @classmethod
    def from_outcome(cls, outcome: TransferOutcome) -> 'TransferResponse':
        base = LedgerResultModel.from_result(outcome.result)
        return cls(
            accounts=base.accounts,
            selected=base.selected,
            operations=base.operations,
            notified=outcome.notified,
            warning=outcome.warning
        )
