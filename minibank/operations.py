"""
Operation Records Module

Immutable operation entries recorded in an account's history. Every
operation stores a signed delta: deposits and incoming transfer legs are
positive, withdrawals and outgoing transfer legs are negative. The kind
shown to users is derived from that sign.
"""

from datetime import date
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union
import threading

from .errors import InvalidAmount


class OperationKind(Enum):
    """Display label of an operation"""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


@dataclass(frozen=True)
class Operation:
    """Single balance-affecting event in an account history"""
    id: int
    value: int  # Signed delta applied to the balance
    date: str   # YYYY-MM-DD
    description: Optional[str] = None
    
    @property
    def kind(self) -> OperationKind:
        """Kind derived from the sign of the value"""
        if self.value < 0:
            return OperationKind.WITHDRAW
        return OperationKind.DEPOSIT
    
    @property
    def magnitude(self) -> int:
        """Unsigned amount of the operation"""
        return abs(self.value)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the account service wire format"""
        result = {
            "id": self.id,
            "type": self.kind.value,
            "value": self.value,
            "date": self.date,
        }
        if self.description is not None:
            result["description"] = self.description
        return result
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Operation':
        """
        Create an operation from the account service wire format.
        
        Older payloads store withdrawals as a positive value next to
        ``type: "withdraw"``; those are turned into negative deltas.
        """
        value = int(data.get("value", data.get("amount", 0)))
        if data.get("type") == OperationKind.WITHDRAW.value and value > 0:
            value = -value
        
        return cls(
            id=int(data["id"]),
            value=value,
            date=str(data.get("date", "")),
            description=data.get("description")
        )


class OperationBuilder:
    """
    Builds timestamped operations with monotonically increasing identifiers.
    
    The clock is injectable so tests can pin "today".
    """
    
    def __init__(self, start_id: int = 1, clock: Optional[Callable[[], date]] = None):
        self._next_id = start_id
        self._clock = clock or date.today
        self._lock = threading.Lock()
    
    @property
    def peek_id(self) -> int:
        """Identifier the next built operation will receive"""
        return self._next_id
    
    def advance_past(self, operation_id: int) -> None:
        """Make sure future identifiers are greater than ``operation_id``"""
        with self._lock:
            if operation_id >= self._next_id:
                self._next_id = operation_id + 1
    
    def today(self) -> str:
        """Today's date as an ISO-8601 calendar date"""
        return self._clock().isoformat()
    
    def build(
        self,
        kind: Union[OperationKind, str],
        magnitude: int,
        description: Optional[str] = None,
        on: Optional[date] = None
    ) -> Operation:
        """
        Build a new operation.
        
        Args:
            kind: deposit or withdraw
            magnitude: Non-negative amount; the sign comes from ``kind``
            description: Optional free text (counterparty of a transfer leg)
            on: Operation date, today by default
            
        Returns:
            New Operation with a fresh identifier
        """
        kind = OperationKind(kind)
        if magnitude < 0:
            raise InvalidAmount(f"Operation magnitude must be non-negative, got {magnitude}")
        
        value = magnitude if kind == OperationKind.DEPOSIT else -magnitude
        operation_date = on.isoformat() if on else self.today()
        
        with self._lock:
            operation_id = self._next_id
            self._next_id += 1
        
        return Operation(
            id=operation_id,
            value=value,
            date=operation_date,
            description=description
        )
    
    def deposit(self, amount: int, description: Optional[str] = None) -> Operation:
        """Build a deposit operation dated today"""
        return self.build(OperationKind.DEPOSIT, amount, description)
    
    def withdraw(self, amount: int, description: Optional[str] = None) -> Operation:
        """Build a withdrawal operation dated today"""
        return self.build(OperationKind.WITHDRAW, amount, description)
