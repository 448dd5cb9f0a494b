"""
Account Management Module

Immutable account values and the in-memory repository that owns them.
The repository is the only place the account list lives; every change goes
through replace_all, append or map and produces a new snapshot.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple
import threading

from .errors import AccountNotFound, DuplicateIdentifier
from .operations import Operation


@dataclass(frozen=True)
class Account:
    """
    Ledger party with a balance and an append-only operation history
    """
    id: int
    name: str
    balance: int = 0
    operations: Tuple[Operation, ...] = field(default_factory=tuple)
    
    def apply(self, operation: Operation) -> 'Account':
        """Return a copy with the operation appended and its value applied"""
        return replace(
            self,
            balance=self.balance + operation.value,
            operations=self.operations + (operation,)
        )
    
    @property
    def operations_total(self) -> int:
        """Net sum of all recorded operation values"""
        return sum(op.value for op in self.operations)
    
    @property
    def is_consistent(self) -> bool:
        """Check that the balance matches the recorded history"""
        return self.balance == self.operations_total
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert Account to the account service wire format"""
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "operations": [op.to_dict() for op in self.operations]
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """
        Create Account from the account service wire format.
        
        Accepts the legacy ``username`` and ``outgoingTransfers`` keys.
        """
        name = data.get("name")
        if name is None:
            name = data.get("username", "")
        
        operations_data = data.get("operations")
        if operations_data is None:
            operations_data = data.get("outgoingTransfers") or []
        if not all(isinstance(op, dict) for op in operations_data):
            raise TypeError(f"Account {data.get('id')} has a malformed operation list")
        
        return cls(
            id=int(data["id"]),
            name=str(name),
            balance=int(data.get("balance", 0)),
            operations=tuple(Operation.from_dict(op) for op in operations_data)
        )


class AccountRepository:
    """
    In-memory, ordered collection of accounts addressed by identifier
    """
    
    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        self._accounts: Tuple[Account, ...] = ()
        self._lock = threading.RLock()
        self._last_id = 0
        if accounts is not None:
            self.replace_all(accounts)
    
    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)
    
    def __len__(self) -> int:
        return len(self._accounts)
    
    def __contains__(self, account_id: object) -> bool:
        return self.find(account_id) is not None
    
    def snapshot(self) -> Tuple[Account, ...]:
        """Current accounts in display order"""
        return self._accounts
    
    def find(self, account_id) -> Optional[Account]:
        """Get account by ID, None if absent"""
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None
    
    def get(self, account_id: int) -> Account:
        """Get account by ID or raise AccountNotFound"""
        account = self.find(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account
    
    def replace_all(self, accounts: Iterable[Account]) -> Tuple[Account, ...]:
        """
        Replace the whole snapshot, e.g. with accounts fetched remotely.
        
        Raises:
            DuplicateIdentifier: If the new list repeats an identifier.
                The current snapshot is kept in that case.
        """
        new_accounts = tuple(accounts)
        seen = set()
        for account in new_accounts:
            if account.id in seen:
                raise DuplicateIdentifier(account.id)
            seen.add(account.id)
        
        with self._lock:
            self._accounts = new_accounts
            if seen:
                self._last_id = max(self._last_id, max(seen))
            return self._accounts
    
    def append(self, account: Account) -> Tuple[Account, ...]:
        """Add a newly created account at the end of the list"""
        with self._lock:
            if self.find(account.id) is not None:
                raise DuplicateIdentifier(account.id)
            self._accounts = self._accounts + (account,)
            self._last_id = max(self._last_id, account.id)
            return self._accounts
    
    def map(self, account_id: int, updater: Callable[[Account], Account]) -> Tuple[Account, ...]:
        """
        Apply ``updater`` to exactly one account and install the new snapshot.
        
        Args:
            account_id: Account to update
            updater: Function returning the replacement account value
            
        Returns:
            The new snapshot; every other account is the same object as before
        """
        return self.update({account_id: updater})

    def update(self, updaters: Mapping[int, Callable[[Account], Account]]) -> Tuple[Account, ...]:
        """
        Apply several per-account updaters and install them as one snapshot.

        Either every addressed account is replaced or none is: unknown
        identifiers and failing updaters leave the snapshot untouched.
        """
        with self._lock:
            for account_id in updaters:
                if self.find(account_id) is None:
                    raise AccountNotFound(account_id)

            updated: List[Account] = []
            for account in self._accounts:
                updater = updaters.get(account.id)
                if updater is None:
                    updated.append(account)
                    continue
                new_account = updater(account)
                if new_account.id != account.id:
                    raise ValueError("Account identifier is immutable")
                updated.append(new_account)

            self._accounts = tuple(updated)
            return self._accounts
    
    def next_id(self) -> int:
        """Generate an identifier no account has used in this repository"""
        with self._lock:
            self._last_id += 1
            return self._last_id
    
    def max_operation_id(self) -> int:
        """Highest operation identifier across all accounts (0 if none)"""
        return max(
            (op.id for account in self._accounts for op in account.operations),
            default=0
        )
