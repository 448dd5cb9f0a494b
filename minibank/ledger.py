"""
Ledger Engine

Applies deposits, withdrawals and transfers to the account repository.
Every action is a guarded transition: preconditions are checked first and
a rejected action leaves balances, histories and selection untouched.
A committed action always changes a balance together with the matching
operation record.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import threading

from .accounts import Account, AccountRepository
from .errors import InsufficientBalance, InvalidAmount, InvalidTarget, NoSelection
from .logging_config import get_logger, log_action
from .operations import Operation, OperationBuilder
from .selection import SelectionController


@dataclass(frozen=True)
class LedgerResult:
    """State after a ledger action"""
    accounts: Tuple[Account, ...]
    selected: Optional[Account]
    operations: Tuple[Operation, ...] = ()

    @property
    def changed(self) -> bool:
        """True when the action recorded at least one operation"""
        return bool(self.operations)


class LedgerEngine:
    """
    Applies balance-changing actions to the selected account
    """

    def __init__(
        self,
        repository: AccountRepository,
        selection: SelectionController,
        builder: Optional[OperationBuilder] = None,
        allow_overdraft: bool = True
    ):
        self.repository = repository
        self.selection = selection
        self.builder = builder or OperationBuilder()
        self.allow_overdraft = allow_overdraft
        self.logger = get_logger("minibank.ledger")

        # One mutation in flight at a time keeps balance and history in step
        self._lock = threading.RLock()

    def _result(self, operations: Sequence[Operation] = ()) -> LedgerResult:
        return LedgerResult(
            accounts=self.repository.snapshot(),
            selected=self.selection.current(self.repository),
            operations=tuple(operations)
        )

    def _reject(self, action: str, error: Exception, resource: Optional[str] = None) -> None:
        log_action(
            self.logger, "warning", f"{action} rejected: {error}",
            action=action, resource=resource,
            extra={"error": type(error).__name__}
        )
        raise error

    def _require_selected(self, account_id: int, action: str) -> Account:
        """Return the account if it is the current selection"""
        if not self.selection.has_selection:
            self._reject(action, NoSelection("No account selected"))
        if not self.selection.is_selected(account_id):
            self._reject(
                action,
                NoSelection(f"Account {account_id} is not the selected account"),
                resource=f"account:{account_id}"
            )
        account = self.repository.find(account_id)
        if account is None:
            self._reject(
                action,
                NoSelection(f"Selected account {account_id} no longer exists"),
                resource=f"account:{account_id}"
            )
        return account

    def reseed(self, accounts: Sequence[Account]) -> LedgerResult:
        """
        Replace every account, e.g. with the list loaded from the account service.

        Operation numbering continues past the highest seeded operation id
        and a selection that no longer resolves is dropped.
        """
        with self._lock:
            self.repository.replace_all(accounts)
            self.builder.advance_past(self.repository.max_operation_id())
            if self.selection.has_selection and self.selection.current(self.repository) is None:
                self.selection.clear()

            log_action(
                self.logger, "info", f"Loaded {len(self.repository)} accounts",
                action="reseed", resource="accounts"
            )
            return self._result()

    def deposit(self, account_id: int, amount: int) -> LedgerResult:
        """
        Deposit into the selected account.

        A non-positive amount is a no-op.

        Raises:
            NoSelection: If ``account_id`` is not the selected account
        """
        with self._lock:
            if amount <= 0:
                self.logger.debug(f"Ignoring deposit of {amount} into account {account_id}")
                return self._result()

            self._require_selected(account_id, "deposit")

            operation = self.builder.deposit(amount)
            self.repository.map(account_id, lambda account: account.apply(operation))

            log_action(
                self.logger, "info", f"Deposited {amount} into account {account_id}",
                action="deposit", resource=f"account:{account_id}",
                extra={"operation_id": operation.id, "value": operation.value}
            )
            return self._result([operation])

    def withdraw(self, account_id: int, amount: int) -> LedgerResult:
        """
        Withdraw from the selected account.

        With overdraft allowed the balance may go negative; otherwise an
        amount above the balance is rejected.

        Raises:
            NoSelection: If ``account_id`` is not the selected account
            InsufficientBalance: If overdraft is disabled and funds are short
        """
        with self._lock:
            if amount <= 0:
                self.logger.debug(f"Ignoring withdrawal of {amount} from account {account_id}")
                return self._result()

            account = self._require_selected(account_id, "withdraw")

            if not self.allow_overdraft and account.balance < amount:
                self._reject(
                    "withdraw",
                    InsufficientBalance(account_id, account.balance, amount),
                    resource=f"account:{account_id}"
                )

            operation = self.builder.withdraw(amount)
            self.repository.map(account_id, lambda account: account.apply(operation))

            log_action(
                self.logger, "info", f"Withdrew {amount} from account {account_id}",
                action="withdraw", resource=f"account:{account_id}",
                extra={"operation_id": operation.id, "value": operation.value}
            )
            return self._result([operation])

    def transfer(self, from_account_id: int, to_account_id: Optional[int], amount: int) -> LedgerResult:
        """
        Move money from the selected account to another account.

        Both legs are installed in a single repository snapshot.

        Args:
            from_account_id: Source account, must be the selection
            to_account_id: Target account, must exist and differ from the source
            amount: Positive amount, at most the source's current balance

        Returns:
            LedgerResult with the withdrawal leg first and the deposit leg second

        Raises:
            NoSelection: If the source is not the selected account
            InvalidTarget: If the target is missing or equals the source
            InvalidAmount: If the amount is not positive
            InsufficientBalance: If the source balance is below the amount
        """
        with self._lock:
            source = self._require_selected(from_account_id, "transfer")
            resource = f"account:{from_account_id}"

            if (
                to_account_id is None
                or to_account_id == from_account_id
                or self.repository.find(to_account_id) is None
            ):
                self._reject(
                    "transfer",
                    InvalidTarget("Please select a valid target account."),
                    resource=resource
                )

            if amount <= 0:
                self._reject(
                    "transfer",
                    InvalidAmount(f"Transfer amount must be positive, got {amount}"),
                    resource=resource
                )

            if source.balance < amount:
                self._reject(
                    "transfer",
                    InsufficientBalance(from_account_id, source.balance, amount),
                    resource=resource
                )

            outgoing = self.builder.withdraw(amount, f"Transfer to {to_account_id}")
            incoming = self.builder.deposit(amount, f"Transfer from {from_account_id}")

            self.repository.update({
                from_account_id: lambda account: account.apply(outgoing),
                to_account_id: lambda account: account.apply(incoming),
            })

            log_action(
                self.logger, "info",
                f"Transferred {amount} from account {from_account_id} to account {to_account_id}",
                action="transfer", resource=resource,
                extra={
                    "to_account_id": to_account_id,
                    "amount": amount,
                    "operation_ids": [outgoing.id, incoming.id]
                }
            )
            return self._result([outgoing, incoming])
