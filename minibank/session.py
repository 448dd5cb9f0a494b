"""
Bank Session Module

Wires the ledger core together for one operator: the account repository,
the selection, the ledger engine and the remote account service. Ledger
actions run synchronously; the two remote calls are awaited outside the
engine and their outcome is applied afterwards.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Tuple

from .accounts import Account, AccountRepository
from .config import MinibankConfig, get_config
from .errors import AccountNotFound, DuplicateIdentifier, GatewayUnavailable
from .gateway import OfflineSyncGateway, SyncGateway
from .ledger import LedgerEngine, LedgerResult
from .logging_config import get_logger, log_action
from .operations import Operation, OperationBuilder
from .selection import SelectionController


# Built-in accounts used until (or instead of) the remote account list
DEFAULT_ACCOUNTS: Tuple[Account, ...] = (
    Account(
        id=1,
        name="alex",
        balance=5000,
        operations=(Operation(id=1, value=5000, date="2024-12-11"),)
    ),
)

TRANSFER_FAILED_WARNING = "Transfer request failed. Please try again."


@dataclass(frozen=True)
class TransferOutcome:
    """Committed transfer plus the result of notifying the account service"""
    result: LedgerResult
    notified: bool
    warning: Optional[str] = None


class BankSession:
    """
    Single-operator banking session over an in-memory ledger
    """

    def __init__(
        self,
        accounts: Optional[Iterable[Account]] = None,
        gateway: Optional[SyncGateway] = None,
        allow_overdraft: bool = True,
        clock: Optional[Callable[[], date]] = None
    ):
        self.repository = AccountRepository(DEFAULT_ACCOUNTS if accounts is None else accounts)
        self.selection = SelectionController()
        self.builder = OperationBuilder(
            start_id=self.repository.max_operation_id() + 1,
            clock=clock
        )
        self.engine = LedgerEngine(
            self.repository, self.selection, self.builder,
            allow_overdraft=allow_overdraft
        )
        self.gateway = gateway or OfflineSyncGateway()
        self.logger = get_logger("minibank.session")

    @classmethod
    def from_config(cls, config: Optional[MinibankConfig] = None) -> 'BankSession':
        """Create a session from configuration"""
        config = config or get_config()

        if config.gateway_url:
            gateway = SyncGateway(base_url=config.gateway_url, timeout=config.gateway_timeout)
        else:
            gateway = OfflineSyncGateway()

        return cls(gateway=gateway, allow_overdraft=config.allow_overdraft)

    def accounts(self) -> Tuple[Account, ...]:
        """All accounts in display order"""
        return self.repository.snapshot()

    def get_account(self, account_id: int) -> Optional[Account]:
        return self.repository.find(account_id)

    def selected_account(self) -> Optional[Account]:
        """Selected account as it is in the current snapshot"""
        return self.selection.current(self.repository)

    def select_account(self, account_id: int) -> Optional[Account]:
        """
        Toggle focus on an account.

        Returns:
            The selected account, None if the toggle cleared the selection

        Raises:
            AccountNotFound: When focusing an account that does not exist
        """
        if not self.selection.is_selected(account_id) and account_id not in self.repository:
            raise AccountNotFound(account_id)

        self.selection.select(account_id)
        return self.selected_account()

    def create_account(self, name: str) -> Optional[Account]:
        """
        Open a new account with a zero balance.

        Blank names are ignored and return None.
        """
        if not name or not name.strip():
            self.logger.debug("Ignoring account creation with a blank name")
            return None

        account = Account(id=self.repository.next_id(), name=name.strip())
        self.repository.append(account)

        log_action(
            self.logger, "info", f"Created account {account.id}",
            action="create_account", resource=f"account:{account.id}",
            extra={"name": account.name}
        )
        return account

    def deposit(self, amount: int) -> LedgerResult:
        """Deposit into the selected account"""
        return self.engine.deposit(self.selection.selected_id, amount)

    def withdraw(self, amount: int) -> LedgerResult:
        """Withdraw from the selected account"""
        return self.engine.withdraw(self.selection.selected_id, amount)

    async def transfer(self, to_account_id: Optional[int], amount: int) -> TransferOutcome:
        """
        Transfer from the selected account, then report it to the account service.

        The local transfer stays committed when the report fails; the
        outcome then carries a warning for the operator.
        """
        from_account_id = self.selection.selected_id
        result = self.engine.transfer(from_account_id, to_account_id, amount)

        try:
            await self.gateway.notify_transfer(from_account_id, to_account_id, amount)
        except GatewayUnavailable as e:
            log_action(
                self.logger, "error", f"Transfer notification failed: {e}",
                action="notify_transfer", resource=f"account:{from_account_id}",
                extra={"to_account_id": to_account_id, "amount": amount}
            )
            return TransferOutcome(result=result, notified=False, warning=TRANSFER_FAILED_WARNING)

        return TransferOutcome(result=result, notified=True)

    async def sync_accounts(self) -> bool:
        """
        Replace local accounts with the remote account list.

        Returns:
            True if the remote list was installed, False if the current
            accounts were kept
        """
        try:
            accounts = await self.gateway.fetch_accounts()
            self.engine.reseed(accounts)
        except (GatewayUnavailable, DuplicateIdentifier) as e:
            log_action(
                self.logger, "error", f"Keeping local accounts: {e}",
                action="sync_accounts", resource="accounts"
            )
            return False

        return True

    async def close(self) -> None:
        await self.gateway.close()
