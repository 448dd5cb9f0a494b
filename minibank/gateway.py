"""
Account Service Gateway Module

Async REST client for the remote account service: loads the initial
account list and reports committed transfers. Every failure surfaces as
GatewayUnavailable so callers can fall back to local state.
"""

import httpx
import logging
from typing import Iterable, List, Optional, Tuple

from .accounts import Account
from .errors import GatewayUnavailable

logger = logging.getLogger("minibank.gateway")


class SyncGateway:
    """REST client for the remote account service"""

    LIST_ACCOUNTS_PATH = "/api/bank/listAccounts"
    TRANSFER_PATH = "/api/bank/transfer"

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 5.0,
        enabled: bool = True
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.enabled = enabled
        self._client: Optional[httpx.AsyncClient] = (
            httpx.AsyncClient(timeout=timeout) if self.base_url else None
        )

    async def fetch_accounts(self) -> List[Account]:
        """
        Load the account list from the remote service.

        Returns:
            Accounts in the order the service lists them

        Raises:
            GatewayUnavailable: On network errors, non-200 responses or
                payloads that do not carry a valid ``list`` of accounts
        """
        if not self.enabled:
            raise GatewayUnavailable("fetch_accounts", RuntimeError("gateway disabled"))
        if self._client is None:
            raise GatewayUnavailable("fetch_accounts", RuntimeError("no base URL configured"))

        try:
            response = await self._client.get(f"{self.base_url}{self.LIST_ACCOUNTS_PATH}")

            if response.status_code != 200:
                logger.warning(f"Account service returned {response.status_code}: {response.text}")
                raise GatewayUnavailable(
                    "fetch_accounts", RuntimeError(f"HTTP {response.status_code}")
                )

            data = response.json()
            items = data.get("list") if isinstance(data, dict) else None
            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                raise ValueError("response does not carry a list of account objects")
            return [Account.from_dict(item) for item in items]

        except GatewayUnavailable:
            raise
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Account list fetch failed: {e}")
            raise GatewayUnavailable("fetch_accounts", e) from e

    async def notify_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> None:
        """
        Report a committed transfer. No response body is expected.

        Raises:
            GatewayUnavailable: If the request fails or is not accepted
        """
        if not self.enabled or self._client is None:
            return

        params = {
            "fromAccountId": from_account_id,
            "toAccountId": to_account_id,
            "amount": amount
        }

        try:
            response = await self._client.post(
                f"{self.base_url}{self.TRANSFER_PATH}",
                params=params,
                headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as e:
            logger.error(f"There was an error with the transfer request: {e}")
            raise GatewayUnavailable("notify_transfer", e) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Transfer notification returned {response.status_code}: {response.text}")
            raise GatewayUnavailable(
                "notify_transfer", RuntimeError(f"HTTP {response.status_code}")
            )

    async def health_check(self) -> bool:
        """Check if the account service answers"""
        if self._client is None:
            return False
        try:
            r = await self._client.get(f"{self.base_url}{self.LIST_ACCOUNTS_PATH}")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self):
        """Close the HTTP client"""
        if self._client is not None:
            await self._client.aclose()


class OfflineSyncGateway(SyncGateway):
    """In-process stand-in for the account service, used offline and in tests"""

    def __init__(self, accounts: Optional[Iterable[Account]] = None, fail_notifications: bool = False):
        super().__init__(base_url="", enabled=accounts is not None)
        self.accounts = list(accounts) if accounts is not None else None
        self.fail_notifications = fail_notifications
        self.notifications: List[Tuple[int, int, int]] = []

    async def fetch_accounts(self) -> List[Account]:
        """Return the configured accounts"""
        if self.accounts is None:
            raise GatewayUnavailable("fetch_accounts", RuntimeError("no account service configured"))
        return list(self.accounts)

    async def notify_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> None:
        """Record the notification instead of sending it"""
        if self.fail_notifications:
            raise GatewayUnavailable("notify_transfer", RuntimeError("notifications disabled"))
        self.notifications.append((from_account_id, to_account_id, amount))

    async def health_check(self) -> bool:
        """Offline gateway is always reachable"""
        return True
