"""
Account Selection Module

Tracks which single account is in focus. Only the identifier is stored;
the selected account itself is always looked up in the current repository
snapshot, so it can never go stale after a mutation.
"""

from typing import Optional

from .accounts import Account, AccountRepository
from .logging_config import get_logger


class SelectionController:
    """Toggle-style focus on at most one account"""

    def __init__(self, selected_id: Optional[int] = None):
        self._selected_id = selected_id
        self.logger = get_logger("minibank.selection")

    @property
    def selected_id(self) -> Optional[int]:
        """Identifier of the focused account, None when nothing is focused"""
        return self._selected_id

    @property
    def has_selection(self) -> bool:
        return self._selected_id is not None

    def select(self, account_id: int) -> Optional[int]:
        """
        Focus an account, or unfocus it if it is already selected.

        Returns:
            The new selected identifier (None after a toggle-off)
        """
        if self._selected_id == account_id:
            self._selected_id = None
        else:
            self._selected_id = account_id
        self.logger.debug(f"Selection is now {self._selected_id}")
        return self._selected_id

    def clear(self) -> None:
        """Drop the current selection"""
        self._selected_id = None

    def is_selected(self, account_id: int) -> bool:
        return self._selected_id is not None and self._selected_id == account_id

    def current(self, repository: AccountRepository) -> Optional[Account]:
        """Resolve the selected account against the repository's current snapshot"""
        if self._selected_id is None:
            return None
        return repository.find(self._selected_id)
