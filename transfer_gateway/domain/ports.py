"""Interfaces the transfer engine expects from its storage collaborators"""

from typing import List, Optional, Protocol, Sequence

from transfer_gateway.domain.models import Account, Transaction, TransactionDraft


class VersionConflictError(Exception):
    """An account changed between read and save"""

    def __init__(self, account_id: int, expected_version: int):
        self.account_id = account_id
        self.expected_version = expected_version
        super().__init__(f"Account {account_id} is no longer at version {expected_version}")


class AccountStore(Protocol):
    def get(self, account_id: int) -> Optional[Account]:
        """Return the current account state, or None if it does not exist"""
        ...

    def save_all(self, accounts: Sequence[Account]) -> List[Account]:
        """
        Persist all accounts as one unit, compare-and-swap on each version.

        Returns the saved accounts with bumped versions.

        Raises:
            VersionConflictError: If any account is no longer at its read version;
                nothing is written in that case
            StorageFailureError: If the store is unavailable
        """
        ...


class TransactionLog(Protocol):
    def append(self, draft: TransactionDraft) -> Transaction:
        """
        Append a transaction record and assign its identifier.

        Raises:
            StorageFailureError: If the log is unavailable
        """
        ...
