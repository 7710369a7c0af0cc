"""Thread-safe in-memory account store and transaction log"""

import itertools
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from transfer_gateway.domain.models import Account, Transaction, TransactionDraft
from transfer_gateway.domain.ports import VersionConflictError


class InMemoryAccountStore:
    """Versioned account map with all-or-nothing compare-and-swap saves"""

    def __init__(self):
        self._lock = threading.Lock()
        self._accounts: Dict[int, Account] = {}

    def add_account(self, account_id: int, balance: Decimal) -> Account:
        """Seed an account (stands in for the account-lifecycle service)"""
        if balance < 0:
            raise ValueError("Opening balance cannot be negative")
        account = Account(id=account_id, balance=balance, version=0)
        with self._lock:
            if account_id in self._accounts:
                raise ValueError(f"Account {account_id} already exists")
            self._accounts[account_id] = account
        return account

    def get(self, account_id: int) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def save_all(self, accounts: Sequence[Account]) -> List[Account]:
        with self._lock:
            for account in accounts:
                current = self._accounts.get(account.id)
                if current is None or current.version != account.version:
                    raise VersionConflictError(account.id, account.version)

            saved = [replace(account, version=account.version + 1) for account in accounts]
            for account in saved:
                self._accounts[account.id] = account
            return saved

    def total_balance(self) -> Decimal:
        with self._lock:
            return sum((a.balance for a in self._accounts.values()), Decimal("0"))


class InMemoryTransactionLog:
    """Append-only list with monotonically issued ids starting at 1"""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._transactions: List[Transaction] = []

    def append(self, draft: TransactionDraft) -> Transaction:
        with self._lock:
            transaction = Transaction.from_draft(next(self._ids), draft)
            self._transactions.append(transaction)
            return transaction

    def all(self) -> List[Transaction]:
        with self._lock:
            return list(self._transactions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)
