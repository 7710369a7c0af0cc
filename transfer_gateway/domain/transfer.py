"""Transfer engine - atomic funds movement between two accounts"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from transfer_gateway.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientFundsError,
    InvalidAmountError,
    StorageFailureError,
    TransactionNotRecordedError,
    UnknownCategoryError,
)
from transfer_gateway.domain.locking import AccountLockManager
from transfer_gateway.domain.models import Account, Transaction, TransactionCategory, TransactionDraft
from transfer_gateway.domain.ports import AccountStore, TransactionLog, VersionConflictError
from transfer_gateway.domain.validation import validate_amount, validate_sufficient_funds

Trace = Callable[..., None]


def _no_trace(step: str, **fields: Any) -> None:
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransferEngine:
    """Validates, applies and records transfers over an account store"""

    def __init__(
        self,
        accounts: AccountStore,
        transactions: TransactionLog,
        *,
        locks: Optional[AccountLockManager] = None,
        max_retries: int = 3,
        clock: Optional[Callable[[], datetime]] = None,
        trace: Optional[Trace] = None,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.accounts = accounts
        self.transactions = transactions
        self.locks = locks if locks is not None else AccountLockManager()
        self.max_retries = max_retries
        self.clock = clock or _utcnow
        self.trace = trace or _no_trace

    def transfer(
        self,
        source_id: int,
        dest_id: int,
        amount: Decimal,
        category: TransactionCategory,
    ) -> Transaction:
        """
        Move amount from source to destination and record the transaction.

        Flow:
        1. Validate amount and category (no lookups on failure)
        2. Lock both accounts in ascending id order
        3. Load accounts, check funds, compute both new balances
        4. Save both accounts as one version-checked unit, retrying from 3 on conflict
        5. Release locks, then append the transaction record

        Raises:
            InvalidAmountError: amount is not finite, strictly positive and within MONEY_SCALE places
            UnknownCategoryError: category is not a TransactionCategory
            AccountNotFoundError: source or destination does not exist
            InsufficientFundsError: source balance below amount
            ConcurrentModificationError: version conflicts on every attempt
            TransactionNotRecordedError: balances committed but the log append failed
            StorageFailureError: store unavailable before commit
        """
        self.trace(
            "transfer_requested",
            source_id=source_id,
            dest_id=dest_id,
            amount=amount,
            category=category,
        )
        self._validate_request(amount, category)

        with self.locks.acquire(source_id, dest_id):
            source = self._commit_with_retry(source_id, dest_id, amount)

        draft = TransactionDraft(
            from_account_id=source_id,
            to_account_id=dest_id,
            amount=amount,
            category=category,
            timestamp=self.clock(),
            post_transfer_balance=source.balance,
        )
        return self._record(draft)

    def _validate_request(self, amount: Decimal, category: TransactionCategory) -> None:
        result = validate_amount(amount)
        if not result.ok:
            self.trace("amount_rejected", amount=amount, reason=result.reason)
            raise InvalidAmountError(amount, result.reason.value)

        if not isinstance(category, TransactionCategory):
            self.trace("category_rejected", category=category)
            raise UnknownCategoryError(category)

    def _commit_with_retry(self, source_id: int, dest_id: int, amount: Decimal) -> Account:
        """Run read-check-write until a save lands; returns the saved source"""
        for attempt in range(1, self.max_retries + 1):
            source, dest = self._resolve_accounts(source_id, dest_id)
            self._check_funds(source, amount)
            updated = self._apply(source, dest, amount)

            try:
                saved = self.accounts.save_all(updated)
            except VersionConflictError as e:
                self.trace("version_conflict", attempt=attempt, account_id=e.account_id)
                continue

            self.trace(
                "balances_committed",
                attempt=attempt,
                source_id=source_id,
                dest_id=dest_id,
                source_balance=saved[0].balance,
                dest_balance=saved[-1].balance,
            )
            return saved[0]

        self.trace("retries_exhausted", attempts=self.max_retries, source_id=source_id, dest_id=dest_id)
        raise ConcurrentModificationError(self.max_retries)

    def _resolve_accounts(self, source_id: int, dest_id: int) -> Tuple[Account, Account]:
        source = self._find_account(source_id, "source")
        dest = source if dest_id == source_id else self._find_account(dest_id, "destination")
        return source, dest

    def _find_account(self, account_id: int, which: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            self.trace("account_missing", which=which, account_id=account_id)
            raise AccountNotFoundError(which, account_id)
        self.trace("account_resolved", which=which, account_id=account_id, balance=account.balance)
        return account

    def _check_funds(self, source: Account, amount: Decimal) -> None:
        result = validate_sufficient_funds(source.balance, amount)
        if not result.ok:
            self.trace("funds_rejected", account_id=source.id, **result.context)
            raise InsufficientFundsError(source.id, source.balance, amount)

    @staticmethod
    def _apply(source: Account, dest: Account, amount: Decimal) -> List[Account]:
        """Compute both new balances before anything is persisted"""
        if source.id == dest.id:
            # Self-transfer: debit and credit cancel out, save once to hold the version check
            return [source]
        return [
            replace(source, balance=source.balance - amount),
            replace(dest, balance=dest.balance + amount),
        ]

    def _record(self, draft: TransactionDraft) -> Transaction:
        try:
            transaction = self.transactions.append(draft)
        except StorageFailureError as e:
            self.trace(
                "transaction_unrecorded",
                source_id=draft.from_account_id,
                dest_id=draft.to_account_id,
                amount=draft.amount,
                error=str(e),
            )
            raise TransactionNotRecordedError(draft, str(e)) from e

        self.trace(
            "transaction_recorded",
            transaction_id=transaction.id,
            source_id=draft.from_account_id,
            post_transfer_balance=draft.post_transfer_balance,
        )
        return transaction
