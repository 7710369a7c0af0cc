"""Data access layer for accounts and transactions"""

from typing import List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transfer_gateway.domain.exceptions import StorageFailureError
from transfer_gateway.domain.models import Account, Transaction, TransactionDraft
from transfer_gateway.domain.ports import VersionConflictError
from transfer_gateway.infrastructure.database.models import AccountRecord, TransactionRecord


class SqlAccountStore:
    """Account store with version-checked multi-row saves"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: int) -> Optional[Account]:
        """Read the committed account state"""
        try:
            record = self.db.get(AccountRecord, account_id, populate_existing=True)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureError(f"Account store unavailable: {e}") from e

        if record is None:
            return None
        return Account(id=record.id, balance=record.balance, version=record.version)

    def save_all(self, accounts: Sequence[Account]) -> List[Account]:
        """
        Update every account in one database transaction.

        Each UPDATE is guarded by the version read earlier; if any row count
        comes back zero the whole unit is rolled back.

        Raises:
            VersionConflictError: An account moved past its read version
            StorageFailureError: On any database error
        """
        try:
            for account in accounts:
                result = self.db.execute(
                    update(AccountRecord)
                    .where(AccountRecord.id == account.id)
                    .where(AccountRecord.version == account.version)
                    .values(balance=account.balance, version=account.version + 1)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    self.db.rollback()
                    raise VersionConflictError(account.id, account.version)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureError(f"Account store unavailable: {e}") from e

        return [
            Account(id=account.id, balance=account.balance, version=account.version + 1)
            for account in accounts
        ]

    def create_account(self, balance) -> Account:
        """Insert an account row (account-lifecycle helper for seeding and tests)"""
        record = AccountRecord(balance=balance, version=0)
        self.db.add(record)
        self.db.commit()
        return Account(id=record.id, balance=record.balance, version=record.version)


class SqlTransactionLog:
    """Append-only transaction log backed by the transactions table"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, draft: TransactionDraft) -> Transaction:
        """Insert the record and return it with its database id"""
        record = TransactionRecord(
            from_account_id=draft.from_account_id,
            to_account_id=draft.to_account_id,
            amount=draft.amount,
            category=draft.category,
            transaction_date=draft.timestamp,
            post_transfer_balance=draft.post_transfer_balance,
        )
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureError(f"Transaction log unavailable: {e}") from e

        return Transaction.from_draft(record.id, draft)
