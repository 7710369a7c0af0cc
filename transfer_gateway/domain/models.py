"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

# Decimal places every stored balance and amount is kept to
MONEY_SCALE = 4


class TransactionCategory(str, Enum):
    """Closed set of transfer purposes"""

    PAYMENT = "PAYMENT"
    TRANSFER = "TRANSFER"
    SALARY = "SALARY"
    BILLS = "BILLS"
    GROCERIES = "GROCERIES"
    SHOPPING = "SHOPPING"
    ENTERTAINMENT = "ENTERTAINMENT"
    TRAVEL = "TRAVEL"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Account:
    """Account state as seen by the transfer engine"""

    id: int
    balance: Decimal
    version: int = 0  # Bumped by the store on every successful save


@dataclass(frozen=True)
class TransactionDraft:
    """Transaction record before the log assigns it an identifier"""

    from_account_id: int
    to_account_id: int
    amount: Decimal
    category: TransactionCategory
    timestamp: datetime
    post_transfer_balance: Decimal  # Source balance right after the transfer


@dataclass(frozen=True)
class Transaction:
    """Immutable record of a committed transfer"""

    id: int
    from_account_id: int
    to_account_id: int
    amount: Decimal
    category: TransactionCategory
    timestamp: datetime
    post_transfer_balance: Decimal

    @classmethod
    def from_draft(cls, transaction_id: int, draft: TransactionDraft) -> "Transaction":
        return cls(
            id=transaction_id,
            from_account_id=draft.from_account_id,
            to_account_id=draft.to_account_id,
            amount=draft.amount,
            category=draft.category,
            timestamp=draft.timestamp,
            post_transfer_balance=draft.post_transfer_balance,
        )
