"""Domain-specific exceptions"""

from decimal import Decimal
from typing import Any, Dict

from transfer_gateway.domain.models import TransactionDraft


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransferError(DomainException):
    """Base for every failure reported by a transfer"""

    retryable = False

    def context(self) -> Dict[str, Any]:
        """Structured fields for logs and API responses"""
        return {}


class InvalidAmountError(TransferError):
    """Transfer amount is not finite, not strictly positive, or too precise to store"""

    def __init__(self, amount: Any, reason: str = "amount_not_positive"):
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid transfer amount {amount}: {reason.replace('_', ' ')}")

    def context(self) -> Dict[str, Any]:
        return {"amount": str(self.amount), "reason": self.reason}


class UnknownCategoryError(TransferError):
    """Category does not match any TransactionCategory"""

    def __init__(self, category: Any):
        self.category = category
        super().__init__(f"Unknown transaction category: {category!r}")

    def context(self) -> Dict[str, Any]:
        return {"category": str(self.category)}


class AccountNotFoundError(TransferError):
    """Source or destination account does not exist"""

    def __init__(self, which: str, account_id: int):
        self.which = which  # "source" | "destination"
        self.account_id = account_id
        super().__init__(f"{which.capitalize()} account not found: {account_id}")

    def context(self) -> Dict[str, Any]:
        return {"which": self.which, "account_id": self.account_id}


class InsufficientFundsError(TransferError):
    """Source balance is below the requested amount"""

    def __init__(self, account_id: int, available: Decimal, required: Decimal):
        self.account_id = account_id
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient funds in account {account_id}: available {available}, required {required}"
        )

    @property
    def shortfall(self) -> Decimal:
        return self.required - self.available

    def context(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "available": str(self.available),
            "required": str(self.required),
            "shortfall": str(self.shortfall),
        }


class ConcurrentModificationError(TransferError):
    """Optimistic retry budget exhausted under contention"""

    retryable = True

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Accounts changed concurrently, gave up after {attempts} attempts")

    def context(self) -> Dict[str, Any]:
        return {"attempts": self.attempts}


class StorageFailureError(TransferError):
    """Account store or transaction log is unavailable"""

    pass


class TransactionNotRecordedError(StorageFailureError):
    """Balances were committed but the transaction log append failed"""

    def __init__(self, draft: TransactionDraft, message: str = "Transaction log append failed"):
        self.draft = draft
        super().__init__(f"{message}; balances already committed")

    def context(self) -> Dict[str, Any]:
        return {
            "from_account_id": self.draft.from_account_id,
            "to_account_id": self.draft.to_account_id,
            "amount": str(self.draft.amount),
            "category": self.draft.category.value,
            "timestamp": self.draft.timestamp.isoformat(),
            "post_transfer_balance": str(self.draft.post_transfer_balance),
        }
