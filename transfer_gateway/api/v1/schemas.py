"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

from transfer_gateway.domain.models import Transaction


class TransferRequest(BaseModel):
    """Request body for POST /v1/transfers"""

    from_account_id: int = Field(..., description="Account to debit")
    to_account_id: int = Field(..., description="Account to credit")
    amount: float = Field(..., description="Amount to move; must be positive")
    category: str = Field(..., min_length=1, description="Transaction category, case-insensitive")


class TransactionResponse(BaseModel):
    """Response for POST /v1/transfers"""

    transaction_id: int
    from_account_id: int
    to_account_id: int
    amount: Decimal
    category: str
    transaction_date: datetime
    post_transfer_balance: Decimal

    @field_serializer("amount", "post_transfer_balance")
    def serialize_money(self, value: Decimal) -> str:
        return str(value)

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            transaction_id=transaction.id,
            from_account_id=transaction.from_account_id,
            to_account_id=transaction.to_account_id,
            amount=transaction.amount,
            category=transaction.category.value,
            transaction_date=transaction.timestamp,
            post_transfer_balance=transaction.post_transfer_balance,
        )
