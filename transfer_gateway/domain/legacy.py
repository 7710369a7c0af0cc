"""Boundary adapter for callers sending float amounts and free-form categories"""

import math
from decimal import Decimal

from transfer_gateway.domain.exceptions import InvalidAmountError, UnknownCategoryError
from transfer_gateway.domain.models import Transaction, TransactionCategory
from transfer_gateway.domain.transfer import TransferEngine
from transfer_gateway.domain.validation import FailureReason


def to_exact_amount(amount: float) -> Decimal:
    """
    Convert an approximate amount to Decimal via its shortest repr.

    Example:
        30.1 → Decimal("30.1"), not the binary expansion 30.10000000000000142...
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmountError(amount, "amount_not_numeric")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise InvalidAmountError(amount, FailureReason.AMOUNT_NOT_FINITE.value)
    return Decimal(str(amount))


def parse_category(category: str) -> TransactionCategory:
    """Match a category name case-insensitively against TransactionCategory"""
    if not isinstance(category, str):
        raise UnknownCategoryError(category)
    try:
        return TransactionCategory[category.strip().upper()]
    except KeyError:
        raise UnknownCategoryError(category) from None


def legacy_transfer(
    engine: TransferEngine,
    source_id: int,
    dest_id: int,
    amount: float,
    category: str,
) -> Transaction:
    """Convert boundary inputs and delegate to TransferEngine.transfer"""
    return engine.transfer(source_id, dest_id, to_exact_amount(amount), parse_category(category))
