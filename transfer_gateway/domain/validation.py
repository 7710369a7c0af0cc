"""Pure validation helpers for transfer requests"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from transfer_gateway.domain.models import MONEY_SCALE


class FailureReason(str, Enum):
    """Why a validation check did not pass"""

    AMOUNT_NOT_FINITE = "amount_not_finite"
    AMOUNT_NOT_POSITIVE = "amount_not_positive"
    AMOUNT_TOO_PRECISE = "amount_too_precise"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single check; reason and context are set only on failure"""

    ok: bool
    reason: Optional[FailureReason] = None
    context: Dict[str, Decimal] = field(default_factory=dict)

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: FailureReason, **context: Decimal) -> "ValidationResult":
        return cls(ok=False, reason=reason, context=context)


def validate_amount(amount: Decimal) -> ValidationResult:
    """
    Check that a transfer amount is a finite, strictly positive Decimal
    with no more than MONEY_SCALE decimal places.

    Raises:
        TypeError: If amount is not a Decimal (floats must go through the legacy adapter)
    """
    if not isinstance(amount, Decimal):
        raise TypeError(f"Transfer amount must be a Decimal, got {type(amount).__name__}")

    # NaN compares by raising, so rule out non-finite values first
    if not amount.is_finite():
        return ValidationResult.failed(FailureReason.AMOUNT_NOT_FINITE, amount=amount)
    if amount <= 0:
        return ValidationResult.failed(FailureReason.AMOUNT_NOT_POSITIVE, amount=amount)
    # Stores round to MONEY_SCALE places, so a finer amount would not conserve value
    if amount.normalize().as_tuple().exponent < -MONEY_SCALE:
        return ValidationResult.failed(FailureReason.AMOUNT_TOO_PRECISE, amount=amount)
    return ValidationResult.passed()


def validate_sufficient_funds(available: Decimal, required: Decimal) -> ValidationResult:
    """Check that available balance covers the required amount"""
    if available < required:
        return ValidationResult.failed(
            FailureReason.INSUFFICIENT_FUNDS,
            available=available,
            required=required,
            shortfall=required - available,
        )
    return ValidationResult.passed()
