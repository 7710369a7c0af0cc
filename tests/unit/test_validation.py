"""Unit tests for transfer validation helpers"""

import pytest
from decimal import Decimal
from transfer_gateway.domain.validation import (
    FailureReason,
    validate_amount,
    validate_sufficient_funds,
)


def test_validate_amount_positive():
    """Test a positive amount passes with no reason"""
    result = validate_amount(Decimal("0.01"))

    assert result.ok is True
    assert result.reason is None
    assert result.context == {}


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-0.00"), Decimal("-5"), Decimal("-0.0001")])
def test_validate_amount_not_positive(amount: Decimal):
    """Test zero and negative amounts are rejected"""
    result = validate_amount(amount)

    assert result.ok is False
    assert result.reason is FailureReason.AMOUNT_NOT_POSITIVE
    assert result.context["amount"] == amount


@pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")])
def test_validate_amount_not_finite(amount: Decimal):
    """Test NaN and infinities are rejected before any comparison"""
    result = validate_amount(amount)

    assert result.ok is False
    assert result.reason is FailureReason.AMOUNT_NOT_FINITE


def test_validate_amount_requires_decimal():
    """Test floats are a programming error at the core boundary"""
    with pytest.raises(TypeError):
        validate_amount(30.0)


def test_validate_sufficient_funds_exact_balance():
    """Test transferring the whole balance is allowed"""
    assert validate_sufficient_funds(Decimal("10.00"), Decimal("10.00")).ok is True


def test_validate_sufficient_funds_shortfall():
    """Test shortfall context carries available and required"""
    result = validate_sufficient_funds(Decimal("10.00"), Decimal("15.00"))

    assert result.ok is False
    assert result.reason is FailureReason.INSUFFICIENT_FUNDS
    assert result.context == {
        "available": Decimal("10.00"),
        "required": Decimal("15.00"),
        "shortfall": Decimal("5.00"),
    }


@pytest.mark.parametrize("amount", [Decimal("0.00005"), Decimal("1.23456"), Decimal("1E-10")])
def test_validate_amount_finer_than_money_scale(amount: Decimal):
    """Test amounts the stores would have to round are rejected"""
    result = validate_amount(amount)

    assert result.ok is False
    assert result.reason is FailureReason.AMOUNT_TOO_PRECISE
    assert result.context["amount"] == amount


@pytest.mark.parametrize("amount", [Decimal("0.0001"), Decimal("30.000000"), Decimal("1E+3"), Decimal("12.3400")])
def test_validate_amount_within_money_scale(amount: Decimal):
    """Test trailing zeros beyond the scale do not count as extra precision"""
    assert validate_amount(amount).ok is True
