"""Mapping of transfer failures to HTTP responses"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from transfer_gateway.api.dependencies import get_request_id
from transfer_gateway.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientFundsError,
    InvalidAmountError,
    StorageFailureError,
    TransferError,
    UnknownCategoryError,
)
from transfer_gateway.infrastructure.observability.metrics import record_transfer

# First match wins, so subclasses go before their bases
ERROR_STATUS_CODES = [
    (InvalidAmountError, 400),
    (UnknownCategoryError, 400),
    (AccountNotFoundError, 404),
    (ConcurrentModificationError, 409),
    (InsufficientFundsError, 422),
    (StorageFailureError, 503),
]


def error_detail(error: TransferError) -> dict:
    """Response body shared by every transfer failure"""
    return {"error": type(error).__name__, "message": str(error), **error.context()}


def status_for(error: TransferError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def handle_transfer_error(request: Request, error: TransferError) -> JSONResponse:
    """Count, log and map a transfer failure that escaped a route"""
    record_transfer(error)
    status_code = status_for(error)

    log = logging.error if status_code >= 500 else logging.warning
    log(
        f"Transfer rejected: {error}",
        extra={"request_id": get_request_id(request), "error": type(error).__name__, "status": status_code},
    )
    return JSONResponse(status_code=status_code, content={"detail": error_detail(error)})
