"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from transfer_gateway.config import settings

transfer_logger = logging.getLogger("transfer_gateway.transfer")

# Trace steps that mean the request was refused or the ledger needs attention
_WARNING_STEPS = {
    "amount_rejected",
    "category_rejected",
    "account_missing",
    "funds_rejected",
    "version_conflict",
    "retries_exhausted",
}
_ERROR_STEPS = {"transaction_unrecorded"}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)  # Keep exact digits out of float land
    return value


def trace_transfer(step: str, **fields: Any) -> None:
    """Trace sink for TransferEngine decision points"""
    if step in _ERROR_STEPS:
        level = logging.ERROR
    elif step in _WARNING_STEPS:
        level = logging.WARNING
    else:
        level = logging.INFO

    extra = {key: _jsonable(value) for key, value in fields.items()}
    extra["step"] = step
    transfer_logger.log(level, "Transfer %s", step.replace("_", " "), extra=extra)


def log_transfer(
    request_id: str,
    transaction_id: int,
    from_account_id: int,
    to_account_id: int,
    amount: Decimal,
    duration_ms: float,
) -> None:
    """Log structured transfer outcome for analysis"""
    logging.info(
        "Transfer completed",
        extra={
            "request_id": request_id,
            "transaction_id": transaction_id,
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
            "step": "transfer_complete",
            "amount": str(amount),
            "duration_ms": duration_ms,
        },
    )
