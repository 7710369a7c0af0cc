"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from transfer_gateway.config import settings
from transfer_gateway.domain.locking import AccountLockManager
from transfer_gateway.domain.transfer import TransferEngine
from transfer_gateway.infrastructure.clients.reconciliation import ReconciliationClient
from transfer_gateway.infrastructure.database.repositories import SqlAccountStore, SqlTransactionLog
from transfer_gateway.infrastructure.database.session import get_db
from transfer_gateway.infrastructure.observability.logging import trace_transfer
from transfer_gateway.infrastructure.observability.metrics import observe_transfer_step

# Shared by every request in this process so transfers on the same account serialize
account_locks = AccountLockManager()


def engine_trace(step: str, **fields) -> None:
    """Fan engine trace points out to logs and metrics"""
    trace_transfer(step, **fields)
    observe_transfer_step(step, **fields)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_account_locks() -> AccountLockManager:
    """Provide the process-wide account lock manager"""
    return account_locks


def get_transfer_engine(
    db: Session = Depends(get_db),
    locks: AccountLockManager = Depends(get_account_locks),
) -> TransferEngine:
    """Provide a transfer engine bound to the request's database session"""
    return TransferEngine(
        SqlAccountStore(db),
        SqlTransactionLog(db),
        locks=locks,
        max_retries=settings.transfer_max_retries,
        trace=engine_trace,
    )


def get_reconciliation_client() -> ReconciliationClient:
    """Provide reconciliation webhook client instance"""
    return ReconciliationClient()
