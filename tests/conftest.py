"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from transfer_gateway.api.main import create_app
from transfer_gateway.api.dependencies import get_reconciliation_client
from transfer_gateway.domain.transfer import TransferEngine
from transfer_gateway.infrastructure.clients.reconciliation import ReconciliationClient
from transfer_gateway.infrastructure.database.models import Base
from transfer_gateway.infrastructure.database.session import build_engine, get_db
from transfer_gateway.infrastructure.memory import InMemoryAccountStore, InMemoryTransactionLog


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def reconciliation_client() -> AsyncMock:
    """Reconciliation client that never leaves the process"""
    return AsyncMock(spec=ReconciliationClient)


@pytest.fixture
def app(db: Session, reconciliation_client: AsyncMock):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reconciliation_client] = lambda: reconciliation_client
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def transaction_log() -> InMemoryTransactionLog:
    return InMemoryTransactionLog()


@pytest.fixture
def trace_steps() -> list:
    """Collects (step, fields) emitted by the engine"""
    return []


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def transfer_engine(account_store, transaction_log, trace_steps, fixed_now) -> TransferEngine:
    """In-memory engine with a fixed clock and a recording trace"""
    return TransferEngine(
        account_store,
        transaction_log,
        clock=lambda: fixed_now,
        trace=lambda step, **fields: trace_steps.append((step, fields)),
    )


@pytest.fixture
def funded_accounts(account_store: InMemoryAccountStore):
    """Source 1 holding 100.00 and destination 2 holding 50.00"""
    account_store.add_account(1, Decimal("100.00"))
    account_store.add_account(2, Decimal("50.00"))
    return account_store
