"""Database engine and session factory for the ledger tables"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from transfer_gateway.config import settings


def build_engine(database_url: str) -> Engine:
    """
    Create a pooled engine for the given URL.

    SQLite connections are shared across the request threadpool, so the
    same-thread check is disabled there; server databases get a bounded
    pool that is pinged and recycled hourly.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

# expire_on_commit stays on: every account read after a commit goes back to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Request-scoped session; one per transfer request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
