"""SQLAlchemy ORM models for the ledger tables"""

from sqlalchemy import BigInteger, Column, DateTime, Enum, Integer, Numeric
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from transfer_gateway.domain.models import MONEY_SCALE, TransactionCategory

Base = declarative_base()

# SQLite only autoincrements INTEGER primary keys
Identifier = BigInteger().with_variant(Integer, "sqlite")
Money = Numeric(precision=19, scale=MONEY_SCALE, asdecimal=True)


class AccountRecord(Base):
    """Account balance row, owned by the account-lifecycle service"""

    __tablename__ = "accounts"

    id = Column(Identifier, primary_key=True, autoincrement=True)
    balance = Column(Money, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Append-only transfer record"""

    __tablename__ = "transactions"

    id = Column(Identifier, primary_key=True, autoincrement=True)
    from_account_id = Column(Identifier, nullable=False, index=True)
    to_account_id = Column(Identifier, nullable=False, index=True)
    amount = Column(Money, nullable=False)
    category = Column(Enum(TransactionCategory, name="transaction_category"), nullable=False)
    transaction_date = Column(DateTime(timezone=True), nullable=False)
    post_transfer_balance = Column(Money, nullable=False)
