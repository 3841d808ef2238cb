"""SQLAlchemy ORM models for ledger entities."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    DateTime,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.domain.entities.transaction import utcnow


MONEY = Numeric(precision=20, scale=4)


class Base(DeclarativeBase):
    pass


class AccountModel(Base):
    """Persisted account with its current balance."""

    __tablename__ = "ledger_accounts"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    account_number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    money: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    investor_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class TransactionModel(Base):
    """
    Persisted, immutable transaction record.

    ``idempotency_key`` is unique so a logical transaction is stored at most
    once; ``reversal_of`` is unique so an original is reversed at most once.
    """

    __tablename__ = "ledger_transactions"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    idempotency_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    account_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    reversal_of: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        nullable=True,
        unique=True,
    )
