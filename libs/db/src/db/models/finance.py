from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# ---------------------------
# Connections: fd_items
# ---------------------------


class FdItem(Base):
    """One aggregation-API connection (a linked institution login).

    A new item is created for every (re)connection; accounts are carried over
    from earlier items of the same institution by the reconciliation matcher.
    """

    __tablename__ = "fd_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    access_token: Mapped[str] = mapped_column(String, nullable=False)
    institution_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    institution_name: Mapped[str] = mapped_column(String, nullable=False)
    institution_logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    accounts: Mapped[list[FdAccount]] = relationship(back_populates="item")


# ---------------------------
# Accounts and balance snapshots
# ---------------------------


class FdAccount(Base):
    __tablename__ = "fd_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Provider account ids change across reconnections; the stored row is kept
    # and re-pointed when the matcher recognizes the account.
    provider_account_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    official_name: Mapped[str | None] = mapped_column(String, nullable=True)
    nickname: Mapped[str | None] = mapped_column(String, nullable=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    subtype: Mapped[str | None] = mapped_column(String, nullable=True)
    mask: Mapped[str | None] = mapped_column(String, nullable=True)
    hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    item_pk: Mapped[int] = mapped_column(ForeignKey("fd_items.id"), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    item: Mapped[FdItem] = relationship(back_populates="accounts")
    balances: Mapped[list[FdAccountBalance]] = relationship(
        back_populates="account", order_by="FdAccountBalance.id"
    )
    transactions: Mapped[list[FdTransaction]] = relationship(back_populates="account")


class FdAccountBalance(Base):
    __tablename__ = "fd_account_balances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_pk: Mapped[int] = mapped_column(ForeignKey("fd_accounts.id"), nullable=False)
    current: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    available: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    credit_limit: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    recorded_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    account: Mapped[FdAccount] = relationship(back_populates="balances")


# ---------------------------
# Core: fd_transactions
# ---------------------------


class FdTransaction(Base):
    __tablename__ = "fd_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    account_pk: Mapped[int | None] = mapped_column(ForeignKey("fd_accounts.id"), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Dashboard sign convention: positive = credit, negative = debit.
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    merchant_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_channel: Mapped[str | None] = mapped_column(String, nullable=True)
    # Category as delivered by the provider; never overwritten by users.
    personal_finance_category: Mapped[str | None] = mapped_column(String, nullable=True)
    # User override written by the category update sink; wins when present.
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    account: Mapped[FdAccount | None] = relationship(back_populates="transactions")


__all__ = [
    "Base",
    "FdItem",
    "FdAccount",
    "FdAccountBalance",
    "FdTransaction",
]
