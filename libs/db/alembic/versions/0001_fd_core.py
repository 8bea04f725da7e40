# ruff: noqa: I001
"""Dashboard core tables: items, accounts, balance snapshots, transactions.

Revision ID: 0001_fd_core
Revises: None
Create Date: 2025-10-17
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_fd_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "fd_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("item_id", sa.String(), nullable=False, unique=True),
        sa.Column("access_token", sa.String(), nullable=False),
        sa.Column("institution_id", sa.String(), nullable=False),
        sa.Column("institution_name", sa.String(), nullable=False),
        sa.Column("institution_logo", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_fd_items_institution_id", "fd_items", ["institution_id"], unique=False)

    op.create_table(
        "fd_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("provider_account_id", sa.String(), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("official_name", sa.String(), nullable=True),
        sa.Column("nickname", sa.String(), nullable=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("subtype", sa.String(), nullable=True),
        sa.Column("mask", sa.String(), nullable=True),
        sa.Column("hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("item_pk", sa.Integer(), sa.ForeignKey("fd_items.id"), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "fd_account_balances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("account_pk", sa.Integer(), sa.ForeignKey("fd_accounts.id"), nullable=False),
        sa.Column("current", sa.Numeric(18, 2), nullable=False),
        sa.Column("available", sa.Numeric(18, 2), nullable=True),
        sa.Column("credit_limit", sa.Numeric(18, 2), nullable=True),
        _timestamp("recorded_at"),
    )

    op.create_table(
        "fd_transactions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("account_pk", sa.Integer(), sa.ForeignKey("fd_accounts.id"), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("merchant_name", sa.Text(), nullable=True),
        sa.Column("payment_channel", sa.String(), nullable=True),
        sa.Column("personal_finance_category", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        _timestamp("updated_at"),
    )
    op.create_index("ix_fd_transactions_date", "fd_transactions", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_fd_transactions_date", table_name="fd_transactions")
    op.drop_table("fd_transactions")
    op.drop_table("fd_account_balances")
    op.drop_table("fd_accounts")
    op.drop_index("ix_fd_items_institution_id", table_name="fd_items")
    op.drop_table("fd_items")
