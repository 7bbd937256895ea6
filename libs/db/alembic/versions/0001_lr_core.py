# ruff: noqa: I001
"""Reconciliation core tables: categories, vendors, imports, transactions, matches.

Revision ID: 0001_lr_core
Revises: None
Create Date: 2025-10-02
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_lr_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    op.create_table(
        "lr_categories",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("workspace_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False, server_default=sa.text("'expense'")),
        _created_at(),
        sa.UniqueConstraint("workspace_id", "name", name="uq_lr_categories_workspace_name"),
        sa.CheckConstraint(
            "type in ('expense','income','asset','liability')", name="ck_lr_categories_type"
        ),
    )
    op.create_index("ix_lr_categories_workspace_id", "lr_categories", ["workspace_id"])
    # Case-insensitive name uniqueness per workspace
    op.execute(
        "CREATE UNIQUE INDEX uniq_lr_categories_workspace_lower_name "
        "ON lr_categories (workspace_id, lower(name))"
    )

    op.create_table(
        "lr_vendors",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("workspace_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("normalized_name", sa.Text(), nullable=False),
        sa.Column(
            "total_spend", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0")
        ),
        sa.Column(
            "transaction_count", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("first_seen", sa.Date(), nullable=True),
        sa.Column("last_seen", sa.Date(), nullable=True),
        _created_at(),
        sa.UniqueConstraint(
            "workspace_id", "normalized_name", name="uq_lr_vendors_workspace_normalized"
        ),
    )
    op.create_index("ix_lr_vendors_workspace_id", "lr_vendors", ["workspace_id"])

    op.create_table(
        "lr_imports",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("workspace_id", sa.Text(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("platform", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'completed'")),
        sa.Column("transaction_count", sa.Integer(), nullable=False),
        sa.Column("category_count", sa.Integer(), nullable=False),
        sa.Column("vendor_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("platform in ('qbo','xero')", name="ck_lr_imports_platform"),
    )
    op.create_index("ix_lr_imports_workspace_id", "lr_imports", ["workspace_id"])

    op.create_table(
        "lr_transactions",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("workspace_id", sa.Text(), nullable=False),
        sa.Column("source", sa.Text(), nullable=False),
        sa.Column("external_id", sa.Text(), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("raw_date", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("vendor_name", sa.Text(), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'unmatched'")),
        sa.Column(
            "category_id",
            sa.BigInteger(),
            sa.ForeignKey("lr_categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "vendor_id",
            sa.BigInteger(),
            sa.ForeignKey("lr_vendors.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "import_id",
            sa.BigInteger(),
            sa.ForeignKey("lr_imports.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "workspace_id", "source", "external_id", name="uq_lr_tx_workspace_source_external"
        ),
        sa.CheckConstraint("source in ('qbo','xero','bank')", name="ck_lr_tx_source"),
        sa.CheckConstraint("status in ('unmatched','matched')", name="ck_lr_tx_status"),
    )
    op.create_index("ix_lr_transactions_workspace_id", "lr_transactions", ["workspace_id"])
    op.create_index(
        "ix_lr_tx_workspace_status_source",
        "lr_transactions",
        ["workspace_id", "status", "source"],
    )

    op.create_table(
        "lr_matches",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("workspace_id", sa.Text(), nullable=False),
        sa.Column(
            "bank_transaction_id",
            sa.BigInteger(),
            sa.ForeignKey("lr_transactions.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "ledger_transaction_id",
            sa.BigInteger(),
            sa.ForeignKey("lr_transactions.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("confidence", sa.Numeric(3, 2), nullable=False),
        sa.Column("match_type", sa.Text(), nullable=False),
        sa.Column("reasoning", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'suggested'")),
        _created_at(),
        sa.CheckConstraint(
            "match_type in ('exact','timing','fee_adjusted','partial')",
            name="ck_lr_matches_match_type",
        ),
        sa.CheckConstraint("confidence >= 0 AND confidence <= 1", name="ck_lr_matches_confidence"),
        sa.CheckConstraint(
            "status in ('suggested','confirmed','rejected')", name="ck_lr_matches_status"
        ),
    )
    op.create_index("ix_lr_matches_workspace_id", "lr_matches", ["workspace_id"])


def downgrade() -> None:
    op.drop_index("ix_lr_matches_workspace_id", table_name="lr_matches")
    op.drop_table("lr_matches")
    op.drop_index("ix_lr_tx_workspace_status_source", table_name="lr_transactions")
    op.drop_index("ix_lr_transactions_workspace_id", table_name="lr_transactions")
    op.drop_table("lr_transactions")
    op.drop_index("ix_lr_imports_workspace_id", table_name="lr_imports")
    op.drop_table("lr_imports")
    op.drop_index("ix_lr_vendors_workspace_id", table_name="lr_vendors")
    op.drop_table("lr_vendors")
    op.execute("DROP INDEX IF EXISTS uniq_lr_categories_workspace_lower_name")
    op.drop_index("ix_lr_categories_workspace_id", table_name="lr_categories")
    op.drop_table("lr_categories")
