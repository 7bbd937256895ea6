from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT identity on Postgres; SQLite only autoincrements INTEGER PRIMARY KEY
_PK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: lr_categories
# ---------------------------


class LrCategory(Base):
    __tablename__ = "lr_categories"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # Case-insensitive uniqueness per workspace is enforced by the import service
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'expense'"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "name", name="uq_lr_categories_workspace_name"),
        CheckConstraint(
            "type in ('expense','income','asset','liability')", name="ck_lr_categories_type"
        ),
    )


# ---------------------------
# Reference: lr_vendors
# ---------------------------


class LrVendor(Base):
    __tablename__ = "lr_vendors"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String, nullable=False)
    # Running aggregates over imported transactions
    total_spend: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )
    transaction_count: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    first_seen: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_seen: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "normalized_name", name="uq_lr_vendors_workspace_normalized"
        ),
    )


# ---------------------------
# Audit: lr_imports
# ---------------------------


class LrImport(Base):
    __tablename__ = "lr_imports"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'completed'"))
    transaction_count: Mapped[int] = mapped_column(Integer, nullable=False)
    category_count: Mapped[int] = mapped_column(Integer, nullable=False)
    vendor_count: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("platform in ('qbo','xero')", name="ck_lr_imports_platform"),
    )


# ---------------------------
# Core: lr_transactions
# ---------------------------


class LrTransaction(Base):
    __tablename__ = "lr_transactions"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # 'qbo' / 'xero' for ledger rows, 'bank' for bank-feed rows
    source: Mapped[str] = mapped_column(String, nullable=False)
    external_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # NULL when the export's date could not be recognised; raw value kept below
    date: Mapped[date | None] = mapped_column(Date, nullable=True)
    raw_date: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    vendor_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'unmatched'"))
    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("lr_categories.id", ondelete="SET NULL"), nullable=True
    )
    vendor_id: Mapped[int | None] = mapped_column(
        ForeignKey("lr_vendors.id", ondelete="SET NULL"), nullable=True
    )
    import_id: Mapped[int | None] = mapped_column(
        ForeignKey("lr_imports.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "source", "external_id", name="uq_lr_tx_workspace_source_external"
        ),
        CheckConstraint("source in ('qbo','xero','bank')", name="ck_lr_tx_source"),
        CheckConstraint("status in ('unmatched','matched')", name="ck_lr_tx_status"),
    )


# ---------------------------
# Reconciliation: lr_matches
# ---------------------------


class LrMatch(Base):
    __tablename__ = "lr_matches"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    bank_transaction_id: Mapped[int] = mapped_column(
        ForeignKey("lr_transactions.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    ledger_transaction_id: Mapped[int] = mapped_column(
        ForeignKey("lr_transactions.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    confidence: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
    match_type: Mapped[str] = mapped_column(String, nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'suggested'"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "match_type in ('exact','timing','fee_adjusted','partial')",
            name="ck_lr_matches_match_type",
        ),
        CheckConstraint(
            "confidence >= 0 AND confidence <= 1", name="ck_lr_matches_confidence"
        ),
        CheckConstraint(
            "status in ('suggested','confirmed','rejected')", name="ck_lr_matches_status"
        ),
    )


__all__ = [
    "Base",
    "LrCategory",
    "LrVendor",
    "LrImport",
    "LrTransaction",
    "LrMatch",
]
