# ruff: noqa: I001
"""Persistence integration for ledger_recon.

Functions here write GL imports, bank feeds and match suggestions to the shared
database owned by ``libs/db``. They rely on SQLAlchemy ORM models defined in
``db.models.ledger`` and a session provided by ``db.client``. Every function
takes the session explicitly; committing is the caller's job (normally
``db.client.session_scope``).

Scope:
- Import a normalized GL batch: name-based dedup of categories and vendors
  against what the workspace already stores, transactions inserted as
  ``unmatched``, vendor aggregates bumped, one ``lr_imports`` audit row.
- Load the unmatched ledger and bank sides of a workspace for matching.
- Store bank-feed rows idempotently on ``(workspace_id, external_id)``.
- Record accepted match suggestions and flag both sides ``matched``.

Statements are portable SQLAlchemy (select, then insert/update) so the same
code runs on Postgres and on the SQLite databases used in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.ledger import LrCategory, LrImport, LrMatch, LrTransaction, LrVendor
from .ingest.parsing import normalize_name
from .logging_setup import get_logger
from .models import (
    SUPPORTED_PLATFORMS,
    BankTransaction,
    ImportResult,
    LedgerTransaction,
    MatchSuggestion,
    ParsedGLData,
)

logger = get_logger("ledger_recon.persistence")

BANK_SOURCE = "bank"

_CENT = Decimal("0.01")


def _to_decimal_2(raw: Decimal | float | int) -> Decimal:
    return Decimal(str(raw)).quantize(_CENT, rounding=ROUND_HALF_UP)


def _to_date(raw: str) -> date | None:
    """Return the date for a ``YYYY-MM-DD`` string, else None."""

    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


@dataclass(slots=True)
class _VendorAgg:
    total: Decimal
    count: int
    first: date | None
    last: date | None

    def add(self, amount: Decimal, d: date | None) -> None:
        self.total += abs(amount)
        self.count += 1
        if d is not None:
            self.first = d if self.first is None or d < self.first else self.first
            self.last = d if self.last is None or d > self.last else self.last


def _min_date(a: date | None, b: date | None) -> date | None:
    if a is None or b is None:
        return a or b
    return min(a, b)


def _max_date(a: date | None, b: date | None) -> date | None:
    if a is None or b is None:
        return a or b
    return max(a, b)


def _write_gl_batch(
    session: Session,
    *,
    workspace_id: str,
    data: ParsedGLData,
    file_name: str,
    platform: str,
) -> ImportResult:
    # 1. Categories absent by normalized name
    existing_cats = session.execute(
        select(LrCategory.id, LrCategory.name).where(LrCategory.workspace_id == workspace_id)
    ).all()
    category_ids: dict[str, int] = {normalize_name(name): cid for cid, name in existing_cats}
    new_categories = [c for c in data.categories if normalize_name(c.name) not in category_ids]
    for c in new_categories:
        row = LrCategory(workspace_id=workspace_id, name=c.name, type=c.type)
        session.add(row)
        session.flush()
        category_ids[normalize_name(c.name)] = row.id

    # 2. Vendors absent by normalized name
    existing_vendors = session.execute(
        select(LrVendor.id, LrVendor.normalized_name).where(LrVendor.workspace_id == workspace_id)
    ).all()
    vendor_ids: dict[str, int] = {norm: vid for vid, norm in existing_vendors}
    new_vendors = [v for v in data.vendors if v.normalized_name not in vendor_ids]
    for v in new_vendors:
        row = LrVendor(
            workspace_id=workspace_id,
            name=v.name,
            normalized_name=v.normalized_name,
            total_spend=Decimal("0.00"),
            transaction_count=0,
        )
        session.add(row)
        session.flush()
        vendor_ids[v.normalized_name] = row.id

    # 3. Audit row first so transactions can reference it
    imp = LrImport(
        workspace_id=workspace_id,
        file_name=file_name,
        platform=platform,
        status="completed",
        transaction_count=len(data.transactions),
        category_count=len(new_categories),
        vendor_count=len(new_vendors),
    )
    session.add(imp)
    session.flush()

    # 4. Transactions, all unmatched
    aggs: dict[int, _VendorAgg] = {}
    rows: list[LrTransaction] = []
    for t in data.transactions:
        d = _to_date(t.date)
        amount = _to_decimal_2(t.amount)
        vendor_id = vendor_ids.get(normalize_name(t.vendor_name))
        rows.append(
            LrTransaction(
                workspace_id=workspace_id,
                source=t.source,
                date=d,
                raw_date=t.date,
                description=t.description,
                amount=amount,
                vendor_name=t.vendor_name,
                status="unmatched",
                category_id=category_ids.get(normalize_name(t.category_name)),
                vendor_id=vendor_id,
                import_id=imp.id,
            )
        )
        if vendor_id is not None:
            agg = aggs.setdefault(vendor_id, _VendorAgg(Decimal("0.00"), 0, None, None))
            agg.add(amount, d)
    session.add_all(rows)
    session.flush()

    # 5. Vendor aggregates
    for vendor_id, agg in aggs.items():
        vendor = session.get(LrVendor, vendor_id)
        if vendor is None:
            raise RuntimeError(f"vendor {vendor_id} vanished during import")
        vendor.total_spend = Decimal(vendor.total_spend or 0) + agg.total
        vendor.transaction_count = (vendor.transaction_count or 0) + agg.count
        vendor.first_seen = _min_date(vendor.first_seen, agg.first)
        vendor.last_seen = _max_date(vendor.last_seen, agg.last)
    session.flush()

    return ImportResult(
        success=True,
        import_id=imp.id,
        transaction_count=len(data.transactions),
        category_count=len(new_categories),
        vendor_count=len(new_vendors),
    )


def import_gl_data(
    session: Session,
    *,
    workspace_id: str,
    data: ParsedGLData,
    file_name: str,
    platform: str,
) -> ImportResult:
    """Persist one normalized GL batch for ``workspace_id``.

    Categories already stored under the same name (ignoring case and spacing) and vendors
    already stored under the same normalized name are reused, so importing the
    same batch twice duplicates transactions but never categories or vendors.
    Database errors roll the session back and are reported as a failed
    ``ImportResult``. The caller is responsible for committing.
    """

    if platform not in SUPPORTED_PLATFORMS:
        raise ValueError(
            f"Unsupported platform: {platform!r}. Allowed: {sorted(SUPPORTED_PLATFORMS)}"
        )

    try:
        result = _write_gl_batch(
            session,
            workspace_id=workspace_id,
            data=data,
            file_name=file_name,
            platform=platform,
        )
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("GL import failed for workspace %s: %s", workspace_id, e)
        return ImportResult(success=False, error=str(e))

    logger.info(
        "Imported %d transactions (%d new categories, %d new vendors) into workspace %s",
        result.transaction_count,
        result.category_count,
        result.vendor_count,
        workspace_id,
    )
    return result


def load_unmatched_transactions(
    session: Session, *, workspace_id: str
) -> tuple[list[LedgerTransaction], list[BankTransaction]]:
    """Return the unmatched ``(ledger, bank)`` sides of a workspace.

    Rows without a recognised date cannot be scored and are left out. Both
    lists are ordered newest first, ties by insertion order.
    """

    stmt = (
        select(LrTransaction, LrVendor.name, LrCategory.name)
        .outerjoin(LrVendor, LrVendor.id == LrTransaction.vendor_id)
        .outerjoin(LrCategory, LrCategory.id == LrTransaction.category_id)
        .where(LrTransaction.workspace_id == workspace_id)
        .where(LrTransaction.status == "unmatched")
        .where(LrTransaction.date.is_not(None))
        .order_by(LrTransaction.date.desc(), LrTransaction.id)
    )

    ledger: list[LedgerTransaction] = []
    bank: list[BankTransaction] = []
    for tx, vendor_name, category_name in session.execute(stmt).all():
        if tx.source == BANK_SOURCE:
            bank.append(
                BankTransaction(
                    id=str(tx.id),
                    date=tx.date,
                    amount=Decimal(tx.amount),
                    description=tx.description,
                    memo=tx.memo,
                    external_id=tx.external_id,
                )
            )
        else:
            ledger.append(
                LedgerTransaction(
                    id=str(tx.id),
                    date=tx.date,
                    amount=Decimal(tx.amount),
                    vendor_name=vendor_name or tx.vendor_name or "",
                    description=tx.description,
                    category_name=category_name,
                    memo=tx.memo,
                    external_id=tx.external_id,
                )
            )
    return ledger, bank


def upsert_bank_transactions(
    session: Session,
    *,
    workspace_id: str,
    transactions: Iterable[BankTransaction],
) -> int:
    """Insert or refresh bank-feed rows keyed on ``(workspace_id, external_id)``.

    The feed's ``external_id`` is the key, falling back to its ``id``. Existing
    rows that are still unmatched get their date, amount, description and memo
    refreshed; matched rows are left alone. Returns the number of new rows.
    """

    items = list(transactions)
    if not items:
        return 0

    keys = [t.external_id or t.id for t in items]
    existing = {
        row.external_id: row
        for row in session.execute(
            select(LrTransaction)
            .where(LrTransaction.workspace_id == workspace_id)
            .where(LrTransaction.source == BANK_SOURCE)
            .where(LrTransaction.external_id.in_(keys))
        ).scalars()
    }

    inserted = 0
    for t, key in zip(items, keys, strict=True):
        row = existing.get(key)
        if row is None:
            row = LrTransaction(
                workspace_id=workspace_id,
                source=BANK_SOURCE,
                external_id=key,
                date=t.date,
                raw_date=t.date.isoformat(),
                description=t.description,
                amount=_to_decimal_2(t.amount),
                memo=t.memo,
                status="unmatched",
            )
            session.add(row)
            existing[key] = row
            inserted += 1
        elif row.status == "unmatched":
            row.date = t.date
            row.raw_date = t.date.isoformat()
            row.amount = _to_decimal_2(t.amount)
            row.description = t.description
            row.memo = t.memo
    session.flush()

    logger.debug(
        "Bank feed for workspace %s: %d new, %d existing", workspace_id, inserted, len(items) - inserted
    )
    return inserted


def record_match_suggestions(
    session: Session,
    *,
    workspace_id: str,
    suggestions: Iterable[MatchSuggestion],
) -> int:
    """Write ``lr_matches`` rows and flag both transactions ``matched``.

    Suggestion ids must be the string form of ``lr_transactions.id`` values in
    ``workspace_id`` (as produced by :func:`load_unmatched_transactions`);
    unknown ids raise ``ValueError``. Returns the number of matches written.
    """

    items = list(suggestions)
    if not items:
        return 0

    wanted: set[int] = set()
    for s in items:
        wanted.add(int(s.bank_txn_id))
        wanted.add(int(s.ledger_txn_id))

    found = set(
        session.execute(
            select(LrTransaction.id)
            .where(LrTransaction.workspace_id == workspace_id)
            .where(LrTransaction.id.in_(wanted))
        ).scalars()
    )
    missing = wanted - found
    if missing:
        raise ValueError(f"Unknown transaction ids for workspace {workspace_id!r}: {sorted(missing)}")

    for s in items:
        session.add(
            LrMatch(
                workspace_id=workspace_id,
                bank_transaction_id=int(s.bank_txn_id),
                ledger_transaction_id=int(s.ledger_txn_id),
                confidence=_to_decimal_2(s.confidence),
                match_type=s.match_type,
                reasoning=s.reasoning,
                status="suggested",
            )
        )

    session.execute(
        update(LrTransaction)
        .where(LrTransaction.workspace_id == workspace_id)
        .where(LrTransaction.id.in_(wanted))
        .values(status="matched")
    )
    session.flush()
    logger.info("Recorded %d match suggestions for workspace %s", len(items), workspace_id)
    return len(items)


def count_transactions(session: Session, *, workspace_id: str, status: str | None = None) -> int:
    """Return the number of stored transactions, optionally filtered by status."""

    stmt = select(func.count()).select_from(LrTransaction).where(
        LrTransaction.workspace_id == workspace_id
    )
    if status is not None:
        stmt = stmt.where(LrTransaction.status == status)
    return session.execute(stmt).scalar_one()


__all__ = [
    "BANK_SOURCE",
    "count_transactions",
    "import_gl_data",
    "load_unmatched_transactions",
    "record_match_suggestions",
    "upsert_bank_transactions",
]
