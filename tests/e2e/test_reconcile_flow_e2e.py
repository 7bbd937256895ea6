# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Make sure the workspace `packages/` dir is on sys.path so `ledger_recon` is importable
_ROOT = Path(__file__).resolve().parents[2]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from sqlalchemy import select

from db.client import session_scope
from db.models.ledger import LrMatch, LrTransaction

from ledger_recon.models import BankTransaction
from ledger_recon.persistence import count_transactions, upsert_bank_transactions
from ledger_recon.workflows.reconcile_flow import import_gl_csv, reconcile_workspace

from tests.helpers.db import bootstrap_sqlite_db


def test_e2e_import_then_reconcile_persists_matches(tmp_path: Path):
    # -------------------------
    # Input (fixture file path)
    # -------------------------
    csv_path = Path(__file__).resolve().parents[1] / "data/xero_gl_sample.csv"
    db_url = bootstrap_sqlite_db(tmp_path / "lr-e2e.db")
    ws = "acme-e2e"

    # -------------------------
    # Import the ledger side
    # -------------------------
    progress: list[str] = []
    outcome, result = import_gl_csv(
        csv_path,
        platform="xero",
        workspace_id=ws,
        database_url=db_url,
        on_progress=progress.append,
    )
    assert not outcome.used_demo_data
    assert result.success, result.error
    assert result.transaction_count == 5
    assert progress and progress[-1].startswith("Imported 5 transaction(s)")

    # -------------------------
    # Bank feed: one exact, one delayed, one fee, one unrelated
    # -------------------------
    feed = [
        BankTransaction(
            id="b-1",
            date=date(2025, 1, 15),
            amount=Decimal("1200.00"),
            description="ACME CORP INV-0042",
            external_id="BANK-1",
        ),
        BankTransaction(
            id="b-2",
            date=date(2025, 1, 5),
            amount=Decimal("-45.20"),
            description="STAPLES 0088",
            external_id="BANK-2",
        ),
        BankTransaction(
            id="b-3",
            date=date(2025, 1, 8),
            amount=Decimal("-117.00"),
            description="SLACK T04ABC",
            external_id="BANK-3",
        ),
        BankTransaction(
            id="b-4",
            date=date(2025, 1, 30),
            amount=Decimal("-35.00"),
            description="OVERDRAFT FEE",
            external_id="BANK-4",
        ),
    ]
    with session_scope(database_url=db_url) as s:
        assert upsert_bank_transactions(s, workspace_id=ws, transactions=feed) == 4

    # -------------------------
    # Reconcile and persist
    # -------------------------
    suggestions = reconcile_workspace(database_url=db_url, workspace_id=ws, persist=True)
    by_type = {s.match_type: s for s in suggestions}
    assert set(by_type) == {"exact", "timing", "fee_adjusted"}
    assert by_type["exact"].confidence == 0.99
    assert by_type["timing"].confidence == 0.95
    assert by_type["fee_adjusted"].confidence == 0.88
    assert [s.confidence for s in suggestions] == [0.99, 0.95, 0.88]

    # -------------------------
    # Assertions on DB state
    # -------------------------
    with session_scope(database_url=db_url) as s:
        assert len(s.execute(select(LrMatch)).scalars().all()) == 3
        assert count_transactions(s, workspace_id=ws, status="matched") == 6
        leftovers = s.execute(
            select(LrTransaction.description).where(LrTransaction.status == "unmatched")
        ).scalars()
        assert set(leftovers) == {"Unknown", "STAPLES - Toner", "OVERDRAFT FEE"}

    # A second run only sees what is left and finds nothing acceptable
    assert reconcile_workspace(database_url=db_url, workspace_id=ws, persist=True) == []
