# ruff: noqa: E402, I001
from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import select

from db.client import session_scope
from db.models.ledger import LrCategory, LrImport, LrMatch, LrTransaction, LrVendor

from ledger_recon.ingest import parse_gl_csv
from ledger_recon.models import (
    BankTransaction,
    MatchSuggestion,
    ParsedCategory,
    ParsedGLData,
    ParsedTransaction,
)
from ledger_recon.persistence import (
    count_transactions,
    import_gl_data,
    load_unmatched_transactions,
    record_match_suggestions,
    upsert_bank_transactions,
)

from tests.helpers.db import bootstrap_sqlite_db

WS = "ws-test"


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "lr.db")


@pytest.fixture
def qbo_data(data_dir: Path) -> ParsedGLData:
    return parse_gl_csv((data_dir / "qbo_gl_sample.csv").read_text(encoding="utf-8"), "qbo")


def _import(db_url: str, data: ParsedGLData, *, workspace_id: str = WS):
    with session_scope(database_url=db_url) as s:
        return import_gl_data(
            s, workspace_id=workspace_id, data=data, file_name="gl.csv", platform="qbo"
        )


def test_import_creates_rows_and_aggregates(db_url: str, qbo_data: ParsedGLData):
    result = _import(db_url, qbo_data)
    assert result.success
    assert result.import_id is not None
    assert (result.transaction_count, result.category_count, result.vendor_count) == (5, 3, 3)

    with session_scope(database_url=db_url) as s:
        imp = s.get(LrImport, result.import_id)
        assert imp.platform == "qbo"
        assert imp.file_name == "gl.csv"
        assert imp.status == "completed"

        txns = s.execute(select(LrTransaction)).scalars().all()
        assert len(txns) == 5
        assert {t.status for t in txns} == {"unmatched"}
        assert {t.source for t in txns} == {"qbo"}
        assert all(t.import_id == result.import_id for t in txns)

        aws = s.execute(
            select(LrVendor).where(LrVendor.normalized_name == "amazon web services")
        ).scalar_one()
        assert aws.total_spend == Decimal("1323.66")
        assert aws.transaction_count == 2
        assert aws.first_seen == date(2025, 1, 3)
        assert aws.last_seen == date(2025, 1, 8)

        # The "Unknown" placeholder never becomes a vendor row
        unknown = s.execute(
            select(LrTransaction).where(LrTransaction.vendor_name == "Unknown")
        ).scalar_one()
        assert unknown.vendor_id is None
        assert unknown.category_id is None


def test_reimport_reuses_categories_and_vendors(db_url: str, qbo_data: ParsedGLData):
    _import(db_url, qbo_data)
    second = _import(db_url, qbo_data)
    assert second.success
    assert (second.category_count, second.vendor_count) == (0, 0)

    with session_scope(database_url=db_url) as s:
        assert len(s.execute(select(LrCategory)).scalars().all()) == 3
        assert len(s.execute(select(LrVendor)).scalars().all()) == 3
        assert count_transactions(s, workspace_id=WS) == 10
        gusto = s.execute(select(LrVendor).where(LrVendor.normalized_name == "gusto")).scalar_one()
        assert gusto.total_spend == Decimal("900.00")
        assert gusto.transaction_count == 2


def test_workspaces_are_isolated(db_url: str, qbo_data: ParsedGLData):
    _import(db_url, qbo_data, workspace_id="a")
    result = _import(db_url, qbo_data, workspace_id="b")
    assert (result.category_count, result.vendor_count) == (3, 3)
    with session_scope(database_url=db_url) as s:
        assert count_transactions(s, workspace_id="a") == 5
        assert count_transactions(s, workspace_id="b") == 5
        assert count_transactions(s, workspace_id="c") == 0


def test_import_rejects_unknown_platform(db_url: str, qbo_data: ParsedGLData):
    with session_scope(database_url=db_url) as s, pytest.raises(ValueError):
        import_gl_data(s, workspace_id=WS, data=qbo_data, file_name="x.csv", platform="sage")


def test_unparseable_dates_are_kept_but_not_matched(db_url: str):
    data = ParsedGLData(
        transactions=(
            ParsedTransaction("Jan 15th", "Odd date", Decimal("-5.00"), "Fees", "Bank", "qbo"),
            ParsedTransaction("2025-01-16", "Fine", Decimal("-6.00"), "Fees", "Bank", "qbo"),
        )
    )
    _import(db_url, data)
    with session_scope(database_url=db_url) as s:
        odd = s.execute(
            select(LrTransaction).where(LrTransaction.raw_date == "Jan 15th")
        ).scalar_one()
        assert odd.date is None
        ledger, bank = load_unmatched_transactions(s, workspace_id=WS)
    assert [t.description for t in ledger] == ["Fine"]
    assert bank == []


def _bank_feed() -> list[BankTransaction]:
    return [
        BankTransaction(
            id="bank-1",
            date=date(2025, 1, 3),
            amount=Decimal("-1234.56"),
            description="AWS EMEA 4411",
            external_id="BANK-0001",
        ),
        BankTransaction(
            id="bank-2",
            date=date(2025, 1, 9),
            amount=Decimal("-450.00"),
            description="GUSTO PAYROLL",
            external_id="BANK-0002",
        ),
        BankTransaction(
            id="bank-3", date=date(2025, 1, 12), amount=Decimal("-35.00"), description="NSF FEE"
        ),
    ]


def test_upsert_bank_transactions_is_idempotent(db_url: str):
    with session_scope(database_url=db_url) as s:
        assert upsert_bank_transactions(s, workspace_id=WS, transactions=_bank_feed()) == 3
    with session_scope(database_url=db_url) as s:
        assert upsert_bank_transactions(s, workspace_id=WS, transactions=_bank_feed()) == 0
        assert count_transactions(s, workspace_id=WS) == 3
        keys = set(s.execute(select(LrTransaction.external_id)).scalars())
    # Rows without an external id are keyed on their feed id
    assert keys == {"BANK-0001", "BANK-0002", "bank-3"}


def test_upsert_refreshes_unmatched_rows(db_url: str):
    feed = _bank_feed()
    with session_scope(database_url=db_url) as s:
        upsert_bank_transactions(s, workspace_id=WS, transactions=feed)

    changed = BankTransaction(
        id="bank-2",
        date=date(2025, 1, 10),
        amount=Decimal("-440.00"),
        description="GUSTO PAYROLL 2",
        external_id="BANK-0002",
    )
    with session_scope(database_url=db_url) as s:
        assert upsert_bank_transactions(s, workspace_id=WS, transactions=[changed]) == 0
    with session_scope(database_url=db_url) as s:
        row = s.execute(
            select(LrTransaction).where(LrTransaction.external_id == "BANK-0002")
        ).scalar_one()
        assert row.amount == Decimal("-440.00")
        assert row.date == date(2025, 1, 10)
        assert row.description == "GUSTO PAYROLL 2"


def test_load_unmatched_splits_sources(db_url: str, qbo_data: ParsedGLData):
    _import(db_url, qbo_data)
    with session_scope(database_url=db_url) as s:
        upsert_bank_transactions(s, workspace_id=WS, transactions=_bank_feed())
    with session_scope(database_url=db_url) as s:
        ledger, bank = load_unmatched_transactions(s, workspace_id=WS)

    assert len(ledger) == 5
    assert len(bank) == 3
    assert [t.date for t in ledger] == sorted((t.date for t in ledger), reverse=True)
    aws = next(t for t in ledger if t.description == "Monthly compute")
    assert aws.vendor_name == "Amazon Web Services"
    assert aws.category_name == "Cloud Services"
    assert all(t.id.isdigit() for t in ledger + bank)


def test_record_match_suggestions_flags_both_sides(db_url: str, qbo_data: ParsedGLData):
    from ledger_recon.matching import suggest_matches

    _import(db_url, qbo_data)
    with session_scope(database_url=db_url) as s:
        upsert_bank_transactions(s, workspace_id=WS, transactions=_bank_feed())
    with session_scope(database_url=db_url) as s:
        ledger, bank = load_unmatched_transactions(s, workspace_id=WS)
        suggestions = suggest_matches(bank, ledger)
        assert record_match_suggestions(s, workspace_id=WS, suggestions=suggestions) == len(
            suggestions
        )

    assert len(suggestions) >= 2
    with session_scope(database_url=db_url) as s:
        matches = s.execute(select(LrMatch)).scalars().all()
        assert len(matches) == len(suggestions)
        assert {m.status for m in matches} == {"suggested"}
        assert count_transactions(s, workspace_id=WS, status="matched") == 2 * len(suggestions)
        ledger, bank = load_unmatched_transactions(s, workspace_id=WS)
    matched_ids = {x for sg in suggestions for x in (sg.bank_txn_id, sg.ledger_txn_id)}
    assert not matched_ids & {t.id for t in ledger + bank}


def test_record_match_suggestions_rejects_unknown_ids(db_url: str):
    bogus = MatchSuggestion(
        bank_txn_id="998", ledger_txn_id="999", confidence=0.9, match_type="exact", reasoning="x"
    )
    with session_scope(database_url=db_url) as s, pytest.raises(ValueError):
        record_match_suggestions(s, workspace_id=WS, suggestions=[bogus])


def test_category_spelling_variants_share_one_row(db_url: str):
    data = ParsedGLData(
        transactions=(
            ParsedTransaction(
                "2025-01-02", "Paper", Decimal("-5.00"), "Office Supplies", "Staples", "qbo"
            ),
            ParsedTransaction(
                "2025-01-03", "Toner", Decimal("-7.00"), "office  supplies", "Staples", "qbo"
            ),
        ),
        categories=(ParsedCategory("Office Supplies", "expense"),),
    )
    result = _import(db_url, data)
    assert result.category_count == 1

    with session_scope(database_url=db_url) as s:
        category_id = s.execute(select(LrCategory.id)).scalar_one()
        linked = s.execute(select(LrTransaction.category_id)).scalars().all()
    assert linked == [category_id, category_id]
