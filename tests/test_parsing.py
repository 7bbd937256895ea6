from decimal import Decimal

import pytest

from ledger_recon.ingest import generate_demo_data, load_gl_import
from ledger_recon.ingest.parsing import (
    find_column_index,
    infer_category_type,
    is_summary_row,
    normalize_name,
    parse_amount,
    parse_date,
    parse_rows,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$1,234.56", Decimal("1234.56")),
        ("(1,234.56)", Decimal("-1234.56")),
        ("(450.00)", Decimal("-450.00")),
        ("-$1,234.56", Decimal("-1234.56")),
        ("€99", Decimal("99")),
        ("12.50 USD", Decimal("12.50")),
        ("", Decimal(0)),
        ("abc", Decimal(0)),
        (None, Decimal(0)),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    ("raw", "platform", "expected"),
    [
        ("2025-01-15", "qbo", "2025-01-15"),
        ("15 Jan 2025", "xero", "2025-01-15"),
        ("3 September 2024", "xero", "2024-09-03"),
        ("01/02/2025", "qbo", "2025-01-02"),
        ("01/02/2025", "xero", "2025-02-01"),
        ("1-2-2025", "qbo", "2025-01-02"),
        (" Jan 15th ", "qbo", "Jan 15th"),
    ],
)
def test_parse_date(raw, platform, expected):
    assert parse_date(raw, platform) == expected


def test_parse_rows_handles_quotes_and_blank_lines():
    text = 'a,"b, c","say ""hi"""\n\n,,\n"multi\nline",x\n'
    assert parse_rows(text) == [["a", "b, c", 'say "hi"'], ["multi\nline", "x"]]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Sales Revenue", "income"),
        ("Other Income", "income"),
        ("Accounts Receivable", "asset"),
        ("Business Checking", "asset"),
        ("Accounts Payable", "liability"),
        ("Credit Card", "liability"),
        ("Rent", "expense"),
    ],
)
def test_infer_category_type(name, expected):
    assert infer_category_type(name) == expected


def test_normalize_name_collapses_whitespace():
    assert normalize_name("  Amazon   Web\tServices ") == "amazon web services"


def test_find_column_index_prefers_candidate_order():
    headers = ["Date", "Account", "Split", "Amount"]
    assert find_column_index(headers, "split", "account") == 2
    assert find_column_index(headers, "memo", "description") == -1
    assert find_column_index(["Memo/Description"], "description") == 0


@pytest.mark.parametrize(
    ("row", "expected"),
    [
        (["", "x"], True),
        (["Total for Checking", "1.00"], True),
        (["Net Income", "1.00"], True),
        (["Beginning Balance", ""], True),
        (["01/02/2025", "Gusto"], False),
    ],
)
def test_is_summary_row(row, expected):
    assert is_summary_row(row) is expected


def test_load_gl_import_falls_back_on_header_only():
    outcome = load_gl_import("Date,Name,Memo,Split,Amount\n", "qbo")
    assert outcome.used_demo_data
    assert outcome.data == generate_demo_data("qbo")
    assert outcome.reason == "no transactions found"


def test_load_gl_import_falls_back_on_all_zero_rows():
    text = "Date,Name,Amount\n01/02/2025,Gusto,0.00\n01/03/2025,Stripe,\n"
    outcome = load_gl_import(text, "qbo")
    assert outcome.used_demo_data
    assert len(outcome.data.transactions) == 20


def test_load_gl_import_falls_back_on_format_error():
    outcome = load_gl_import("not,a,ledger\n1,2,3\n", "xero")
    assert outcome.used_demo_data
    assert "Xero" in (outcome.reason or "")
    assert {t.source for t in outcome.data.transactions} == {"xero"}


def test_load_gl_import_keeps_real_data():
    outcome = load_gl_import("Date,Name,Amount\n01/02/2025,Gusto,-10.00\n", "QBO")
    assert not outcome.used_demo_data
    assert outcome.reason is None
    assert [t.vendor_name for t in outcome.data.transactions] == ["Gusto"]


def test_load_gl_import_rejects_unknown_platform():
    with pytest.raises(ValueError):
        load_gl_import("Date,Amount\n", "sage")


def test_demo_data_is_consistent():
    data = generate_demo_data("qbo")
    assert len(data.categories) == 12
    assert len(data.vendors) == 15
    vendor_keys = {v.normalized_name for v in data.vendors}
    category_names = {c.name for c in data.categories}
    for t in data.transactions:
        assert normalize_name(t.vendor_name) in vendor_keys
        assert t.category_name in category_names
        assert t.amount != 0


def test_unterminated_quote_in_large_file_falls_back_to_demo_data():
    # The open quote swallows the rest of the file into one oversized field
    body = "01/02/2025,Gusto,-10.00\n" * 6000
    text = 'Date,Name,Amount\n01/01/2025,"Broken,-5.00\n' + body
    assert len(body) > 131072

    assert parse_rows(text) == [["Date", "Name", "Amount"]]
    outcome = load_gl_import(text, "qbo")
    assert outcome.used_demo_data
    assert outcome.reason == "no transactions found"
