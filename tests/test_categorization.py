from datetime import date
from decimal import Decimal

import pytest

from ledger_recon.categorization import suggest_category
from ledger_recon.demo_feeds import get_chart_of_accounts
from ledger_recon.models import BankTransaction, ChartCategory, ParsedTransaction

CHART = get_chart_of_accounts("ws")


def _txn(description: str, amount: str, vendor: str = "Unknown") -> ParsedTransaction:
    return ParsedTransaction("2025-01-02", description, Decimal(amount), "Uncategorized", vendor, "qbo")


def _bank(description: str, amount: str) -> BankTransaction:
    return BankTransaction(
        id="b1", date=date(2025, 1, 2), amount=Decimal(amount), description=description
    )


def test_vendor_pattern_tier():
    s = suggest_category(_txn("Bi-weekly payroll", "-12000.00", "Gusto"), CHART)
    assert s.category_id == "ws-cat-expense-payroll"
    assert s.category_name == "Payroll"
    assert s.confidence == 0.98
    assert s.reasoning == 'Recognized vendor pattern matches "Payroll" category'


def test_vendor_name_is_searched_too():
    s = suggest_category(_txn("Invoice 88", "-40.00", "Slack Technologies"), CHART)
    assert (s.category_name, s.confidence) == ("Software Subscriptions", 0.93)


def test_bank_description_without_vendor():
    s = suggest_category(_bank("ACH DEBIT AWS EMEA", "-812.40"), CHART)
    assert (s.category_name, s.confidence) == ("Cloud Services", 0.95)


def test_keyword_tier():
    s = suggest_category(_bank("Server hosting", "-250.00"), CHART)
    assert s.category_name == "Cloud Services"
    assert s.confidence == 0.72
    assert s.reasoning == 'Description keywords suggest "Cloud Services" category'


@pytest.mark.parametrize(
    ("amount", "name", "confidence"),
    [
        ("-8000.00", "Payroll", 0.55),
        ("-25.00", "Software Subscriptions", 0.45),
        ("1200.00", "Sales Revenue", 0.60),
    ],
)
def test_amount_tier(amount, name, confidence):
    s = suggest_category(_bank("Transfer 4471", amount), CHART)
    assert (s.category_name, s.confidence) == (name, confidence)


def test_positive_amount_falls_back_to_first_income_category():
    chart = [
        ChartCategory("c1", "Rent", "expense"),
        ChartCategory("c2", "Interest Income", "income"),
    ]
    s = suggest_category(_bank("Transfer 4471", "3.10"), chart)
    assert (s.category_id, s.confidence) == ("c2", 0.50)
    assert s.reasoning == "Positive amount indicates income"


def test_miscellaneous_fallback():
    s = suggest_category(_bank("Transfer 4471", "-250.00"), CHART)
    assert (s.category_name, s.confidence) == ("Miscellaneous", 0.30)


def test_first_expense_fallback():
    chart = [ChartCategory("a", "Widgets", "asset"), ChartCategory("e", "Rent", "expense")]
    s = suggest_category(_bank("Transfer 4471", "-250.00"), chart)
    assert (s.category_id, s.confidence) == ("e", 0.20)


def test_first_category_fallback():
    chart = [ChartCategory("a", "Widgets", "asset"), ChartCategory("b", "Loans", "liability")]
    s = suggest_category(_bank("Transfer 4471", "-250.00"), chart)
    assert (s.category_id, s.confidence) == ("a", 0.10)
    assert s.reasoning == "No matching category patterns found"


def test_rule_is_skipped_when_category_missing():
    chart = [ChartCategory("m", "Miscellaneous", "expense")]
    s = suggest_category(_txn("Bi-weekly payroll", "-3000.00", "Gusto"), chart)
    assert (s.category_id, s.confidence) == ("m", 0.30)


def test_category_lookup_is_case_insensitive():
    chart = [ChartCategory("p", "payroll", "expense")]
    s = suggest_category(_txn("Run 12", "-9000.00", "Gusto"), chart)
    assert (s.category_id, s.confidence) == ("p", 0.98)


def test_empty_chart_raises():
    with pytest.raises(ValueError):
        suggest_category(_bank("Anything", "-1.00"), [])


def test_suggestions_always_come_from_the_chart():
    ids = {c.id for c in CHART}
    for description in ("STARBUCKS 22", "NSF FEE", "CHECK DEPOSIT #12", "?"):
        s = suggest_category(_bank(description, "-35.00"), CHART)
        assert s.category_id in ids
        assert 0.0 <= s.confidence <= 1.0
