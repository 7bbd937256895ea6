"""Fixed synthetic GL dataset used when an upload yields no transactions.

Substituting this dataset keeps onboarding from dead-ending on an empty or
unreadable export. It is a product fallback, not a parse result: the records
are tagged with the requested platform so downstream persistence treats them
like any other batch.
"""

from __future__ import annotations

from decimal import Decimal

from ..models import Platform, ParsedCategory, ParsedGLData, ParsedTransaction, ParsedVendor
from .parsing import normalize_name

_CATEGORIES: tuple[ParsedCategory, ...] = (
    ParsedCategory("Office Supplies", "expense"),
    ParsedCategory("Rent", "expense"),
    ParsedCategory("Software Subscriptions", "expense"),
    ParsedCategory("Professional Services", "expense"),
    ParsedCategory("Travel & Meals", "expense"),
    ParsedCategory("Utilities", "expense"),
    ParsedCategory("Insurance", "expense"),
    ParsedCategory("Payroll", "expense"),
    ParsedCategory("Sales Revenue", "income"),
    ParsedCategory("Consulting Revenue", "income"),
    ParsedCategory("Accounts Receivable", "asset"),
    ParsedCategory("Accounts Payable", "liability"),
)

_VENDOR_NAMES: tuple[str, ...] = (
    "Amazon Business",
    "WeWork",
    "Adobe Systems",
    "Deloitte LLP",
    "United Airlines",
    "PG&E",
    "State Farm",
    "ADP",
    "Acme Corp",
    "TechStart Inc",
    "Gusto",
    "Slack Technologies",
    "Google Cloud",
    "FedEx",
    "Staples",
)

# (date, description, amount, category, vendor)
_ROWS: tuple[tuple[str, str, str, str, str], ...] = (
    ("2025-01-03", "Monthly office supplies", "-284.50", "Office Supplies", "Amazon Business"),
    ("2025-01-05", "January rent", "-4500.00", "Rent", "WeWork"),
    ("2025-01-05", "Creative Cloud subscription", "-599.88", "Software Subscriptions", "Adobe Systems"),
    ("2025-01-08", "Q4 audit services", "-12500.00", "Professional Services", "Deloitte LLP"),
    ("2025-01-10", "Client meeting travel", "-847.30", "Travel & Meals", "United Airlines"),
    ("2025-01-12", "Electric bill - January", "-312.45", "Utilities", "PG&E"),
    ("2025-01-15", "General liability insurance", "-1850.00", "Insurance", "State Farm"),
    ("2025-01-15", "January payroll", "-45200.00", "Payroll", "ADP"),
    ("2025-01-18", "Product sales - Acme Corp", "28750.00", "Sales Revenue", "Acme Corp"),
    ("2025-01-20", "Consulting engagement", "15000.00", "Consulting Revenue", "TechStart Inc"),
    ("2025-01-22", "Payroll processing fees", "-189.00", "Professional Services", "Gusto"),
    ("2025-01-23", "Slack Business+ annual", "-1540.00", "Software Subscriptions", "Slack Technologies"),
    ("2025-01-25", "Cloud infrastructure", "-2340.67", "Software Subscriptions", "Google Cloud"),
    ("2025-01-28", "Client deliverable shipping", "-156.80", "Office Supplies", "FedEx"),
    ("2025-01-30", "Printer paper & toner", "-94.30", "Office Supplies", "Staples"),
    ("2025-02-01", "February rent", "-4500.00", "Rent", "WeWork"),
    ("2025-02-03", "Product sales - TechStart", "31200.00", "Sales Revenue", "TechStart Inc"),
    ("2025-02-05", "Team lunch meeting", "-278.90", "Travel & Meals", "United Airlines"),
    ("2025-02-10", "Electric bill - February", "-298.10", "Utilities", "PG&E"),
    ("2025-02-15", "February payroll", "-45200.00", "Payroll", "ADP"),
)


def generate_demo_data(platform: Platform) -> ParsedGLData:
    """Return the fixed demo ledger tagged with ``platform``."""

    return ParsedGLData(
        transactions=tuple(
            ParsedTransaction(
                date=d,
                description=desc,
                amount=Decimal(amt),
                category_name=cat,
                vendor_name=vendor,
                source=platform,
            )
            for d, desc, amt, cat, vendor in _ROWS
        ),
        categories=_CATEGORIES,
        vendors=tuple(ParsedVendor(name=n, normalized_name=normalize_name(n)) for n in _VENDOR_NAMES),
    )


__all__ = ["generate_demo_data"]
