"""Rule-based category suggestions for ledger transactions.

Tiers are tried in a fixed order and the first applicable rule wins:

1. vendor patterns: substring hits on the combined vendor + description text;
2. keyword patterns: weaker description keywords;
3. amount heuristics: magnitude and sign of the amount;
4. fallback: ``Miscellaneous``, then the first expense category, then the
   first category of the chart.

A rule whose target category is not present in the caller's chart is skipped
rather than failing, so the same tables serve workspaces with trimmed charts.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from .models import CategorySuggestion, ChartCategory


class Categorizable(Protocol):
    @property
    def description(self) -> str: ...

    @property
    def amount(self) -> Decimal: ...


# (substrings, category name, confidence), most specific first
VENDOR_PATTERNS: tuple[tuple[tuple[str, ...], str, float], ...] = (
    (("gusto", "adp", "paychex", "payroll"), "Payroll", 0.98),
    (
        ("aws", "amazon web services", "google cloud", "gcp", "azure", "digitalocean", "heroku", "cloudflare"),
        "Cloud Services",
        0.95,
    ),
    (
        (
            "slack", "zoom", "adobe", "microsoft", "msft", "salesforce", "sfdc", "hubspot",
            "asana", "notion", "figma", "github", "atlassian", "jira", "confluence",
            "dropbox", "1password", "lastpass",
        ),
        "Software Subscriptions",
        0.93,
    ),
    (("stripe", "square", "paypal", "braintree", "authorize.net"), "Payment Processing", 0.94),
    (
        (
            "mailchimp", "constant contact", "facebook ads", "google ads", "linkedin ads",
            "twitter ads", "hootsuite", "buffer", "semrush", "ahrefs", "hubspot marketing",
        ),
        "Marketing",
        0.91,
    ),
    (("office depot", "staples", "amazon office", "uline"), "Office Supplies", 0.88),
    (
        ("fedex", "fed ex", "ups", "united parcel", "usps", "dhl", "stamps.com", "shippo"),
        "Shipping",
        0.92,
    ),
    (
        (
            "comcast", "verizon", "at&t", "att", "pge", "pg&e", "pacific gas", "con edison",
            "xfinity", "spectrum",
        ),
        "Utilities",
        0.90,
    ),
    (
        ("wework", "regus", "spaces", "industrious", "rent payment", "office lease", "landlord"),
        "Rent",
        0.85,
    ),
    (
        (
            "delta", "united airlines", "american airlines", "southwest", "jetblue", "marriott",
            "hilton", "hyatt", "airbnb", "vrbo", "uber", "lyft", "enterprise rent", "hertz",
            "national car", "expedia", "booking.com",
        ),
        "Travel",
        0.89,
    ),
    (
        (
            "blue cross", "bcbs", "anthem", "aetna", "cigna", "united health", "kaiser",
            "hartford", "state farm", "allstate", "geico", "progressive", "liberty mutual",
        ),
        "Insurance",
        0.92,
    ),
    (
        ("attorney", "law firm", "legal", "cpa", "accountant", "consultant", "advisory"),
        "Professional Services",
        0.80,
    ),
    (
        (
            "doordash", "grubhub", "uber eats", "seamless", "restaurant", "cafe", "coffee",
            "starbucks", "dunkin",
        ),
        "Meals & Entertainment",
        0.85,
    ),
)

KEYWORD_PATTERNS: tuple[tuple[tuple[str, ...], str, float], ...] = (
    (("subscription", "monthly", "annual", "license", "seat"), "Software Subscriptions", 0.70),
    (("hosting", "server", "compute", "storage", "bandwidth"), "Cloud Services", 0.72),
    (("fee", "processing", "transaction"), "Payment Processing", 0.65),
    (("advertising", "campaign", "marketing", "promotion"), "Marketing", 0.68),
    (("office", "supplies", "paper", "printer"), "Office Supplies", 0.65),
    (("shipping", "freight", "delivery", "postage"), "Shipping", 0.70),
    (("electric", "gas", "water", "internet", "phone", "utility"), "Utilities", 0.72),
    (("rent", "lease", "space"), "Rent", 0.68),
    (("flight", "hotel", "travel", "trip", "airfare", "lodging", "mileage"), "Travel", 0.70),
    (("insurance", "premium", "policy", "coverage"), "Insurance", 0.75),
    (("legal", "attorney", "consulting", "professional"), "Professional Services", 0.60),
    (("meal", "food", "lunch", "dinner", "breakfast", "catering"), "Meals & Entertainment", 0.65),
)

_PAYROLL_RANGE = (Decimal(5000), Decimal(100000))
_SUBSCRIPTION_RANGE = (Decimal(5), Decimal(100))


def _find_by_name(categories: Sequence[ChartCategory], name: str) -> ChartCategory | None:
    key = name.lower()
    for c in categories:
        if c.name.lower() == key:
            return c
    return None


def _suggest(category: ChartCategory, confidence: float, reasoning: str) -> CategorySuggestion:
    return CategorySuggestion(
        category_id=category.id,
        category_name=category.name,
        confidence=confidence,
        reasoning=reasoning,
    )


def _suggest_by_amount(
    amount: Decimal, categories: Sequence[ChartCategory]
) -> CategorySuggestion | None:
    magnitude = abs(amount)

    if amount < 0 and _PAYROLL_RANGE[0] <= magnitude <= _PAYROLL_RANGE[1]:
        payroll = _find_by_name(categories, "Payroll")
        if payroll is not None:
            return _suggest(payroll, 0.55, "Large recurring expense amount - possibly payroll")

    if amount < 0 and _SUBSCRIPTION_RANGE[0] <= magnitude <= _SUBSCRIPTION_RANGE[1]:
        software = _find_by_name(categories, "Software Subscriptions")
        if software is not None:
            return _suggest(
                software, 0.45, "Small recurring amount - possibly software subscription"
            )

    if amount > 0:
        sales = _find_by_name(categories, "Sales Revenue")
        if sales is not None:
            return _suggest(
                sales, 0.60, "Positive amount indicates income - possibly sales revenue"
            )
        income = next((c for c in categories if c.type == "income"), None)
        if income is not None:
            return _suggest(income, 0.50, "Positive amount indicates income")

    return None


def suggest_category(
    transaction: Categorizable, categories: Sequence[ChartCategory]
) -> CategorySuggestion:
    """Suggest one category from ``categories`` for ``transaction``.

    ``transaction`` needs ``description`` and ``amount``; a ``vendor_name``
    attribute, when present, is prepended to the text searched for patterns.
    Raises ``ValueError`` when ``categories`` is empty.
    """

    if not categories:
        raise ValueError("categories must not be empty")

    vendor = (getattr(transaction, "vendor_name", None) or "").lower()
    text = f"{vendor} {transaction.description.lower()}"

    for patterns, name, confidence in VENDOR_PATTERNS:
        if any(p in text for p in patterns):
            category = _find_by_name(categories, name)
            if category is not None:
                return _suggest(
                    category, confidence, f'Recognized vendor pattern matches "{name}" category'
                )

    for keywords, name, confidence in KEYWORD_PATTERNS:
        if any(k in text for k in keywords):
            category = _find_by_name(categories, name)
            if category is not None:
                return _suggest(
                    category, confidence, f'Description keywords suggest "{name}" category'
                )

    by_amount = _suggest_by_amount(Decimal(transaction.amount), categories)
    if by_amount is not None:
        return by_amount

    misc = _find_by_name(categories, "Miscellaneous")
    if misc is not None:
        return _suggest(misc, 0.30, "No clear pattern match - suggest manual review")

    expense = next((c for c in categories if c.type == "expense"), None)
    if expense is not None:
        return _suggest(
            expense, 0.20, "Unable to determine category - requires manual classification"
        )

    return _suggest(categories[0], 0.10, "No matching category patterns found")


__all__ = ["KEYWORD_PATTERNS", "VENDOR_PATTERNS", "Categorizable", "suggest_category"]
