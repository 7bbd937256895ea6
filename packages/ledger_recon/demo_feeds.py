"""Deterministic demo feeds: a ledger, a mirroring bank feed and a chart.

Every feed is seeded from a string hash of the workspace id, so the same
workspace (and the same ``today``) always yields the same transactions. The
bank feed is derived from the ledger feed with the discrepancies reconciliation
has to cope with: processing delays, percentage and fixed fees, reformatted
descriptions, ledger-only rows and bank-only rows.

``SeededRandom`` is a plain linear-congruential generator. It is for fixtures
only and must not be swapped for ``random``/``secrets``, which would break
reproducibility across processes.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import date, timedelta
from decimal import Decimal

from .models import BankTransaction, CategoryType, ChartCategory, LedgerTransaction

_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF

LOOKBACK_DAYS = 90


def hash_code(s: str) -> int:
    """Java-style 32-bit string hash over UTF-16 code units, made non-negative."""

    h = 0
    data = s.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class SeededRandom:
    """Linear-congruential generator returning floats in ``[0, 1]``."""

    def __init__(self, seed: int) -> None:
        self._state = seed

    def __call__(self) -> float:
        self._state = (self._state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        return self._state / _LCG_MASK

    def randint_below(self, n: int) -> int:
        """Return ``floor(random() * n)`` clamped to ``n - 1``."""

        # The generator can emit exactly 1.0
        return min(math.floor(self() * n), n - 1)

    def choice[T](self, options: Sequence[T]) -> T:
        return options[self.randint_below(len(options))]


def _cents(x: float) -> Decimal:
    # Round half up to whole cents
    return Decimal(math.floor(x * 100 + 0.5)) / 100


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

# (vendor name, category)
VENDORS: tuple[tuple[str, str], ...] = (
    ("Amazon Web Services", "Cloud Services"),
    ("Google Cloud Platform", "Cloud Services"),
    ("Stripe", "Payment Processing"),
    ("Gusto", "Payroll"),
    ("Slack Technologies", "Software Subscriptions"),
    ("Zoom Video Communications", "Software Subscriptions"),
    ("Adobe Systems", "Software Subscriptions"),
    ("Microsoft", "Software Subscriptions"),
    ("Salesforce", "Software Subscriptions"),
    ("HubSpot", "Marketing"),
    ("Mailchimp", "Marketing"),
    ("Office Depot", "Office Supplies"),
    ("Staples", "Office Supplies"),
    ("FedEx", "Shipping"),
    ("UPS", "Shipping"),
    ("Comcast Business", "Utilities"),
    ("PG&E", "Utilities"),
    ("WeWork", "Rent"),
    ("Regus", "Rent"),
    ("Delta Airlines", "Travel"),
    ("United Airlines", "Travel"),
    ("Marriott Hotels", "Travel"),
    ("Uber", "Travel"),
    ("Lyft", "Travel"),
    ("Blue Cross Blue Shield", "Insurance"),
    ("Hartford Insurance", "Insurance"),
)

_AMOUNT_RANGES: dict[str, tuple[float, float]] = {
    "Cloud Services": (100, 5000),
    "Payment Processing": (50, 2000),
    "Payroll": (5000, 50000),
    "Software Subscriptions": (20, 500),
    "Marketing": (100, 5000),
    "Office Supplies": (20, 500),
    "Shipping": (10, 200),
    "Utilities": (100, 1000),
    "Rent": (2000, 15000),
    "Travel": (50, 2000),
    "Insurance": (500, 3000),
}
_DEFAULT_RANGE = (50.0, 500.0)

_MEMOS: dict[str, tuple[str, ...]] = {
    "Cloud Services": ("Monthly compute", "Storage fees", "Data transfer", "Instance usage"),
    "Payment Processing": ("Transaction fees", "Monthly subscription", "Currency conversion"),
    "Payroll": ("Bi-weekly payroll", "Payroll taxes", "Benefits administration"),
    "Software Subscriptions": ("Annual subscription", "Monthly license", "User seats", "Premium tier"),
    "Marketing": ("Ad spend", "Campaign budget", "Social media", "Content creation"),
    "Office Supplies": ("Paper supplies", "Printer ink", "Office equipment", "Desk accessories"),
    "Shipping": ("Package delivery", "Express shipping", "International shipping"),
    "Utilities": ("Monthly service", "Internet service", "Phone service"),
    "Rent": ("Monthly rent", "Office space", "Meeting room rental"),
    "Travel": ("Flight booking", "Hotel stay", "Ground transportation", "Meal expense"),
    "Insurance": ("Premium payment", "Policy renewal", "Coverage update"),
}
_DEFAULT_MEMOS = ("General expense",)

# (id suffix, name, type)
STANDARD_CHART: tuple[tuple[str, str, CategoryType], ...] = (
    ("cat-expense-payroll", "Payroll", "expense"),
    ("cat-expense-rent", "Rent", "expense"),
    ("cat-expense-utilities", "Utilities", "expense"),
    ("cat-expense-software", "Software Subscriptions", "expense"),
    ("cat-expense-cloud", "Cloud Services", "expense"),
    ("cat-expense-marketing", "Marketing", "expense"),
    ("cat-expense-office", "Office Supplies", "expense"),
    ("cat-expense-shipping", "Shipping", "expense"),
    ("cat-expense-travel", "Travel", "expense"),
    ("cat-expense-insurance", "Insurance", "expense"),
    ("cat-expense-payment-processing", "Payment Processing", "expense"),
    ("cat-expense-professional", "Professional Services", "expense"),
    ("cat-expense-meals", "Meals & Entertainment", "expense"),
    ("cat-expense-misc", "Miscellaneous", "expense"),
    ("cat-income-sales", "Sales Revenue", "income"),
    ("cat-income-services", "Service Revenue", "income"),
    ("cat-income-interest", "Interest Income", "income"),
    ("cat-income-other", "Other Income", "income"),
    ("cat-asset-cash", "Cash", "asset"),
    ("cat-asset-ar", "Accounts Receivable", "asset"),
    ("cat-asset-equipment", "Equipment", "asset"),
    ("cat-liability-ap", "Accounts Payable", "liability"),
    ("cat-liability-credit", "Credit Card", "liability"),
    ("cat-liability-loan", "Loans Payable", "liability"),
)

_CHART_NAMES = frozenset(name for _, name, _ in STANDARD_CHART)


# ---------------------------------------------------------------------------
# Ledger feed
# ---------------------------------------------------------------------------


def _amount_for(category: str, rnd: SeededRandom) -> Decimal:
    lo, hi = _AMOUNT_RANGES.get(category, _DEFAULT_RANGE)
    return _cents(rnd() * (hi - lo) + lo)


def _memo_for(category: str, rnd: SeededRandom) -> str:
    return rnd.choice(_MEMOS.get(category, _DEFAULT_MEMOS))


def get_ledger_transactions(
    workspace_id: str, *, today: date | None = None
) -> list[LedgerTransaction]:
    """Return 50-79 ledger transactions from the last 90 days, newest first.

    About 15% are income (positive); the rest are expenses.
    """

    today = today or date.today()
    rnd = SeededRandom(hash_code(workspace_id))
    count = rnd.randint_below(30) + 50
    prefix = workspace_id[:8]

    out: list[LedgerTransaction] = []
    for i in range(count):
        vendor, category = rnd.choice(VENDORS)
        days_ago = rnd.randint_below(LOOKBACK_DAYS)
        magnitude = _amount_for(category, rnd)
        amount = magnitude if rnd() > 0.85 else -magnitude
        description = f"{vendor} - {_memo_for(category, rnd)}"
        memo = _memo_for(category, rnd) if rnd() > 0.5 else None
        out.append(
            LedgerTransaction(
                id=f"ledger-txn-{workspace_id}-{i}",
                date=today - timedelta(days=days_ago),
                amount=amount,
                vendor_name=vendor,
                description=description,
                category_name=category if category in _CHART_NAMES else "Miscellaneous",
                memo=memo,
                external_id=f"GL-{prefix}-{i:05d}",
            )
        )

    out.sort(key=lambda t: t.date, reverse=True)
    return out


def get_chart_of_accounts(workspace_id: str) -> list[ChartCategory]:
    """Return the standard 24-account chart with workspace-scoped ids."""

    return [
        ChartCategory(id=f"{workspace_id}-{suffix}", name=name, type=ctype)
        for suffix, name, ctype in STANDARD_CHART
    ]


# ---------------------------------------------------------------------------
# Bank feed
# ---------------------------------------------------------------------------


def _bank_description(vendor: str, rnd: SeededRandom) -> str:
    formats: tuple[Callable[[], str], ...] = (
        lambda: f"{' '.join(vendor.upper().split())} {rnd.randint_below(9999)}",
        lambda: f"{vendor[:15].upper()} POS",
        lambda: f"ACH DEBIT {vendor.upper()}",
        lambda: f"CHECKCARD {vendor[:20].upper()}",
        lambda: f"DIRECT DEBIT - {vendor}",
    )
    return rnd.choice(formats)()


def _mirror(ledger: LedgerTransaction, rnd: SeededRandom) -> BankTransaction:
    kind = rnd()
    when = ledger.date
    amount = ledger.amount

    if kind < 0.4:
        # Processing delay
        when = ledger.date + timedelta(days=rnd.randint_below(3) + 1)
    elif kind < 0.6:
        if rnd() < 0.5:
            fee_pct = 0.02 + rnd() * 0.01
            amount = _cents(float(ledger.amount) * (1 - fee_pct))
        else:
            fixed_fee = _cents(10 + rnd() * 40)
            amount = ledger.amount - fixed_fee
    elif kind < 0.7:
        when = ledger.date + timedelta(days=rnd.randint_below(2) + 1)
        amount = _cents(float(ledger.amount) * (1 - 0.025))

    description = _bank_description(ledger.vendor_name, rnd)
    bank_name = "Chase Business" if rnd() < 0.7 else "Bank of America"
    if rnd() < 0.8:
        account_type = "checking"
    else:
        account_type = "credit" if rnd() < 0.5 else "savings"
    memo = f"REF: {rnd.randint_below(1000000)}" if rnd() > 0.7 else None

    return BankTransaction(
        id=ledger.id.replace("ledger-txn-", "bank-txn-", 1),
        date=when,
        amount=amount,
        description=description,
        bank_name=bank_name,
        account_type=account_type,
        memo=memo,
        external_id=f"BANK-{(ledger.external_id or '').removeprefix('GL-')}",
    )


def _bank_only(workspace_id: str, index: int, today: date, rnd: SeededRandom) -> BankTransaction:
    days_ago = rnd.randint_below(30)
    # All candidates consume draws before the pick
    candidates: list[tuple[str, Decimal]] = [
        ("ATM WITHDRAWAL", Decimal(-(rnd.randint_below(4) + 1) * 100)),
        ("MONTHLY SERVICE FEE", Decimal(-(15 + rnd.randint_below(20)))),
        ("WIRE TRANSFER FEE", Decimal(-(25 + rnd.randint_below(20)))),
        ("INTEREST PAYMENT", _cents(rnd() * 50 + 5)),
        ("CASH DEPOSIT", _cents(rnd() * 2000 + 500)),
        (f"CHECK DEPOSIT #{rnd.randint_below(9999)}", _cents(rnd() * 5000 + 100)),
        ("VENMO TRANSFER", -_cents(rnd() * 200 + 20)),
        ("ZELLE PAYMENT", -_cents(rnd() * 500 + 50)),
        ("PAYPAL TRANSFER", _cents(rnd() * 1000 + 100)),
        ("SQUARE DEPOSIT", _cents(rnd() * 3000 + 200)),
        ("NSF FEE", Decimal(-35)),
        ("OVERDRAFT FEE", Decimal(-35)),
    ]
    description, amount = rnd.choice(candidates)
    bank_name = "Chase Business" if rnd() < 0.7 else "Bank of America"
    account_type = "checking" if rnd() < 0.9 else "savings"

    return BankTransaction(
        id=f"bank-only-{workspace_id}-{index}",
        date=today - timedelta(days=days_ago),
        amount=amount,
        description=description,
        bank_name=bank_name,
        account_type=account_type,
        external_id=f"BANK-ONLY-{workspace_id[:8]}-{index:04d}",
    )


def get_bank_transactions(
    workspace_id: str, *, today: date | None = None
) -> list[BankTransaction]:
    """Return the bank feed mirroring ``get_ledger_transactions``, newest first.

    Roughly 10% of ledger rows have no bank counterpart. Of the mirrored rows,
    40% clear 1-3 days later, 20% carry a fee, 10% carry both, and the rest
    are unchanged apart from the description. 5-12 bank-only rows are added.
    """

    today = today or date.today()
    rnd = SeededRandom(hash_code(workspace_id + "-bank"))
    ledger = get_ledger_transactions(workspace_id, today=today)

    out: list[BankTransaction] = []
    for txn in ledger:
        if rnd() < 0.1:
            continue
        out.append(_mirror(txn, rnd))

    for i in range(rnd.randint_below(8) + 5):
        out.append(_bank_only(workspace_id, i, today, rnd))

    out.sort(key=lambda t: t.date, reverse=True)
    return out


__all__ = [
    "LOOKBACK_DAYS",
    "STANDARD_CHART",
    "VENDORS",
    "SeededRandom",
    "get_bank_transactions",
    "get_chart_of_accounts",
    "get_ledger_transactions",
    "hash_code",
]
