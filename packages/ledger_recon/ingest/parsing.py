"""Dialect-independent helpers for GL CSV ingestion.

Row tokenization follows RFC 4180 via the stdlib :mod:`csv` module (quoted
fields with embedded commas and newlines, doubled quotes). Everything else in
this module is a small, pure normalization helper shared by the QBO and Xero
adapters:

- ``parse_amount``: currency text → signed ``Decimal`` (``0`` when unparseable)
- ``parse_date``: platform-aware date text → ``YYYY-MM-DD``
- ``infer_category_type``: account name → expense/income/asset/liability
- ``normalize_name``: vendor/category dedup key
- header detection and summary-row heuristics
"""

from __future__ import annotations

import csv
import re
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from io import StringIO

from ..logging_setup import get_logger
from ..models import CategoryType

logger = get_logger("ledger_recon.ingest.parsing")

_BOM = "\ufeff"

# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def parse_rows(text: str) -> list[list[str]]:
    """Tokenize CSV text into trimmed rows.

    A leading byte-order mark is stripped. Rows whose fields are all empty
    (blank lines, separator-only lines) are dropped. Tokenizing stops at the
    first malformed record (e.g. an unterminated quote running past the field
    size limit); the rows read up to that point are returned.
    """

    clean = text.removeprefix(_BOM)
    rows: list[list[str]] = []
    with StringIO(clean) as f:
        # ``skipinitialspace`` lets `a, "b, c"` quote the second field.
        reader = csv.reader(f, skipinitialspace=True)
        try:
            for raw in reader:
                row = [field.strip() for field in raw]
                if any(row):
                    rows.append(row)
        except csv.Error as e:
            logger.warning("CSV tokenizing stopped at line %d: %s", reader.line_num, e)
    return rows


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_CURRENCY_AND_GROUPING = re.compile(r"[$£€,]")
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: str | None) -> Decimal:
    """Parse a currency string into a signed ``Decimal``.

    Handles ``$1,234.56``, ``(1,234.56)`` (parenthesized = negative),
    ``-$1,234.56`` and the ``$ £ €`` symbols. Empty or unparseable input
    yields ``Decimal(0)``; callers treat zero as "no transaction".
    """

    if raw is None:
        return Decimal(0)
    s = raw.strip()
    if not s:
        return Decimal(0)

    negative = len(s) >= 2 and s.startswith("(") and s.endswith(")")
    if negative:
        s = s[1:-1]

    s = _CURRENCY_AND_GROUPING.sub("", s).strip()

    # Lenient like spreadsheet exports: read the leading number, ignore any
    # trailing text (e.g. "12.50 USD").
    m = _NUMERIC_PREFIX.match(s)
    if m is None:
        return Decimal(0)
    try:
        d = Decimal(m.group(0))
    except InvalidOperation:
        return Decimal(0)
    return -abs(d) if negative else d


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_MON_YEAR = re.compile(
    r"^(\d{1,2})\s+(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\w*\s+(\d{4})$",
    re.IGNORECASE,
)
_NUMERIC_DATE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$")

_MONTHS = {
    "jan": "01",
    "feb": "02",
    "mar": "03",
    "apr": "04",
    "may": "05",
    "jun": "06",
    "jul": "07",
    "aug": "08",
    "sep": "09",
    "oct": "10",
    "nov": "11",
    "dec": "12",
}

# Dialects that export day-first numeric dates.
_DAY_FIRST_PLATFORMS = frozenset({"xero"})


def parse_date(raw: str, platform: str) -> str:
    """Convert a GL date cell to ``YYYY-MM-DD``.

    Supported inputs: ``YYYY-MM-DD``, ``DD Mon YYYY`` and numeric
    ``A/B/YYYY`` (or ``A-B-YYYY``). Numeric dates are read day-first for Xero
    and month-first otherwise; the hint alone decides, the values are not
    inspected for ambiguity. Unrecognized formats are returned trimmed but
    otherwise unchanged.
    """

    s = raw.strip()

    if _ISO_DATE.match(s):
        return s

    m = _DAY_MON_YEAR.match(s)
    if m:
        day = m.group(1).zfill(2)
        mon = _MONTHS[m.group(2).lower()[:3]]
        return f"{m.group(3)}-{mon}-{day}"

    m = _NUMERIC_DATE.match(s)
    if m:
        first, second, year = m.group(1).zfill(2), m.group(2).zfill(2), m.group(3)
        if platform in _DAY_FIRST_PLATFORMS:
            return f"{year}-{second}-{first}"
        return f"{year}-{first}-{second}"

    return s


# ---------------------------------------------------------------------------
# Names and account types
# ---------------------------------------------------------------------------

INCOME_KEYWORDS: tuple[str, ...] = (
    "revenue",
    "income",
    "sales",
    "interest earned",
    "other income",
    "service revenue",
)
ASSET_KEYWORDS: tuple[str, ...] = (
    "receivable",
    "bank",
    "cash",
    "checking",
    "savings",
    "current asset",
    "fixed asset",
    "undeposited",
)
LIABILITY_KEYWORDS: tuple[str, ...] = (
    "payable",
    "loan",
    "credit card",
    "liability",
    "line of credit",
)


def normalize_name(name: str) -> str:
    """Return the dedup key for a vendor/category name.

    Lower-cases, collapses internal whitespace to single spaces and trims.
    """

    return " ".join(name.lower().split())


def infer_category_type(name: str) -> CategoryType:
    """Classify an account name; income wins over asset, asset over liability."""

    lower = name.lower()
    if any(k in lower for k in INCOME_KEYWORDS):
        return "income"
    if any(k in lower for k in ASSET_KEYWORDS):
        return "asset"
    if any(k in lower for k in LIABILITY_KEYWORDS):
        return "liability"
    return "expense"


# ---------------------------------------------------------------------------
# Header detection
# ---------------------------------------------------------------------------

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _norm_header(h: str) -> str:
    return _NON_ALNUM.sub("", h.lower())


def match_headers(headers: Sequence[str], targets: Sequence[str]) -> bool:
    """Return True when every target is contained in some normalized header."""

    normalized = [_norm_header(h) for h in headers]
    return all(any(_norm_header(t) in h for h in normalized) for t in targets)


def find_column_index(headers: Sequence[str], *candidates: str) -> int:
    """Return the index of the first header containing a candidate, else -1.

    Candidates are tried in order; the first candidate with any hit wins.
    """

    normalized = [_norm_header(h) for h in headers]
    for c in candidates:
        target = _norm_header(c)
        for idx, h in enumerate(normalized):
            if target in h:
                return idx
    return -1


def find_header_row(rows: Sequence[Sequence[str]], targets: Sequence[str]) -> int:
    for idx, row in enumerate(rows):
        if match_headers(row, targets):
            return idx
    return -1


_SUMMARY_PREFIX = re.compile(r"^(net |beginning |ending )", re.IGNORECASE)


def is_summary_row(row: Sequence[str]) -> bool:
    """Heuristic for report scaffolding rows (section titles, totals, balances)."""

    first = (row[0] if row else "").lower()
    if not first or first.startswith("total"):
        return True
    return bool(_SUMMARY_PREFIX.match(" ".join(row)))


def cell(row: Sequence[str], idx: int) -> str:
    """Return ``row[idx]`` or ``""`` for a missing column/short row."""

    if idx < 0 or idx >= len(row):
        return ""
    return row[idx]


__all__ = [
    "parse_rows",
    "parse_amount",
    "parse_date",
    "normalize_name",
    "infer_category_type",
    "match_headers",
    "find_column_index",
    "find_header_row",
    "is_summary_row",
    "cell",
    "INCOME_KEYWORDS",
    "ASSET_KEYWORDS",
    "LIABILITY_KEYWORDS",
]
