"""Data models and type aliases for ``ledger_recon``.

Two families live here:

- Frozen ``dataclass`` records for the canonical ledger view produced by the
  GL normalizer and for the two transaction streams consumed by the matcher.
  Records are created once per import batch or matching run and never
  mutated afterwards.
- Validated ``pydantic`` DTOs for values handed to presentation or
  persistence collaborators (match and category suggestions, import results),
  where a confidence outside ``[0, 1]`` must be rejected at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

type Platform = Literal["qbo", "xero"]
"""GL export dialect discriminator."""

type CategoryType = Literal["expense", "income", "asset", "liability"]

type MatchType = Literal["exact", "timing", "fee_adjusted", "partial"]

SUPPORTED_PLATFORMS: frozenset[str] = frozenset({"qbo", "xero"})

UNCATEGORIZED = "Uncategorized"
UNKNOWN_VENDOR = "Unknown"


# ---------------------------------------------------------------------------
# Canonical GL view (normalizer output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A single ledger row after dialect normalization.

    ``date`` is ``YYYY-MM-DD`` whenever the raw value was recognised; other
    formats pass through unchanged for downstream validation. ``amount`` is
    signed (positive = credit/income, negative = debit/expense) and is never
    zero.
    """

    date: str
    description: str
    amount: Decimal
    category_name: str
    vendor_name: str
    source: Platform


@dataclass(frozen=True, slots=True)
class ParsedCategory:
    name: str
    type: CategoryType


@dataclass(frozen=True, slots=True)
class ParsedVendor:
    """A vendor identity; ``normalized_name`` is the dedup key."""

    name: str
    normalized_name: str


@dataclass(frozen=True, slots=True)
class ParsedGLData:
    transactions: tuple[ParsedTransaction, ...] = ()
    categories: tuple[ParsedCategory, ...] = ()
    vendors: tuple[ParsedVendor, ...] = ()


# ---------------------------------------------------------------------------
# Matching inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LedgerTransaction:
    """A transaction as recorded in the book of record."""

    id: str
    date: date
    amount: Decimal
    vendor_name: str
    description: str = ""
    category_name: str | None = None
    memo: str | None = None
    external_id: str | None = None


@dataclass(frozen=True, slots=True)
class BankTransaction:
    """A transaction as reported by the bank feed."""

    id: str
    date: date
    amount: Decimal
    description: str
    bank_name: str | None = None
    account_type: str | None = None
    memo: str | None = None
    external_id: str | None = None


@dataclass(frozen=True, slots=True)
class ChartCategory:
    """A chart-of-accounts entry with a stable identifier."""

    id: str
    name: str
    type: CategoryType


# ---------------------------------------------------------------------------
# Validated DTOs
# ---------------------------------------------------------------------------


def _unit_interval(v: float) -> float:
    fv = float(v)
    if 0.0 <= fv <= 1.0:
        return fv
    raise ValueError("confidence must be within [0,1]")


class MatchSuggestion(BaseModel):
    """A proposed pairing between one bank and one ledger transaction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bank_txn_id: str
    ledger_txn_id: str
    confidence: float
    match_type: MatchType
    reasoning: str

    @field_validator("confidence")
    @classmethod
    def _confidence_in_unit_interval(cls, v: float) -> float:
        return _unit_interval(v)


class CategorySuggestion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    category_id: str
    category_name: str
    confidence: float
    reasoning: str

    @field_validator("confidence")
    @classmethod
    def _confidence_in_unit_interval(cls, v: float) -> float:
        return _unit_interval(v)


class ImportResult(BaseModel):
    """Outcome of persisting one GL import batch.

    Counts report rows created by this batch: categories and vendors that
    already existed for the workspace are not counted.
    """

    model_config = ConfigDict(extra="forbid")

    success: bool
    error: str | None = None
    import_id: int | None = None
    transaction_count: int = 0
    category_count: int = 0
    vendor_count: int = 0


__all__ = [
    "Platform",
    "CategoryType",
    "MatchType",
    "SUPPORTED_PLATFORMS",
    "UNCATEGORIZED",
    "UNKNOWN_VENDOR",
    "ParsedTransaction",
    "ParsedCategory",
    "ParsedVendor",
    "ParsedGLData",
    "LedgerTransaction",
    "BankTransaction",
    "ChartCategory",
    "MatchSuggestion",
    "CategorySuggestion",
    "ImportResult",
]
