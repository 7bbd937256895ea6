"""Greedy one-to-one matching of bank-feed transactions to ledger transactions.

Public surface:
- ``check_description_match``: does a free-text bank description plausibly
  name a ledger vendor?
- ``evaluate_match``: score a single (bank, ledger) pair.
- ``suggest_matches``: pair two transaction lists, returning accepted
  suggestions sorted by descending confidence.

Matching is first-acceptable, not best: ledger transactions are visited in
input order and each takes the first unconsumed bank transaction scoring at
least ``ACCEPTANCE_THRESHOLD``. On ambiguous inputs this can miss the globally
highest-confidence pairing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from .logging_setup import get_logger
from .models import BankTransaction, LedgerTransaction, MatchSuggestion, MatchType

logger = get_logger("ledger_recon.matching")

ACCEPTANCE_THRESHOLD = 0.5

_PENNY = Decimal("0.01")
_HUNDRED = Decimal(100)
_MIN_WORD_LEN = 4

# Lowercased ledger vendor name -> substrings seen in bank descriptions
VENDOR_ALIASES: Mapping[str, tuple[str, ...]] = {
    "amazon web services": ("aws", "amazon"),
    "google cloud platform": ("google", "gcp"),
    "slack technologies": ("slack",),
    "zoom video communications": ("zoom",),
    "adobe systems": ("adobe",),
    "microsoft": ("msft", "microsoft"),
    "salesforce": ("sfdc", "salesforce"),
    "hubspot": ("hubspot",),
    "mailchimp": ("mailchimp", "intuit"),
    "office depot": ("office depot", "od"),
    "staples": ("staples",),
    "fedex": ("fedex", "fed ex"),
    "ups": ("ups", "united parcel"),
    "comcast business": ("comcast",),
    "pg&e": ("pge", "pg&e", "pacific gas"),
    "wework": ("wework",),
    "regus": ("regus",),
    "delta airlines": ("delta",),
    "united airlines": ("united",),
    "marriott hotels": ("marriott",),
    "uber": ("uber",),
    "lyft": ("lyft",),
    "blue cross blue shield": ("bcbs", "blue cross", "anthem"),
    "hartford insurance": ("hartford",),
    "gusto": ("gusto",),
    "stripe": ("stripe",),
}


def check_description_match(bank_description: str, vendor_name: str) -> bool:
    """Return True when ``bank_description`` plausibly refers to ``vendor_name``.

    Any one of these suffices (all case-insensitive):
    - the description contains the full vendor name;
    - it contains the vendor's first word, when that word has 4+ characters;
    - it contains one of the vendor's entries in ``VENDOR_ALIASES``;
    - some 4+ character word of one text equals or contains a 4+ character
      word of the other.

    An empty vendor name never matches.
    """

    bank = bank_description.lower()
    vendor = vendor_name.strip().lower()
    if not vendor:
        return False

    if vendor in bank:
        return True

    vendor_words = vendor.split()
    first = vendor_words[0]
    if len(first) >= _MIN_WORD_LEN and first in bank:
        return True

    if any(alias in bank for alias in VENDOR_ALIASES.get(vendor, ())):
        return True

    long_vendor = [w for w in vendor_words if len(w) >= _MIN_WORD_LEN]
    long_bank = [w for w in bank.split() if len(w) >= _MIN_WORD_LEN]
    return any(v in b or b in v for v in long_vendor for b in long_bank)


@dataclass(frozen=True, slots=True)
class MatchEvaluation:
    confidence: float
    match_type: MatchType
    reasoning: str


_NO_MATCH = MatchEvaluation(0.0, "partial", "No match found")


def evaluate_match(bank: BankTransaction, ledger: LedgerTransaction) -> MatchEvaluation:
    """Score one (bank, ledger) pair. The first rule that applies wins."""

    amount_diff = abs(Decimal(bank.amount) - Decimal(ledger.amount))
    base = abs(Decimal(ledger.amount))
    # A zero ledger amount is unmatchable on amount
    pct = amount_diff / base * _HUNDRED if base > 0 else _HUNDRED
    days = abs((bank.date - ledger.date).days)
    desc_match = check_description_match(bank.description, ledger.vendor_name)

    same_amount = amount_diff <= _PENNY

    if same_amount and days == 0 and desc_match:
        return MatchEvaluation(
            0.99, "exact", "Exact amount match on same date with matching vendor name"
        )

    if same_amount and days <= 5 and desc_match:
        confidence = 0.95 if days <= 2 else 0.90 if days <= 3 else 0.85
        plural = "" if days == 1 else "s"
        return MatchEvaluation(
            confidence,
            "timing",
            f"Exact amount match with {days} day{plural} timing difference",
        )

    if same_amount and days <= 3:
        return MatchEvaluation(
            0.75, "timing", "Exact amount match but vendor name differs - verify manually"
        )

    if 0 < pct <= 5 and days <= 5 and desc_match:
        if pct <= 3:
            return MatchEvaluation(
                0.88,
                "fee_adjusted",
                f"Amount differs by ${amount_diff:.2f} ({pct:.1f}%) - likely payment processing fee",
            )
        return MatchEvaluation(
            0.78,
            "fee_adjusted",
            f"Amount differs by ${amount_diff:.2f} ({pct:.1f}%) - possible fee adjustment",
        )

    if 10 <= amount_diff <= 50 and days <= 5 and desc_match:
        return MatchEvaluation(
            0.82, "fee_adjusted", f"Amount differs by ${amount_diff:.2f} - possible bank fee"
        )

    if desc_match and days <= 7 and pct <= 20:
        return MatchEvaluation(
            0.60,
            "partial",
            f"Matching vendor with {pct:.1f}% amount difference - review carefully",
        )

    if days <= 3 and pct <= 10:
        return MatchEvaluation(
            0.55,
            "partial",
            "Similar amount and date but vendor name does not match - low confidence",
        )

    return _NO_MATCH


def suggest_matches(
    bank_txns: Iterable[BankTransaction],
    ledger_txns: Iterable[LedgerTransaction],
) -> list[MatchSuggestion]:
    """Pair ledger and bank transactions one-to-one.

    Each bank and ledger id appears at most once in the result and every
    returned suggestion has ``confidence >= ACCEPTANCE_THRESHOLD``. Ties keep
    acceptance order.
    """

    banks = list(bank_txns)
    ledgers = list(ledger_txns)
    consumed_bank_ids: set[str] = set()
    consumed_ledger_ids: set[str] = set()
    suggestions: list[MatchSuggestion] = []

    for ledger in ledgers:
        if ledger.id in consumed_ledger_ids:
            continue
        for bank in banks:
            if bank.id in consumed_bank_ids:
                continue
            ev = evaluate_match(bank, ledger)
            if ev.confidence < ACCEPTANCE_THRESHOLD:
                continue
            suggestions.append(
                MatchSuggestion(
                    bank_txn_id=bank.id,
                    ledger_txn_id=ledger.id,
                    confidence=ev.confidence,
                    match_type=ev.match_type,
                    reasoning=ev.reasoning,
                )
            )
            consumed_bank_ids.add(bank.id)
            consumed_ledger_ids.add(ledger.id)
            break

    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    logger.debug(
        "Matched %d of %d ledger / %d bank transactions",
        len(suggestions),
        len(ledgers),
        len(banks),
    )
    return suggestions


__all__ = [
    "ACCEPTANCE_THRESHOLD",
    "VENDOR_ALIASES",
    "MatchEvaluation",
    "check_description_match",
    "evaluate_match",
    "suggest_matches",
]
