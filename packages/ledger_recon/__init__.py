"""Public interface for the ``ledger_recon`` package.

This module exposes the package's pure entry points and public models/types as
the stable import surface. There is no runtime logic here, only symbol
re-exports. Database-backed helpers live in ``ledger_recon.persistence`` and
``ledger_recon.workflows`` and are not imported eagerly.
"""

from .categorization import suggest_category
from .demo_feeds import (
    SeededRandom,
    get_bank_transactions,
    get_chart_of_accounts,
    get_ledger_transactions,
    hash_code,
)
from .ingest import (
    FormatError,
    GLImportOutcome,
    generate_demo_data,
    load_gl_csv,
    load_gl_import,
    parse_amount,
    parse_date,
    parse_gl_csv,
)
from .matching import ACCEPTANCE_THRESHOLD, check_description_match, evaluate_match, suggest_matches
from .models import (
    BankTransaction,
    CategorySuggestion,
    ChartCategory,
    ImportResult,
    LedgerTransaction,
    MatchSuggestion,
    ParsedCategory,
    ParsedGLData,
    ParsedTransaction,
    ParsedVendor,
)

__all__ = [
    # Normalizer
    "parse_gl_csv",
    "load_gl_import",
    "load_gl_csv",
    "parse_amount",
    "parse_date",
    "generate_demo_data",
    "FormatError",
    "GLImportOutcome",
    # Matching
    "ACCEPTANCE_THRESHOLD",
    "check_description_match",
    "evaluate_match",
    "suggest_matches",
    # Categorization
    "suggest_category",
    # Demo feeds
    "SeededRandom",
    "hash_code",
    "get_ledger_transactions",
    "get_bank_transactions",
    "get_chart_of_accounts",
    # Models / types
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
