# ruff: noqa: I001
"""Workflow orchestrators for end-to-end import and reconciliation flows.

This module composes ingest, persistence and matching behind a small
importable API used by the CLI. The pure modules never touch the database;
the functions here own the session scope and therefore the commit.
"""

from __future__ import annotations

from collections.abc import Callable
from os import PathLike
from pathlib import Path

from db.client import session_scope

from ..ingest.gl_import import GLImportOutcome
from ..ingest.utils import load_gl_csv
from ..logging_setup import get_logger
from ..matching import suggest_matches
from ..models import ImportResult, MatchSuggestion
from ..persistence import import_gl_data, load_unmatched_transactions, record_match_suggestions

logger = get_logger("ledger_recon.workflows.reconcile_flow")


def import_gl_csv(
    csv_path: str | PathLike[str],
    *,
    platform: str,
    workspace_id: str,
    database_url: str | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> tuple[GLImportOutcome, ImportResult]:
    """End-to-end: GL CSV → canonical batch (demo fallback) → stored import.

    Returns the parse outcome and the persistence result. A failed import is
    reported through ``ImportResult.success`` rather than raised.
    """

    outcome = load_gl_csv(csv_path, platform)
    if on_progress and outcome.used_demo_data:
        on_progress(f"No usable transactions in {csv_path} ({outcome.reason}); imported demo data.")

    with session_scope(database_url=database_url) as session:
        result = import_gl_data(
            session,
            workspace_id=workspace_id,
            data=outcome.data,
            file_name=Path(csv_path).name,
            platform=platform.strip().lower(),
        )

    if on_progress and result.success:
        on_progress(
            f"Imported {result.transaction_count} transaction(s), "
            f"{result.category_count} new category(ies), {result.vendor_count} new vendor(s)."
        )
    return outcome, result


def reconcile_workspace(
    *,
    database_url: str | None = None,
    workspace_id: str,
    persist: bool = True,
    on_progress: Callable[[str], None] | None = None,
) -> list[MatchSuggestion]:
    """Match a workspace's stored unmatched ledger and bank transactions.

    Parameters
    ----------
    database_url:
        Optional DB URL override. Falls back to ``DATABASE_URL`` when ``None``.
    workspace_id:
        Scope for loading and recording.
    persist:
        When ``True`` (default), accepted suggestions are written to
        ``lr_matches`` and both sides are flagged ``matched`` in the same
        transaction.
    on_progress:
        Optional callable to receive short status lines (e.g., ``print``).

    Returns
    -------
    list[MatchSuggestion]
        Suggestions sorted by descending confidence. Ids are the string form
        of the stored transaction ids.
    """

    with session_scope(database_url=database_url) as session:
        ledger, bank = load_unmatched_transactions(session, workspace_id=workspace_id)
        if on_progress:
            on_progress(f"Loaded {len(ledger)} ledger and {len(bank)} bank transaction(s).")
        if not ledger or not bank:
            if on_progress:
                on_progress("Nothing to reconcile.")
            return []

        suggestions = suggest_matches(bank, ledger)
        if on_progress:
            on_progress(f"Found {len(suggestions)} match suggestion(s).")

        if persist and suggestions:
            record_match_suggestions(session, workspace_id=workspace_id, suggestions=suggestions)

    logger.info(
        "Reconciled workspace %s: %d suggestions (persist=%s)",
        workspace_id,
        len(suggestions),
        persist,
    )
    return suggestions


__all__ = ["import_gl_csv", "reconcile_workspace"]
