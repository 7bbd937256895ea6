# ruff: noqa: I001
"""CLI for the ``ledger_recon`` package.

This module exposes callable command handlers (``cmd_import_gl``,
``cmd_suggest_matches``, ...) and a Typer-based console interface. Environment
variables (notably ``DATABASE_URL`` and ``LEDGER_RECON_LOG_LEVEL``) are loaded
from a local ``.env`` using ``python-dotenv`` before delegating to command
logic. Output is tab-separated, one record per line, on stdout; errors go to
stderr as ``Error: ...`` with exit status 1.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import configure_logging


def _err(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def _parse_today(raw: str | None) -> date | None:
    if raw is None:
        return None
    return date.fromisoformat(raw)


# ---- Command handlers ---------------------------------------------------------


def cmd_import_gl(
    csv_path: str,
    *,
    platform: str,
    workspace_id: str = "default",
    persist: bool = False,
    database_url: str | None = None,
) -> int:
    """Parse a GL CSV export and print the canonical rows.

    Writes a summary line followed by one ``date\\tamount\\tvendor\\tcategory``
    line per transaction. When nothing usable is found the fixed demo dataset
    is printed instead and the summary says so. With ``persist`` the batch is
    also imported into ``workspace_id``.
    """

    # Local imports keep CLI startup fast
    from sqlalchemy.exc import SQLAlchemyError

    from .ingest.utils import load_gl_csv
    from .workflows.reconcile_flow import import_gl_csv

    try:
        if persist:
            outcome, result = import_gl_csv(
                csv_path,
                platform=platform,
                workspace_id=workspace_id,
                database_url=database_url,
            )
            if not result.success:
                return _err(f"import failed: {result.error}")
        else:
            outcome = load_gl_csv(csv_path, platform)
    except FileNotFoundError:
        return _err(f"File not found: {csv_path}")
    except PermissionError:
        return _err(f"Permission denied: {csv_path}")
    except UnicodeDecodeError as e:
        return _err(f"{csv_path} is not valid UTF-8: {e}")
    except ValueError as e:
        return _err(str(e))
    except (RuntimeError, SQLAlchemyError) as e:
        return _err(f"database error: {e}")

    data = outcome.data
    summary = (
        f"Parsed {len(data.transactions)} transactions, {len(data.categories)} categories, "
        f"{len(data.vendors)} vendors"
    )
    if outcome.used_demo_data:
        summary += f" (demo data: {outcome.reason})"
    print(summary)
    for t in data.transactions:
        print(f"{t.date}\t{t.amount}\t{t.vendor_name}\t{t.category_name}")
    return 0


def cmd_suggest_matches(
    *,
    workspace_id: str,
    from_db: bool = False,
    persist: bool = False,
    database_url: str | None = None,
    today: date | None = None,
) -> int:
    """Print match suggestions as ``bank_id\\tledger_id\\tmatch_type\\tconfidence\\treasoning``.

    By default the seeded demo ledger and bank feeds for ``workspace_id`` are
    matched; ``from_db`` matches the workspace's stored unmatched transactions
    instead and ``persist`` records the accepted suggestions.
    """

    from sqlalchemy.exc import SQLAlchemyError

    from .demo_feeds import get_bank_transactions, get_ledger_transactions
    from .matching import suggest_matches
    from .workflows.reconcile_flow import reconcile_workspace

    if persist and not from_db:
        return _err("--persist requires --from-db")

    if from_db:
        try:
            suggestions = reconcile_workspace(
                database_url=database_url,
                workspace_id=workspace_id,
                persist=persist,
            )
        except (RuntimeError, SQLAlchemyError) as e:
            return _err(f"database error: {e}")
    else:
        suggestions = suggest_matches(
            get_bank_transactions(workspace_id, today=today),
            get_ledger_transactions(workspace_id, today=today),
        )

    for s in suggestions:
        print(f"{s.bank_txn_id}\t{s.ledger_txn_id}\t{s.match_type}\t{s.confidence:.2f}\t{s.reasoning}")
    return 0


def cmd_suggest_categories(csv_path: str, *, platform: str, workspace_id: str = "default") -> int:
    """Suggest a category per parsed transaction against the standard chart.

    Writes ``description\\tcategory\\tconfidence`` per transaction.
    """

    from .categorization import suggest_category
    from .demo_feeds import get_chart_of_accounts
    from .ingest.utils import load_gl_csv

    try:
        outcome = load_gl_csv(csv_path, platform)
    except FileNotFoundError:
        return _err(f"File not found: {csv_path}")
    except PermissionError:
        return _err(f"Permission denied: {csv_path}")
    except UnicodeDecodeError as e:
        return _err(f"{csv_path} is not valid UTF-8: {e}")
    except ValueError as e:
        return _err(str(e))

    chart = get_chart_of_accounts(workspace_id)
    for t in outcome.data.transactions:
        s = suggest_category(t, chart)
        print(f"{t.description}\t{s.category_name}\t{s.confidence:.2f}")
    return 0


def cmd_sync_demo_bank(
    *,
    workspace_id: str,
    database_url: str | None = None,
    today: date | None = None,
) -> int:
    """Store the seeded demo bank feed for ``workspace_id`` in the database."""

    from db.client import session_scope
    from sqlalchemy.exc import SQLAlchemyError

    from .demo_feeds import get_bank_transactions
    from .persistence import upsert_bank_transactions

    feed = get_bank_transactions(workspace_id, today=today)
    try:
        with session_scope(database_url=database_url) as session:
            inserted = upsert_bank_transactions(
                session, workspace_id=workspace_id, transactions=feed
            )
    except (RuntimeError, SQLAlchemyError) as e:
        return _err(f"database error: {e}")

    print(f"Stored {inserted} new of {len(feed)} bank transactions")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Normalize GL CSV exports, match ledger against bank transactions and "
        "suggest categories. Loads DATABASE_URL from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a GL CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)
PLATFORM_OPTION: OptionInfo = typer.Option(
    "--platform", help="GL export dialect: qbo or xero."
)
WORKSPACE_OPTION: OptionInfo = typer.Option(
    "--workspace-id", help="Workspace identifier scoping stored data."
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
TODAY_OPTION: OptionInfo = typer.Option(
    "--today", help="Anchor date (YYYY-MM-DD) for the seeded demo feeds."
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _today_or_exit(raw: str | None) -> date | None:
    try:
        return _parse_today(raw)
    except ValueError:
        _exit(_err(f"--today must be YYYY-MM-DD, got {raw!r}"))
        return None


@app.command("import-gl")
def import_gl_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    platform: Annotated[str, PLATFORM_OPTION] = "qbo",
    workspace_id: Annotated[str, WORKSPACE_OPTION] = "default",
    *,
    persist: bool = typer.Option(False, help="Import the parsed batch into the database."),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Parse a GL export (QBO or Xero), print it, optionally persist."""

    _exit(
        cmd_import_gl(
            str(csv_path),
            platform=platform,
            workspace_id=workspace_id,
            persist=persist,
            database_url=database_url,
        )
    )


@app.command("suggest-matches")
def suggest_matches_cmd(
    workspace_id: Annotated[str, WORKSPACE_OPTION] = "default",
    *,
    from_db: bool = typer.Option(
        False, "--from-db", help="Match stored unmatched transactions instead of demo feeds."
    ),
    persist: bool = typer.Option(False, help="Record suggestions (requires --from-db)."),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    today: Annotated[str | None, TODAY_OPTION] = None,
) -> None:
    """Suggest one-to-one bank/ledger matches."""

    _exit(
        cmd_suggest_matches(
            workspace_id=workspace_id,
            from_db=from_db,
            persist=persist,
            database_url=database_url,
            today=_today_or_exit(today),
        )
    )


@app.command("suggest-categories")
def suggest_categories_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    platform: Annotated[str, PLATFORM_OPTION] = "qbo",
    workspace_id: Annotated[str, WORKSPACE_OPTION] = "default",
) -> None:
    """Suggest a category for each transaction of a GL export."""

    _exit(cmd_suggest_categories(str(csv_path), platform=platform, workspace_id=workspace_id))


@app.command("sync-demo-bank")
def sync_demo_bank_cmd(
    workspace_id: Annotated[str, WORKSPACE_OPTION] = "default",
    *,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    today: Annotated[str | None, TODAY_OPTION] = None,
) -> None:
    """Store the seeded demo bank feed so it can be reconciled from the DB."""

    _exit(
        cmd_sync_demo_bank(
            workspace_id=workspace_id,
            database_url=database_url,
            today=_today_or_exit(today),
        )
    )


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging once.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    # Running as a module: `python -m ledger_recon.cli`
    app()
