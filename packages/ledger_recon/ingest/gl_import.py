"""GL CSV entrypoint: dialect dispatch and the empty-import fallback policy.

``parse_gl_csv`` is the strict entrypoint: it raises :class:`FormatError`
when the dialect's header cannot be located and otherwise returns whatever
rows survived (possibly none). ``load_gl_import`` is the caller-side policy
used by the CLI and workflows: any format error or zero-transaction result is
replaced by the fixed demo dataset so onboarding never dead-ends on an empty
import.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..logging_setup import get_logger
from ..models import SUPPORTED_PLATFORMS, ParsedGLData, Platform
from .adapters import qbo_gl_csv, xero_gl_csv
from .demo_data import generate_demo_data
from .errors import FormatError
from .parsing import parse_rows

logger = get_logger("ledger_recon.ingest.gl_import")

_ADAPTERS: dict[str, Callable[[Sequence[Sequence[str]]], ParsedGLData]] = {
    "qbo": qbo_gl_csv.to_gl_data,
    "xero": xero_gl_csv.to_gl_data,
}


def _check_platform(platform: str) -> Platform:
    p = platform.strip().lower()
    if p not in SUPPORTED_PLATFORMS:
        raise ValueError(
            f"unknown platform: {platform!r}. Supported: {sorted(SUPPORTED_PLATFORMS)}"
        )
    return p  # type: ignore[return-value]


def parse_gl_csv(text: str, platform: str) -> ParsedGLData:
    """Parse GL export text for ``platform`` into the canonical view.

    Output order is deterministic: transactions in file order, categories and
    vendors in order of first reference.
    """

    p = _check_platform(platform)
    rows = parse_rows(text)
    if not rows:
        raise FormatError("CSV file is empty")
    return _ADAPTERS[p](rows)


@dataclass(frozen=True, slots=True)
class GLImportOutcome:
    data: ParsedGLData
    used_demo_data: bool
    # Reason the upload was replaced, when it was
    reason: str | None = None


def load_gl_import(text: str, platform: str) -> GLImportOutcome:
    """Parse ``text``, substituting demo data when nothing usable was found.

    Unknown platforms still raise ``ValueError``: that is a caller bug, not a
    bad upload.
    """

    p = _check_platform(platform)
    try:
        data = parse_gl_csv(text, p)
    except FormatError as e:
        logger.info("GL import for %s not recognised (%s); using demo data", p, e)
        return GLImportOutcome(data=generate_demo_data(p), used_demo_data=True, reason=str(e))

    if not data.transactions:
        logger.info("GL import for %s produced no transactions; using demo data", p)
        return GLImportOutcome(
            data=generate_demo_data(p), used_demo_data=True, reason="no transactions found"
        )

    logger.info(
        "GL import for %s: %d transactions, %d categories, %d vendors",
        p,
        len(data.transactions),
        len(data.categories),
        len(data.vendors),
    )
    return GLImportOutcome(data=data, used_demo_data=False)


__all__ = ["GLImportOutcome", "load_gl_import", "parse_gl_csv"]
