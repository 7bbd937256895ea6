"""Ingest utilities shared by CLI commands and workflows.

Exposes a single helper to load a GL export from disk and apply the
demo-data fallback policy of :func:`load_gl_import`.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .gl_import import GLImportOutcome, load_gl_import


def load_gl_csv(csv_path: str | PathLike[str], platform: str) -> GLImportOutcome:
    """Read a GL CSV export and return the parsed (or substituted) batch.

    The file is decoded as UTF-8 with ``utf-8-sig`` so a leading byte-order
    mark is dropped at read time. ``OSError`` (missing file, permissions) and
    ``UnicodeDecodeError`` propagate to the caller.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        text = f.read()
    return load_gl_import(text, platform)


__all__ = ["load_gl_csv"]
