"""Errors raised by the GL ingestion layer."""

from __future__ import annotations

import csv


class FormatError(csv.Error):
    """The GL export's header row or mandatory columns could not be located.

    Subclasses ``csv.Error`` so callers that already surface CSV parse
    failures handle it without extra branches.
    """


__all__ = ["FormatError"]
