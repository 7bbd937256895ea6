"""Adapter for Xero General Ledger / Account Transactions CSV exports.

Xero exports carry separate Debit and Credit columns (older reports use a
single Gross column), day-first dates (``15/01/2025`` or ``15 Jan 2025``) and
no dedicated contact column: the contact is the leading part of the
description, conventionally written ``"<Contact> - <details>"``.

Columns (matched on lowercase alphanumerics, substring containment):

- ``date`` (required)
- ``account`` (required): the ledger account, used as category
- ``description``
- ``debit`` / ``credit``, else ``gross``

Row mapping
-----------
- ``amount``: ``credit - debit`` when either column exists, else gross;
  zero rows are skipped
- ``vendor_name``: description text before the first ``" - "``; the whole
  description when there is no delimiter; ``Unknown`` when empty
- ``description``: description, else vendor
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from ...logging_setup import get_logger
from ...models import UNCATEGORIZED, UNKNOWN_VENDOR, ParsedGLData, ParsedTransaction
from ..batch import GLBatch
from ..errors import FormatError
from ..parsing import cell, find_column_index, find_header_row, is_summary_row, parse_amount, parse_date

logger = get_logger("ledger_recon.ingest.adapters.xero_gl_csv")

HEADER_TARGETS: tuple[str, ...] = ("date", "account")
VENDOR_DELIMITER = " - "


def vendor_from_description(description: str) -> str:
    """Return the contact part of a Xero description."""

    dash_idx = description.find(VENDOR_DELIMITER)
    if dash_idx > 0:
        return description[:dash_idx].strip()
    return description or UNKNOWN_VENDOR


def to_gl_data(rows: Sequence[Sequence[str]]) -> ParsedGLData:
    """Map tokenized Xero rows to the canonical GL view.

    Raises :class:`FormatError` when no header row with Date and Account
    columns can be found.
    """

    header_idx = find_header_row(rows, HEADER_TARGETS)
    if header_idx == -1:
        raise FormatError("Could not detect Xero GL format. Expected columns: Date, Account")

    headers = rows[header_idx]
    date_col = find_column_index(headers, "date")
    desc_col = find_column_index(headers, "description")
    debit_col = find_column_index(headers, "debit")
    credit_col = find_column_index(headers, "credit")
    gross_col = find_column_index(headers, "gross")
    account_col = find_column_index(headers, "account")

    if date_col == -1 or account_col == -1:
        raise FormatError("Xero format requires at least Date and Account columns")

    has_split_columns = debit_col != -1 or credit_col != -1

    batch = GLBatch()
    skipped = 0
    for row in rows[header_idx + 1 :]:
        if is_summary_row(row):
            skipped += 1
            continue

        date_raw = cell(row, date_col)
        if not date_raw:
            skipped += 1
            continue

        if has_split_columns:
            debit = parse_amount(cell(row, debit_col))
            credit = parse_amount(cell(row, credit_col))
            # Credits positive, debits negative
            amount = credit - debit
        elif gross_col != -1:
            amount = parse_amount(cell(row, gross_col))
        else:
            amount = Decimal(0)

        if amount == 0:
            skipped += 1
            continue

        desc_raw = cell(row, desc_col)
        vendor_name = vendor_from_description(desc_raw)
        batch.add(
            ParsedTransaction(
                date=parse_date(date_raw, "xero"),
                description=desc_raw or vendor_name,
                amount=amount,
                category_name=cell(row, account_col) or UNCATEGORIZED,
                vendor_name=vendor_name,
                source="xero",
            )
        )

    logger.debug("xero: %d transactions, %d rows skipped", len(batch), skipped)
    return batch.build()


__all__ = ["HEADER_TARGETS", "VENDOR_DELIMITER", "to_gl_data", "vendor_from_description"]
