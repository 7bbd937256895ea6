"""Adapter for QuickBooks Online General Ledger CSV exports.

QBO report exports open with a title preamble (company name, report name,
period) before the column header, and interleave account section titles and
``Total for ...`` rows with the data. The header is located by fuzzy column
matching rather than by exact text.

Columns (matched on lowercase alphanumerics, substring containment):

- ``date`` (required)
- ``amount`` (required): a single signed column
- ``name``: vendor/customer name
- ``memo`` or ``description``
- ``split`` or ``account``: the offsetting account, used as category

Row mapping
-----------
- ``date``: :func:`parse_date` with month-first numeric dates
- ``amount``: signed amount as exported; zero rows are skipped
- ``vendor_name``: name column, else ``Unknown``
- ``description``: memo, else vendor, else ``Unknown``
- ``category_name``: split/account column, else ``Uncategorized``
"""

from __future__ import annotations

from collections.abc import Sequence

from ...logging_setup import get_logger
from ...models import UNCATEGORIZED, UNKNOWN_VENDOR, ParsedGLData, ParsedTransaction
from ..batch import GLBatch
from ..errors import FormatError
from ..parsing import cell, find_column_index, find_header_row, is_summary_row, parse_amount, parse_date

logger = get_logger("ledger_recon.ingest.adapters.qbo_gl_csv")

HEADER_TARGETS: tuple[str, ...] = ("date", "amount")


def to_gl_data(rows: Sequence[Sequence[str]]) -> ParsedGLData:
    """Map tokenized QBO rows to the canonical GL view.

    Raises :class:`FormatError` when no header row with Date and Amount
    columns can be found.
    """

    header_idx = find_header_row(rows, HEADER_TARGETS)
    if header_idx == -1:
        raise FormatError("Could not detect QBO GL format. Expected columns: Date, Amount")

    headers = rows[header_idx]
    date_col = find_column_index(headers, "date")
    name_col = find_column_index(headers, "name")
    memo_col = find_column_index(headers, "memo", "description")
    split_col = find_column_index(headers, "split", "account")
    amount_col = find_column_index(headers, "amount")

    if date_col == -1 or amount_col == -1:
        raise FormatError("QBO format requires at least Date and Amount columns")

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

        amount = parse_amount(cell(row, amount_col))
        if amount == 0:
            skipped += 1
            continue

        vendor_raw = cell(row, name_col)
        memo = cell(row, memo_col)
        category_raw = cell(row, split_col)

        vendor_name = vendor_raw or UNKNOWN_VENDOR
        batch.add(
            ParsedTransaction(
                date=parse_date(date_raw, "qbo"),
                description=memo or vendor_raw or UNKNOWN_VENDOR,
                amount=amount,
                category_name=category_raw or UNCATEGORIZED,
                vendor_name=vendor_name,
                source="qbo",
            )
        )

    logger.debug("qbo: %d transactions, %d rows skipped", len(batch), skipped)
    return batch.build()


__all__ = ["HEADER_TARGETS", "to_gl_data"]
