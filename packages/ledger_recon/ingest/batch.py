"""Per-batch accumulator shared by the GL dialect adapters.

Collects transactions in input order and derives the distinct categories and
vendors they reference, keyed by :func:`normalize_name`. The first spelling
seen for a key is the one kept. Placeholder names (``Uncategorized`` and
``Unknown``) are never emitted as records.
"""

from __future__ import annotations

from ..models import (
    UNCATEGORIZED,
    UNKNOWN_VENDOR,
    ParsedCategory,
    ParsedGLData,
    ParsedTransaction,
    ParsedVendor,
)
from .parsing import infer_category_type, normalize_name


class GLBatch:
    def __init__(self) -> None:
        self._transactions: list[ParsedTransaction] = []
        self._categories: dict[str, ParsedCategory] = {}
        self._vendors: dict[str, ParsedVendor] = {}

    def add(self, tx: ParsedTransaction) -> None:
        cat_key = normalize_name(tx.category_name)
        if tx.category_name != UNCATEGORIZED and cat_key not in self._categories:
            self._categories[cat_key] = ParsedCategory(
                name=tx.category_name,
                type=infer_category_type(tx.category_name),
            )

        vend_key = normalize_name(tx.vendor_name)
        if tx.vendor_name != UNKNOWN_VENDOR and vend_key not in self._vendors:
            self._vendors[vend_key] = ParsedVendor(name=tx.vendor_name, normalized_name=vend_key)

        self._transactions.append(tx)

    def __len__(self) -> int:
        return len(self._transactions)

    def build(self) -> ParsedGLData:
        return ParsedGLData(
            transactions=tuple(self._transactions),
            categories=tuple(self._categories.values()),
            vendors=tuple(self._vendors.values()),
        )


__all__ = ["GLBatch"]
