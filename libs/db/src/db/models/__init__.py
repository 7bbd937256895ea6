"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the reconciliation models used by ``ledger_recon``.
"""

from .ledger import Base, LrCategory, LrImport, LrMatch, LrTransaction, LrVendor

__all__ = [
    "Base",
    "LrCategory",
    "LrImport",
    "LrMatch",
    "LrTransaction",
    "LrVendor",
]
