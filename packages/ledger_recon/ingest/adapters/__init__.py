"""Per-platform GL export adapters (QBO, Xero)."""
