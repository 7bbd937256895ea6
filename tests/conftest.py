"""Pytest configuration for test isolation.

The ``db.client`` engine is a process-wide singleton bound to the first URL it
sees. Tests that bootstrap their own SQLite file would otherwise trip the
"already initialized with a different DATABASE_URL" guard, so an autouse
fixture disposes the engine after each test. ``DATABASE_URL`` and the log
level variable are cleared so a developer's ``.env`` never leaks into a run.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make sure the workspace `packages/` and `libs/db/src` dirs are importable
_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]

from db.client import dispose_engine  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_db_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LEDGER_RECON_LOG_LEVEL", raising=False)
    dispose_engine()
    yield
    dispose_engine()


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).resolve().parent / "data"
