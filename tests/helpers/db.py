"""DB helpers for tests: bootstrap a temporary SQLite DB from the ORM metadata."""

from __future__ import annotations

import os
from pathlib import Path

from db import Base
from db.client import get_engine


def bootstrap_sqlite_db(db_file: Path, *, set_default_env: bool = False) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default). Integer
    primary keys map to SQLite rowids, so ``create_all`` is enough here.
    """

    url = f"sqlite+pysqlite:///{db_file}"
    # Ensure parent exists before engine creation attempts any writes
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)
    Base.metadata.create_all(bind=engine)

    # Make it the default for any code paths that read from the environment
    if set_default_env:
        os.environ["DATABASE_URL"] = url
    return url
