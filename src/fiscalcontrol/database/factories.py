"""Store factory functions for creating record store instances."""

import os
from pathlib import Path
from typing import Optional

from fiscalcontrol.database.sqlalchemy_db import DEFAULT_LOCK_TIMEOUT, SQLAlchemyRecordStore


def create_sqlite_store(
    database_path: Optional[str] = None, lock_timeout: Optional[float] = None
) -> SQLAlchemyRecordStore:
    """Create a SQLite-backed record store.

    Args:
        database_path: Path to SQLite database file. If None, checks FISCALCONTROL_DB_PATH
            environment variable, then defaults to ~/.fiscalcontrol/fiscalcontrol.db
        lock_timeout: Seconds to wait for the write lock. If None, checks
            FISCALCONTROL_LOCK_TIMEOUT, then defaults to 10 seconds

    Returns:
        SQLAlchemyRecordStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("FISCALCONTROL_DB_PATH")

    if database_path is None:
        # Default to ~/.fiscalcontrol/fiscalcontrol.db
        home = Path.home()
        db_dir = home / ".fiscalcontrol"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fiscalcontrol.db")

    if lock_timeout is None:
        lock_timeout = float(os.environ.get("FISCALCONTROL_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT))

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyRecordStore(database_url, lock_timeout=lock_timeout)
