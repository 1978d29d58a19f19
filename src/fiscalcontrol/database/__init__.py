"""Record store layer for fiscalcontrol."""

from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.database.factories import create_sqlite_store

__all__ = ["RecordStore", "create_sqlite_store"]
