"""Storage layer for snapshot persistence."""

from arc_scoring.storage.database import Database, close_database, get_database
from arc_scoring.storage.schema import SCHEMA_SQL, create_tables

__all__ = ["Database", "SCHEMA_SQL", "close_database", "create_tables", "get_database"]
