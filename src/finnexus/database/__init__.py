"""Database layer for finnexus application."""

from finnexus.database.base import Database
from finnexus.database.factories import (
    create_database,
    create_sqlite_database,
    create_supabase_database,
)

__all__ = [
    "Database",
    "create_database",
    "create_sqlite_database",
    "create_supabase_database",
]
