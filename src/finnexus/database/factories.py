"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from finnexus.config import Settings
from finnexus.database.base import Database
from finnexus.database.remote import SupabaseDatabase, create_supabase_client
from finnexus.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINNEXUS_DB_PATH
            environment variable, then defaults to ~/.finnexus/finnexus.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("FINNEXUS_DB_PATH")

    if database_path is None:
        # Default to ~/.finnexus/finnexus.db
        home = Path.home()
        db_dir = home / ".finnexus"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "finnexus.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_supabase_database(url: str, key: str) -> SupabaseDatabase:
    """Create a Supabase database instance.

    Missing credentials yield an unconfigured instance whose operations raise
    ConfigurationError.
    """
    return SupabaseDatabase(create_supabase_client(url, key))


def resolve_backend(settings: Settings) -> str:
    """Resolve the configured storage backend to 'local' or 'remote'."""
    backend = settings.app.storage_backend
    if backend == "auto":
        return "remote" if settings.supabase.configured else "local"
    return backend


def create_database(settings: Settings, database_path: Optional[str] = None) -> Database:
    """Create the database selected by configuration.

    Args:
        settings: Application settings
        database_path: Optional SQLite path overriding settings (local backend)

    Returns:
        Database implementation for the resolved backend
    """
    backend = resolve_backend(settings)
    logger.info("Using %s storage backend", backend)

    if backend == "remote":
        if not settings.supabase.configured:
            logger.warning("Remote storage selected but SUPABASE_URL/SUPABASE_ANON_KEY are not set")
        return create_supabase_database(settings.supabase.url, settings.supabase.anon_key)

    return create_sqlite_database(database_path=database_path or settings.app.db_path)
