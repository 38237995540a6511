"""Shared pytest fixtures for finnexus tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from finnexus.config import get_settings
from finnexus.database.factories import create_sqlite_database
from finnexus.domain.entities import (
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from finnexus.domain.summary import SummaryService
from finnexus.domain.tax import TaxSettingService
from finnexus.domain.transaction import TransactionService

SETTINGS_ENV_PREFIXES = ("FINNEXUS_", "SUPABASE_", "AI_")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep settings independent of the developer's environment and .env file."""
    for name in list(os.environ):
        if name.startswith(SETTINGS_ENV_PREFIXES) or name == "OPENAI_API_KEY":
            monkeypatch.delenv(name, raising=False)
    # .env is resolved relative to the working directory
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def tax_service(temp_db):
    """Create a TaxSettingService with a temporary database."""
    return TaxSettingService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def make_transaction():
    """Factory for in-memory transactions used by engine tests."""
    counter = {"n": 0}

    def _make(
        amount,
        type=TransactionType.INCOME,
        status=TransactionStatus.COMPLETED,
        txn_date=date(2024, 3, 15),
        category=TransactionCategory.SALES,
        **extra,
    ):
        counter["n"] += 1
        return Transaction(
            id=extra.pop("id", f"t{counter['n']}"),
            date=txn_date,
            description=extra.pop("description", f"Transaction {counter['n']}"),
            amount=Decimal(str(amount)),
            type=type,
            category=category,
            status=status,
            **extra,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
