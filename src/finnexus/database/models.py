"""SQLAlchemy models for the local finnexus database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, index=True)
    notes = Column(String, nullable=True)
    employee_name = Column(String, nullable=True)
    commission_rate = Column(Numeric(5, 2), nullable=True)
    commission_amount = Column(Numeric(12, 2), nullable=True)
    commission_payment_date = Column(Date, nullable=True)
    pending_amount = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class TaxSetting(Base):
    """Tax setting model."""

    __tablename__ = "tax_settings"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    percentage = Column(Numeric(6, 3), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
