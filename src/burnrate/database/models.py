"""SQLAlchemy models for burnrate database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Document(Base):
    """Uploaded document model."""

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True)
    file_name = Column(String, nullable=False)
    uploaded_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    signal_count = Column(Integer, default=0, nullable=False)

    # Signals are removed explicitly when a document is deleted
    signals = relationship("Signal", back_populates="document")


class Signal(Base):
    """Financial signal model."""

    __tablename__ = "signals"

    id = Column(String(36), primary_key=True)
    # Kept as text: extracted dates are not guaranteed to parse
    date = Column(String, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(8), nullable=False)
    flow = Column(String(16), nullable=False, index=True)
    nature = Column(String(32), nullable=False, index=True)
    frequency = Column(String(16), nullable=True)
    merchant = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)
    source_doc_id = Column(String(36), ForeignKey("documents.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    document = relationship("Document", back_populates="signals")


class InvestmentAccount(Base):
    """Investment account model."""

    __tablename__ = "investment_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    current_balance = Column(Numeric(16, 2), nullable=False, default=0)
    monthly_contribution = Column(Numeric(14, 2), nullable=False, default=0)
    annual_growth_rate = Column(Numeric(7, 3), nullable=False, default=0)
    # Loose link to the companion signal, maintained by the investment service
    signal_id = Column(String(36), nullable=True)


class TaxDocument(Base):
    """Tax document model with extracted figures."""

    __tablename__ = "tax_documents"

    id = Column(Integer, primary_key=True)
    file_name = Column(String, nullable=False)
    doc_type = Column(String(16), nullable=False, index=True)
    tax_year = Column(String(4), nullable=False, index=True)
    uploaded_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    entity_name = Column(String, nullable=True)
    gross_income = Column(Numeric(16, 2), nullable=True)
    federal_tax_withheld = Column(Numeric(14, 2), nullable=True)
    social_security_tax = Column(Numeric(14, 2), nullable=True)
    medicare_tax = Column(Numeric(14, 2), nullable=True)
    state_tax_withheld = Column(Numeric(14, 2), nullable=True)
    state = Column(String(8), nullable=True)
    property_tax_amount = Column(Numeric(14, 2), nullable=True)
    # JSON encoded list of strings
    insights = Column(Text, nullable=False, default="[]")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
