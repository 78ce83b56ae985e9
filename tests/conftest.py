"""Shared pytest fixtures for burnrate tests."""

import os
import tempfile
from datetime import datetime, UTC
from decimal import Decimal
from pathlib import Path

import pytest

from burnrate.database.factories import create_sqlite_database
from burnrate.domain.document import DocumentService
from burnrate.domain.entities import FinancialSignal, FlowDirection, RecurringFrequency, SignalNature
from burnrate.domain.insights_service import InsightsService
from burnrate.domain.investment import InvestmentService
from burnrate.domain.signal import SignalService
from burnrate.domain.summary import SummaryService
from burnrate.domain.tax import TaxService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def signal_service(temp_db):
    """Create a SignalService with a temporary database."""
    return SignalService(temp_db)


@pytest.fixture
def document_service(temp_db):
    """Create a DocumentService with a temporary database."""
    return DocumentService(temp_db)


@pytest.fixture
def investment_service(temp_db):
    """Create an InvestmentService with a temporary database."""
    return InvestmentService(temp_db)


@pytest.fixture
def insights_service(temp_db):
    """Create an InsightsService with a temporary database."""
    return InsightsService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def tax_service(temp_db):
    """Create a TaxService with a temporary database."""
    return TaxService(temp_db)


def make_signal(
    merchant: str,
    date: str,
    amount: str = "100",
    flow: FlowDirection = FlowDirection.OUTFLOW,
    nature: SignalNature = SignalNature.FIXED_RECURRING,
    frequency: RecurringFrequency | None = None,
    category: str = "Uncategorized",
    signal_id: str | None = None,
) -> FinancialSignal:
    """Build an in-memory signal for pure-function tests."""
    return FinancialSignal(
        id=signal_id or f"{merchant}-{date}",
        date=date,
        amount=Decimal(amount),
        currency="USD",
        flow=flow,
        nature=nature,
        merchant=merchant,
        category=category,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        frequency=frequency,
    )


@pytest.fixture
def sample_signals(signal_service):
    """Store a salary, two subscriptions and a grocery run; return their IDs."""
    ids = {}
    ids["salary_1"] = signal_service.create_signal(
        date="2024-01-05", amount=Decimal("2500.00"), flow="inflow", nature="income_source",
        merchant="Acme Corp", category="Salary", frequency="bi-weekly",
    )
    ids["salary_2"] = signal_service.create_signal(
        date="2024-01-19", amount=Decimal("2500.00"), flow="inflow", nature="income_source",
        merchant="Acme Corp", category="Salary", frequency="bi-weekly",
    )
    ids["netflix"] = signal_service.create_signal(
        date="2024-01-08", amount=Decimal("22.99"), flow="outflow", nature="fixed_recurring",
        merchant="Netflix", category="Streaming", frequency="monthly",
    )
    ids["rent"] = signal_service.create_signal(
        date="2024-01-01", amount=Decimal("1800.00"), flow="outflow", nature="fixed_recurring",
        merchant="Landlord LLC", category="Housing",
    )
    ids["groceries"] = signal_service.create_signal(
        date="2024-01-12", amount=Decimal("84.20"), flow="outflow", nature="variable_estimate",
        merchant="Whole Foods", category="Groceries",
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_db_path(tmp_path):
    """Path to a fresh database file for CLI invocations."""
    return str(tmp_path / "cli.db")


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
