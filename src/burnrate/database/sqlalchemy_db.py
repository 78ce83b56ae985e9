"""Generic SQLAlchemy database implementation."""

import json
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from burnrate.database.base import Database
from burnrate.database.models import (
    Document,
    InvestmentAccount,
    Signal,
    TaxDocument,
    create_session_factory,
)
from burnrate.database.mappers import (
    apply_signal,
    document_to_domain,
    investment_account_to_domain,
    signal_to_domain,
    signal_to_orm,
    tax_document_to_domain,
)
from burnrate.domain.entities import (
    FinancialSignal as DomainSignal,
    InvestmentAccount as DomainInvestmentAccount,
    TaxDocument as DomainTaxDocument,
    UploadedDocument as DomainDocument,
)
from burnrate.domain.errors import (
    ConflictError,
    NotFoundError,
    document_not_found,
    duplicate_investment_account,
    investment_account_not_found,
    signal_not_found,
    tax_document_not_found,
)
from burnrate.logging import get_logger

logger = get_logger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    # Signal operations
    def add_signals(self, signals: Sequence[DomainSignal]) -> None:
        """Insert new signals."""
        session = self._get_session()
        session.add_all([signal_to_orm(signal) for signal in signals])
        session.commit()
        logger.debug("Stored %d signal(s)", len(signals))

    def get_signal(self, signal_id: str) -> Optional[DomainSignal]:
        """Get signal by ID."""
        session = self._get_session()
        signal = session.query(Signal).filter(Signal.id == signal_id).first()
        if signal is None:
            return None
        return signal_to_domain(signal)

    def list_signals(self) -> list[DomainSignal]:
        """List all signals in insertion order."""
        session = self._get_session()
        signals = session.query(Signal).order_by(Signal.created_at, Signal.id).all()
        return [signal_to_domain(s) for s in signals]

    def replace_signal(self, signal: DomainSignal) -> None:
        """Replace every field of an existing signal, matched by ID."""
        session = self._get_session()
        row = session.query(Signal).filter(Signal.id == signal.id).first()
        if row is None:
            raise NotFoundError(signal_not_found(signal.id))
        apply_signal(row, signal)
        session.commit()

    def delete_signal(self, signal_id: str) -> None:
        """Delete a signal."""
        session = self._get_session()
        row = session.query(Signal).filter(Signal.id == signal_id).first()
        if row is None:
            raise NotFoundError(signal_not_found(signal_id))
        session.delete(row)
        session.commit()

    def delete_all_signals(self) -> int:
        """Delete every signal. Returns the number removed."""
        session = self._get_session()
        count = session.query(Signal).delete()
        session.commit()
        return count

    # Document operations
    def add_document(
        self, document: DomainDocument, signals: Sequence[DomainSignal]
    ) -> None:
        """Insert a document together with the signals extracted from it."""
        session = self._get_session()
        session.add(
            Document(
                id=document.id,
                file_name=document.file_name,
                uploaded_at=document.uploaded_at,
                signal_count=document.signal_count,
            )
        )
        # Flush the parent row first so the foreign key is satisfied
        session.flush()
        session.add_all([signal_to_orm(signal) for signal in signals])
        session.commit()

    def get_document(self, document_id: str) -> Optional[DomainDocument]:
        """Get uploaded document by ID."""
        session = self._get_session()
        document = session.query(Document).filter(Document.id == document_id).first()
        if document is None:
            return None
        return document_to_domain(document)

    def list_documents(self) -> list[DomainDocument]:
        """List uploaded documents, newest first."""
        session = self._get_session()
        documents = session.query(Document).order_by(Document.uploaded_at.desc()).all()
        return [document_to_domain(d) for d in documents]

    def delete_document(self, document_id: str) -> int:
        """Delete a document and its signals. Returns the number of signals removed."""
        session = self._get_session()
        document = session.query(Document).filter(Document.id == document_id).first()
        if document is None:
            raise NotFoundError(document_not_found(document_id))

        removed = (
            session.query(Signal)
            .filter(Signal.source_doc_id == document_id)
            .delete(synchronize_session="fetch")
        )
        session.delete(document)
        session.commit()
        return removed

    # Investment account operations
    def create_investment_account(
        self,
        name: str,
        current_balance: Decimal,
        monthly_contribution: Decimal,
        annual_growth_rate: Decimal,
        signal_id: Optional[str] = None,
    ) -> int:
        """Create an investment account. Returns account ID."""
        session = self._get_session()
        existing = session.query(InvestmentAccount).filter(InvestmentAccount.name == name).first()
        if existing is not None:
            raise ConflictError(duplicate_investment_account(name))

        account = InvestmentAccount(
            name=name,
            current_balance=current_balance,
            monthly_contribution=monthly_contribution,
            annual_growth_rate=annual_growth_rate,
            signal_id=signal_id,
        )
        session.add(account)
        session.commit()
        return account.id

    def get_investment_account(self, account_id: int) -> Optional[DomainInvestmentAccount]:
        """Get investment account by ID."""
        session = self._get_session()
        account = session.query(InvestmentAccount).filter(InvestmentAccount.id == account_id).first()
        if account is None:
            return None
        return investment_account_to_domain(account)

    def get_investment_account_by_name(self, name: str) -> Optional[DomainInvestmentAccount]:
        """Get investment account by name."""
        session = self._get_session()
        account = session.query(InvestmentAccount).filter(InvestmentAccount.name == name).first()
        if account is None:
            return None
        return investment_account_to_domain(account)

    def list_investment_accounts(self) -> list[DomainInvestmentAccount]:
        """List investment accounts."""
        session = self._get_session()
        accounts = session.query(InvestmentAccount).order_by(InvestmentAccount.id).all()
        return [investment_account_to_domain(a) for a in accounts]

    def update_investment_account(self, account: DomainInvestmentAccount) -> None:
        """Replace every field of an existing investment account."""
        session = self._get_session()
        row = session.query(InvestmentAccount).filter(InvestmentAccount.id == account.id).first()
        if row is None:
            raise NotFoundError(investment_account_not_found(account.id))

        existing = (
            session.query(InvestmentAccount)
            .filter(InvestmentAccount.name == account.name, InvestmentAccount.id != account.id)
            .first()
        )
        if existing is not None:
            raise ConflictError(duplicate_investment_account(account.name))

        row.name = account.name
        row.current_balance = account.current_balance
        row.monthly_contribution = account.monthly_contribution
        row.annual_growth_rate = account.annual_growth_rate
        row.signal_id = account.signal_id
        session.commit()

    def delete_investment_account(self, account_id: int) -> None:
        """Delete an investment account."""
        session = self._get_session()
        row = session.query(InvestmentAccount).filter(InvestmentAccount.id == account_id).first()
        if row is None:
            raise NotFoundError(investment_account_not_found(account_id))
        session.delete(row)
        session.commit()

    # Tax document operations
    def create_tax_document(self, document: DomainTaxDocument) -> int:
        """Create a tax document. The ID on the entity is ignored. Returns new ID."""
        session = self._get_session()
        row = TaxDocument(
            file_name=document.file_name,
            doc_type=document.doc_type.value,
            tax_year=document.tax_year,
            uploaded_at=document.uploaded_at,
            entity_name=document.entity_name,
            gross_income=document.gross_income,
            federal_tax_withheld=document.federal_tax_withheld,
            social_security_tax=document.social_security_tax,
            medicare_tax=document.medicare_tax,
            state_tax_withheld=document.state_tax_withheld,
            state=document.state,
            property_tax_amount=document.property_tax_amount,
            insights=json.dumps(list(document.insights)),
        )
        session.add(row)
        session.commit()
        return row.id

    def get_tax_document(self, document_id: int) -> Optional[DomainTaxDocument]:
        """Get tax document by ID."""
        session = self._get_session()
        row = session.query(TaxDocument).filter(TaxDocument.id == document_id).first()
        if row is None:
            return None
        return tax_document_to_domain(row)

    def list_tax_documents(self) -> list[DomainTaxDocument]:
        """List tax documents, newest first."""
        session = self._get_session()
        rows = (
            session.query(TaxDocument)
            .order_by(TaxDocument.uploaded_at.desc(), TaxDocument.id.desc())
            .all()
        )
        return [tax_document_to_domain(r) for r in rows]

    def delete_tax_document(self, document_id: int) -> None:
        """Delete a tax document."""
        session = self._get_session()
        row = session.query(TaxDocument).filter(TaxDocument.id == document_id).first()
        if row is None:
            raise NotFoundError(tax_document_not_found(document_id))
        session.delete(row)
        session.commit()
