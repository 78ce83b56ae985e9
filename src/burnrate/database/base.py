"""Abstract database interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from burnrate.domain.entities import (
    FinancialSignal,
    InvestmentAccount,
    TaxDocument,
    UploadedDocument,
)


class Database(ABC):
    """Abstract database interface for burnrate."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Signal operations
    @abstractmethod
    def add_signals(self, signals: Sequence[FinancialSignal]) -> None:
        """Insert new signals."""
        pass

    @abstractmethod
    def get_signal(self, signal_id: str) -> Optional[FinancialSignal]:
        """Get signal by ID."""
        pass

    @abstractmethod
    def list_signals(self) -> list[FinancialSignal]:
        """List all signals in insertion order."""
        pass

    @abstractmethod
    def replace_signal(self, signal: FinancialSignal) -> None:
        """Replace every field of an existing signal, matched by ID."""
        pass

    @abstractmethod
    def delete_signal(self, signal_id: str) -> None:
        """Delete a signal."""
        pass

    @abstractmethod
    def delete_all_signals(self) -> int:
        """Delete every signal. Returns the number removed."""
        pass

    # Document operations
    @abstractmethod
    def add_document(
        self, document: UploadedDocument, signals: Sequence[FinancialSignal]
    ) -> None:
        """Insert a document together with the signals extracted from it."""
        pass

    @abstractmethod
    def get_document(self, document_id: str) -> Optional[UploadedDocument]:
        """Get uploaded document by ID."""
        pass

    @abstractmethod
    def list_documents(self) -> list[UploadedDocument]:
        """List uploaded documents, newest first."""
        pass

    @abstractmethod
    def delete_document(self, document_id: str) -> int:
        """Delete a document and its signals. Returns the number of signals removed."""
        pass

    # Investment account operations
    @abstractmethod
    def create_investment_account(
        self,
        name: str,
        current_balance: Decimal,
        monthly_contribution: Decimal,
        annual_growth_rate: Decimal,
        signal_id: Optional[str] = None,
    ) -> int:
        """Create an investment account. Returns account ID."""
        pass

    @abstractmethod
    def get_investment_account(self, account_id: int) -> Optional[InvestmentAccount]:
        """Get investment account by ID."""
        pass

    @abstractmethod
    def get_investment_account_by_name(self, name: str) -> Optional[InvestmentAccount]:
        """Get investment account by name."""
        pass

    @abstractmethod
    def list_investment_accounts(self) -> list[InvestmentAccount]:
        """List investment accounts."""
        pass

    @abstractmethod
    def update_investment_account(self, account: InvestmentAccount) -> None:
        """Replace every field of an existing investment account."""
        pass

    @abstractmethod
    def delete_investment_account(self, account_id: int) -> None:
        """Delete an investment account."""
        pass

    # Tax document operations
    @abstractmethod
    def create_tax_document(self, document: TaxDocument) -> int:
        """Create a tax document. The ID on the entity is ignored. Returns new ID."""
        pass

    @abstractmethod
    def get_tax_document(self, document_id: int) -> Optional[TaxDocument]:
        """Get tax document by ID."""
        pass

    @abstractmethod
    def list_tax_documents(self) -> list[TaxDocument]:
        """List tax documents, newest first."""
        pass

    @abstractmethod
    def delete_tax_document(self, document_id: int) -> None:
        """Delete a tax document."""
        pass
