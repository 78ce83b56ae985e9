"""Tax document domain service and deduction estimates.

The estimates are rough illustrations for planning conversations; they use
fixed figures and ignore nearly every real-world rule.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from burnrate.config import ExtractionSettings
from burnrate.database.base import Database
from burnrate.domain.entities import (
    FilingStatus,
    TaxDocument,
    TaxStrategyEstimate,
    TaxSummary,
)
from burnrate.domain.errors import (
    NotFoundError,
    ValidationError,
    negative_amount,
    tax_document_not_found,
)
from burnrate.domain.extraction import validate_tax_payload
from burnrate.domain.signal import coerce_choice
from burnrate.logging import get_logger

logger = get_logger(__name__)

STANDARD_DEDUCTION = {
    FilingStatus.SINGLE: Decimal("14600"),
    FilingStatus.JOINT: Decimal("29200"),
}
DEFAULT_SALT_CAP = Decimal("40000")
CHILD_TAX_CREDIT_PER_CHILD = Decimal("2000")
CHILD_CARE_CREDIT_RATE = Decimal("0.20")

ZERO = Decimal("0")


def summarize_tax_documents(documents: Sequence[TaxDocument]) -> TaxSummary:
    """Total the extracted income and tax figures; missing figures count as zero."""
    return TaxSummary(
        gross_income=sum((d.gross_income or ZERO for d in documents), ZERO),
        federal_tax=sum((d.federal_tax_withheld or ZERO for d in documents), ZERO),
        state_tax=sum((d.state_tax_withheld or ZERO for d in documents), ZERO),
        property_tax=sum((d.property_tax_amount or ZERO for d in documents), ZERO),
    )


def estimate_tax_strategy(
    summary: TaxSummary,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    salt_cap: Decimal = DEFAULT_SALT_CAP,
    num_children: int = 0,
    child_care_expenses: Decimal = ZERO,
) -> TaxStrategyEstimate:
    """Compare capped SALT against the standard deduction and estimate credits.

    Raises:
        ValidationError: If a count or amount is negative
    """
    status = coerce_choice(FilingStatus, filing_status, "filing status")
    if num_children < 0:
        raise ValidationError(negative_amount("Number of children", num_children))
    if child_care_expenses < 0:
        raise ValidationError(negative_amount("Child care expenses", child_care_expenses))
    if salt_cap < 0:
        raise ValidationError(negative_amount("SALT cap", salt_cap))

    standard_deduction = STANDARD_DEDUCTION[status]
    total_salt = summary.state_tax + summary.property_tax
    deductible_salt = min(total_salt, salt_cap)

    return TaxStrategyEstimate(
        filing_status=status,
        standard_deduction=standard_deduction,
        total_state_and_local_tax=total_salt,
        deductible_salt=deductible_salt,
        itemizing_better=deductible_salt > standard_deduction,
        child_tax_credit=CHILD_TAX_CREDIT_PER_CHILD * num_children,
        child_care_credit=child_care_expenses * CHILD_CARE_CREDIT_RATE,
    )


class TaxService:
    """Service for managing tax documents."""

    def __init__(self, db: Database, settings: Optional[ExtractionSettings] = None):
        """Initialize tax service.

        Args:
            db: Database instance
            settings: Extraction settings (defaults apply when None)
        """
        self.db = db
        self.settings = settings or ExtractionSettings()

    def import_tax_document(self, file_name: str, payload: Any) -> int:
        """Validate a tax extraction payload and store it.

        Returns:
            Tax document ID

        Raises:
            ValidationError: If the payload is not an object
        """
        extraction = validate_tax_payload(payload, self.settings)
        amounts = extraction.amounts
        document = TaxDocument(
            id=0,
            file_name=file_name,
            doc_type=extraction.doc_type,
            tax_year=extraction.tax_year,
            uploaded_at=datetime.now(UTC),
            entity_name=extraction.entity_name,
            gross_income=amounts["grossIncome"],
            federal_tax_withheld=amounts["federalTaxWithheld"],
            social_security_tax=amounts["socialSecurityTax"],
            medicare_tax=amounts["medicareTax"],
            state_tax_withheld=amounts["stateTaxWithheld"],
            state=extraction.state,
            property_tax_amount=amounts["propertyTaxAmount"],
            insights=extraction.insights,
        )
        document_id = self.db.create_tax_document(document)
        logger.info(
            "Imported %s tax document '%s' for %s",
            extraction.doc_type.value,
            file_name,
            extraction.tax_year,
        )
        return document_id

    def get_tax_document(self, document_id: int) -> Optional[TaxDocument]:
        """Get tax document by ID, or None if not found."""
        return self.db.get_tax_document(document_id)

    def list_tax_documents(self) -> list[TaxDocument]:
        """List tax documents, newest first."""
        return self.db.list_tax_documents()

    def delete_tax_document(self, document_id: int) -> None:
        """Delete a tax document.

        Raises:
            NotFoundError: If the document does not exist
        """
        if self.db.get_tax_document(document_id) is None:
            raise NotFoundError(tax_document_not_found(document_id))
        self.db.delete_tax_document(document_id)

    def summarize(self) -> TaxSummary:
        """Totals across all stored tax documents."""
        return summarize_tax_documents(self.db.list_tax_documents())

    def estimate_strategy(
        self,
        filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
        salt_cap: Decimal = DEFAULT_SALT_CAP,
        num_children: int = 0,
        child_care_expenses: Decimal = ZERO,
    ) -> TaxStrategyEstimate:
        """Deduction and credit estimate from the stored tax documents."""
        return estimate_tax_strategy(
            self.summarize(),
            filing_status=filing_status,
            salt_cap=salt_cap,
            num_children=num_children,
            child_care_expenses=child_care_expenses,
        )
