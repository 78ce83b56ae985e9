"""Uploaded document domain service."""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from typing import Any, Iterable, Optional

from burnrate.config import ExtractionSettings
from burnrate.database.base import Database
from burnrate.domain.entities import FinancialSignal, UploadedDocument
from burnrate.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    document_not_found,
)
from burnrate.domain.extraction import RejectedRow, validate_signal_payload
from burnrate.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing one extracted document.

    A preview carries the document and signals that would be stored; after
    saving, ``document.signal_count`` matches what was written.
    """

    document: UploadedDocument
    signals: tuple[FinancialSignal, ...]
    rejected: tuple[RejectedRow, ...]

    def keep(self, signal_ids: Iterable[str]) -> "ImportResult":
        """Copy of this result holding only the given signals."""
        wanted = set(signal_ids)
        signals = tuple(s for s in self.signals if s.id in wanted)
        return replace(
            self,
            document=replace(self.document, signal_count=len(signals)),
            signals=signals,
        )


class DocumentService:
    """Service for importing extracted documents and their signals."""

    def __init__(self, db: Database, settings: Optional[ExtractionSettings] = None):
        """Initialize document service.

        Args:
            db: Database instance
            settings: Extraction settings (defaults apply when None)
        """
        self.db = db
        self.settings = settings or ExtractionSettings()

    def import_document(self, file_name: str, payload: Any) -> ImportResult:
        """Validate an extraction payload and store it with its signals.

        Args:
            file_name: Name of the source file
            payload: Decoded extraction JSON (``{"signals": [...]}``)

        Returns:
            ImportResult with the stored document and any rejected rows

        Raises:
            ValidationError: If the payload itself is malformed
        """
        return self.save_preview(self.preview_document(file_name, payload))

    def preview_document(self, file_name: str, payload: Any) -> ImportResult:
        """Validate an extraction payload without storing anything.

        Raises:
            ValidationError: If the payload itself is malformed
        """
        document_id = str(uuid.uuid4())
        extraction = validate_signal_payload(payload, self.settings, source_doc_id=document_id)

        document = UploadedDocument(
            id=document_id,
            file_name=file_name,
            uploaded_at=datetime.now(UTC),
            signal_count=len(extraction.signals),
        )
        return ImportResult(
            document=document, signals=extraction.signals, rejected=extraction.rejected
        )

    def save_preview(self, preview: ImportResult) -> ImportResult:
        """Store a previewed document with the signals it still holds.

        Raises:
            ValidationError: If a signal does not belong to the previewed document
            ConflictError: If the preview was already saved
        """
        document = preview.document
        if self.db.get_document(document.id) is not None:
            raise ConflictError(f"Document {document.id} was already imported")
        if any(s.source_doc_id != document.id for s in preview.signals):
            raise ValidationError(f"Signals do not belong to document {document.id}")
        if document.signal_count != len(preview.signals):
            document = replace(document, signal_count=len(preview.signals))

        self.db.add_document(document, preview.signals)
        logger.info(
            "Imported %d signal(s) from '%s' (%d rejected)",
            len(preview.signals),
            document.file_name,
            len(preview.rejected),
        )
        return replace(preview, document=document)


    def get_document(self, document_id: str) -> Optional[UploadedDocument]:
        """Get document by ID, or None if not found."""
        return self.db.get_document(document_id)

    def list_documents(self) -> list[UploadedDocument]:
        """List uploaded documents, newest first."""
        return self.db.list_documents()

    def delete_document(self, document_id: str) -> int:
        """Delete a document and every signal extracted from it.

        Returns:
            Number of signals removed

        Raises:
            NotFoundError: If the document does not exist
        """
        if self.db.get_document(document_id) is None:
            raise NotFoundError(document_not_found(document_id))
        removed = self.db.delete_document(document_id)
        logger.info("Deleted document %s and %d signal(s)", document_id, removed)
        return removed
