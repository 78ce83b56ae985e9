"""Validation of document-extraction output.

The vision model that reads statements and tax forms returns loosely shaped
JSON. Everything it produces passes through here and comes out either as
typed domain values with documented defaults, or as a ValidationError; nothing
unchecked reaches the signal store.
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from burnrate.config import ExtractionSettings
from burnrate.domain.entities import (
    FinancialSignal,
    RecurringFrequency,
    TaxDocumentType,
)
from burnrate.domain.errors import ValidationError
from burnrate.domain.signal import build_signal
from burnrate.logging import get_logger
from burnrate.utils.amount_parser import parse_amount, parse_magnitude

logger = get_logger(__name__)

DEFAULT_MERCHANT = "Unknown"
DEFAULT_CATEGORY = "Uncategorized"

TAX_AMOUNT_FIELDS = (
    "grossIncome",
    "federalTaxWithheld",
    "socialSecurityTax",
    "medicareTax",
    "stateTaxWithheld",
    "propertyTaxAmount",
)


@dataclass(frozen=True)
class RejectedRow:
    """A signal row that failed validation."""

    index: int
    reason: str


@dataclass(frozen=True)
class SignalExtraction:
    """Validated signals plus the rows that were dropped."""

    signals: tuple[FinancialSignal, ...]
    rejected: tuple[RejectedRow, ...]


@dataclass(frozen=True)
class TaxExtraction:
    """Validated tax document fields."""

    doc_type: TaxDocumentType
    tax_year: str
    entity_name: Optional[str]
    amounts: dict[str, Optional[Decimal]]
    state: Optional[str]
    insights: tuple[str, ...]


def parse_model_response(raw_content: str) -> dict[str, Any]:
    """Pull the JSON object out of a model reply.

    Replies sometimes wrap the object in prose or markdown fences, so the text
    between the first ``{`` and the last ``}`` is decoded.

    Raises:
        ValidationError: If no JSON object can be found or decoded
    """
    first = raw_content.find("{")
    last = raw_content.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise ValidationError("No JSON object found in response")

    try:
        payload = json.loads(raw_content[first : last + 1])
    except json.JSONDecodeError as e:
        raise ValidationError(f"Malformed JSON in response: {e}")

    if not isinstance(payload, dict):
        raise ValidationError("Response JSON is not an object")
    return payload


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _optional_frequency(value: Any) -> Optional[RecurringFrequency]:
    if not value:
        return None
    try:
        return RecurringFrequency(str(value).strip().lower())
    except ValueError:
        logger.debug("Dropping unrecognized frequency '%s'", value)
        return None


def validate_signal_row(
    row: Any,
    settings: ExtractionSettings,
    source_doc_id: Optional[str] = None,
) -> FinancialSignal:
    """Validate one extracted signal row.

    Raises:
        ValidationError: If the row is not an object, its amount is not a
            number, or its flow or nature is not recognized
    """
    if not isinstance(row, dict):
        raise ValidationError("Signal row is not an object")

    if row.get("amount") is None:
        raise ValidationError("Signal row has no amount")
    try:
        amount = parse_magnitude(row["amount"])
    except ValueError as e:
        raise ValidationError(str(e))

    return build_signal(
        date=_text(row.get("date"), ""),
        amount=amount,
        flow=_text(row.get("flow"), ""),
        nature=_text(row.get("nature"), ""),
        merchant=_text(row.get("merchant"), DEFAULT_MERCHANT),
        category=_text(row.get("category"), DEFAULT_CATEGORY),
        currency=_text(row.get("currency"), settings.default_currency).upper(),
        frequency=_optional_frequency(row.get("frequency")),
        source_doc_id=source_doc_id,
    )


def validate_signal_payload(
    payload: Any,
    settings: Optional[ExtractionSettings] = None,
    source_doc_id: Optional[str] = None,
) -> SignalExtraction:
    """Validate a ``{"signals": [...]}`` extraction result.

    Invalid rows are skipped and reported rather than failing the whole
    document.

    Raises:
        ValidationError: If the payload is not an object with a signals list
    """
    settings = settings or ExtractionSettings()
    if not isinstance(payload, dict):
        raise ValidationError("Extraction payload is not an object")

    rows = payload.get("signals", [])
    if not isinstance(rows, list):
        raise ValidationError("Extraction payload 'signals' is not a list")

    signals: list[FinancialSignal] = []
    rejected: list[RejectedRow] = []
    for index, row in enumerate(rows):
        try:
            signals.append(validate_signal_row(row, settings, source_doc_id))
        except ValidationError as e:
            logger.warning("Skipping extracted row %d: %s", index, e)
            rejected.append(RejectedRow(index=index, reason=str(e)))

    return SignalExtraction(signals=tuple(signals), rejected=tuple(rejected))


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return parse_amount(value)
    except ValueError:
        return None


def validate_tax_payload(
    payload: Any, settings: Optional[ExtractionSettings] = None
) -> TaxExtraction:
    """Validate a tax-document extraction result.

    Unknown document types become ``other``, a missing tax year becomes the
    configured default, and unreadable figures become None.

    Raises:
        ValidationError: If the payload is not an object
    """
    settings = settings or ExtractionSettings()
    if not isinstance(payload, dict):
        raise ValidationError("Tax extraction payload is not an object")

    try:
        doc_type = TaxDocumentType(str(payload.get("docType") or "other").strip().lower())
    except ValueError:
        doc_type = TaxDocumentType.OTHER

    data = payload.get("data")
    if not isinstance(data, dict):
        data = {}

    insights = payload.get("insights")
    if not isinstance(insights, list):
        insights = []

    state = data.get("state")
    entity_name = payload.get("entityName")

    return TaxExtraction(
        doc_type=doc_type,
        tax_year=_text(payload.get("taxYear"), settings.default_tax_year),
        entity_name=str(entity_name).strip() if entity_name else None,
        amounts={name: _optional_amount(data.get(name)) for name in TAX_AMOUNT_FIELDS},
        state=str(state).strip().upper() if state else None,
        insights=tuple(str(item) for item in insights if item),
    )
