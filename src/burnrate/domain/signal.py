"""Financial signal domain service."""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Optional, TypeVar, Union

from burnrate.database.base import Database
from burnrate.domain.entities import (
    FinancialSignal,
    FlowDirection,
    RecurringFrequency,
    SignalNature,
)
from burnrate.domain.errors import (
    NotFoundError,
    ValidationError,
    invalid_choice,
    negative_amount,
    signal_not_found,
)
from burnrate.domain.insights import sort_newest_first
from burnrate.domain.normalization import signal_monthly_amount
from burnrate.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)


def coerce_choice(enum_cls: type[E], value: Union[E, str], field_name: str) -> E:
    """Convert a string to an enum member.

    Raises:
        ValidationError: If the value is not a member of the enumeration
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        choices = [member.value for member in enum_cls]
        raise ValidationError(invalid_choice(field_name, value, choices))


def build_signal(
    date: str,
    amount: Decimal,
    flow: Union[FlowDirection, str],
    nature: Union[SignalNature, str],
    merchant: str,
    category: str,
    currency: str = "USD",
    frequency: Optional[Union[RecurringFrequency, str]] = None,
    source_doc_id: Optional[str] = None,
    signal_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> FinancialSignal:
    """Validate fields and build a signal entity.

    A new ID and creation time are assigned unless given.

    Raises:
        ValidationError: If amount is negative or an enumeration value is invalid
    """
    if amount < 0:
        raise ValidationError(negative_amount("Signal amount", amount))

    return FinancialSignal(
        id=signal_id or str(uuid.uuid4()),
        date=date,
        amount=amount,
        currency=currency,
        flow=coerce_choice(FlowDirection, flow, "flow"),
        nature=coerce_choice(SignalNature, nature, "nature"),
        frequency=(
            coerce_choice(RecurringFrequency, frequency, "frequency")
            if frequency
            else None
        ),
        merchant=merchant,
        category=category,
        source_doc_id=source_doc_id,
        created_at=created_at or datetime.now(UTC),
    )


class SignalService:
    """Service for managing financial signals."""

    def __init__(self, db: Database):
        """Initialize signal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_signal(
        self,
        date: str,
        amount: Decimal,
        flow: Union[FlowDirection, str],
        nature: Union[SignalNature, str],
        merchant: str,
        category: str,
        currency: str = "USD",
        frequency: Optional[Union[RecurringFrequency, str]] = None,
        source_doc_id: Optional[str] = None,
    ) -> str:
        """Create a signal by manual entry.

        Returns:
            Signal ID

        Raises:
            ValidationError: If amount is negative or an enumeration value is invalid
        """
        signal = build_signal(
            date=date,
            amount=amount,
            flow=flow,
            nature=nature,
            merchant=merchant,
            category=category,
            currency=currency,
            frequency=frequency,
            source_doc_id=source_doc_id,
        )
        self.db.add_signals([signal])
        logger.info("Created signal %s for '%s'", signal.id, merchant)
        return signal.id

    def get_signal(self, signal_id: str) -> Optional[FinancialSignal]:
        """Get signal by ID, or None if not found."""
        return self.db.get_signal(signal_id)

    def require_signal(self, signal_id: str) -> FinancialSignal:
        """Get signal by ID.

        Raises:
            NotFoundError: If the signal does not exist
        """
        signal = self.db.get_signal(signal_id)
        if signal is None:
            raise NotFoundError(signal_not_found(signal_id))
        return signal

    def list_signals(
        self, search: Optional[str] = None, recurring_only: bool = False
    ) -> list[FinancialSignal]:
        """List signals newest first, unreadable dates last.

        Args:
            search: Case-insensitive text matched against merchant or category
            recurring_only: If True, only return signals with a declared frequency
        """
        signals = self.db.list_signals()

        if search:
            needle = search.lower()
            signals = [
                s
                for s in signals
                if needle in s.merchant.lower() or needle in s.category.lower()
            ]
        if recurring_only:
            signals = [s for s in signals if s.frequency is not None]

        return sort_newest_first(signals)

    def replace_signal(self, signal: FinancialSignal) -> None:
        """Replace a stored signal with an edited version of itself.

        Raises:
            NotFoundError: If no signal with that ID exists
            ValidationError: If the edited amount is negative
        """
        if signal.amount < 0:
            raise ValidationError(negative_amount("Signal amount", signal.amount))
        self.require_signal(signal.id)
        self.db.replace_signal(signal)
        logger.info("Replaced signal %s", signal.id)

    def delete_signal(self, signal_id: str) -> None:
        """Delete a signal.

        Raises:
            NotFoundError: If the signal does not exist
        """
        self.require_signal(signal_id)
        self.db.delete_signal(signal_id)

    def delete_all_signals(self) -> int:
        """Delete every signal. Returns the number removed."""
        removed = self.db.delete_all_signals()
        logger.info("Deleted %d signal(s)", removed)
        return removed

    def monthly_amount(self, signal: FinancialSignal) -> Decimal:
        """Monthly equivalent of a signal based on its own frequency."""
        return signal_monthly_amount(signal)
