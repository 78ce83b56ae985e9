"""Per-signal monthly conversion used when displaying individual signals."""

from decimal import Decimal
from typing import Optional, Union

from burnrate.domain.entities import FinancialSignal, RecurringFrequency

# Occurrences per year for each frequency.
OCCURRENCES_PER_YEAR: dict[str, int] = {
    RecurringFrequency.DAILY.value: 365,
    RecurringFrequency.WEEKLY.value: 52,
    RecurringFrequency.BI_WEEKLY.value: 26,
    RecurringFrequency.MONTHLY.value: 12,
    RecurringFrequency.QUARTERLY.value: 4,
    RecurringFrequency.SEMI_ANNUAL.value: 2,
    RecurringFrequency.ANNUAL.value: 1,
}


def monthly_equivalent(
    amount: Decimal, frequency: Optional[Union[RecurringFrequency, str]]
) -> Decimal:
    """Convert an amount paid at ``frequency`` into a per-month amount.

    A missing or unrecognized frequency leaves the amount unchanged.
    """
    if frequency is None:
        return amount

    key = frequency.value if isinstance(frequency, RecurringFrequency) else str(frequency)
    occurrences = OCCURRENCES_PER_YEAR.get(key)
    if occurrences is None or occurrences == 12:
        return amount
    return amount * occurrences / 12


def signal_monthly_amount(signal: FinancialSignal) -> Decimal:
    """Monthly equivalent of a signal based on its own declared frequency."""
    return monthly_equivalent(signal.amount, signal.frequency)
