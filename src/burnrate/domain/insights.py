"""Recurring income and fixed-cost inference.

Signals are grouped by merchant, each group is ordered newest first, the
recurrence interval is estimated from the gaps between consecutive dates, and
the most recent amount is converted to a monthly figure. The functions here
are pure: they never touch storage and never mutate the signals they read, so
callers simply call them again whenever the signal set changes.
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from burnrate.domain.entities import (
    DisposableIncomeSummary,
    FinancialSignal,
    FlowDirection,
    RecurringEntity,
    RecurringFrequency,
    SignalNature,
    UNKNOWN_FREQUENCY,
)
from burnrate.logging import get_logger
from burnrate.utils.date_parser import days_between, parse_signal_date

logger = get_logger(__name__)

# Inclusive average-gap ranges, in days, checked in this order.
GAP_RANGES: tuple[tuple[float, float, RecurringFrequency], ...] = (
    (25, 35, RecurringFrequency.MONTHLY),
    (12, 16, RecurringFrequency.BI_WEEKLY),
    (6, 8, RecurringFrequency.WEEKLY),
)


def merchant_key(merchant: str) -> str:
    """Grouping key for a merchant name."""
    return merchant.lower().strip()


def signal_sort_key(signal: FinancialSignal) -> tuple[int, int]:
    """Sort key putting the newest signal first and unreadable dates last."""
    parsed = parse_signal_date(signal.date)
    if parsed is None:
        return (1, 0)
    return (0, -parsed.toordinal())


def sort_newest_first(signals: Iterable[FinancialSignal]) -> list[FinancialSignal]:
    """Return signals ordered by date descending.

    The sort is stable, so signals sharing a date (or sharing an unreadable
    date) keep their input order.
    """
    return sorted(signals, key=signal_sort_key)


def group_by_merchant(signals: Iterable[FinancialSignal]) -> list[list[FinancialSignal]]:
    """Partition signals by normalized merchant, each group newest first."""
    groups: dict[str, list[FinancialSignal]] = {}
    for signal in signals:
        groups.setdefault(merchant_key(signal.merchant), []).append(signal)
    return [sort_newest_first(group) for group in groups.values()]


def average_gap_days(group: Sequence[FinancialSignal]) -> Optional[float]:
    """Mean day gap between temporally adjacent signals of a sorted group.

    Returns None for fewer than two signals, or when any date in the group
    cannot be read.
    """
    if len(group) < 2:
        return None

    dates = [parse_signal_date(signal.date) for signal in group]
    if any(d is None for d in dates):
        return None

    total = sum(days_between(newer, older) for newer, older in zip(dates, dates[1:]))
    return total / (len(dates) - 1)


def classify_gap(average_gap: Optional[float]) -> Optional[RecurringFrequency]:
    """Map an average gap to a frequency, or None when no range matches."""
    if average_gap is None:
        return None
    for low, high, frequency in GAP_RANGES:
        if low <= average_gap <= high:
            return frequency
    return None


def infer_frequency(group: Sequence[FinancialSignal]) -> str:
    """Best-estimate recurrence interval for a newest-first merchant group.

    A lone signal keeps its declared frequency and is otherwise assumed to be
    monthly; that assumption is a heuristic, not something the data shows.
    Larger groups are classified by their average gap and fall back to the
    newest signal's declared frequency when the gap matches no range.
    """
    latest = group[0]
    declared = latest.frequency.value if latest.frequency is not None else None

    if len(group) == 1:
        return declared or RecurringFrequency.MONTHLY.value

    inferred = classify_gap(average_gap_days(group))
    if inferred is not None:
        return inferred.value
    return declared or UNKNOWN_FREQUENCY


def normalize_recurring_amount(amount: Decimal, frequency: str) -> Decimal:
    """Monthly equivalent of a group's most recent amount.

    Only bi-weekly, weekly and annual are converted. Daily, quarterly,
    semi-annual and unknown pass through unchanged, unlike the per-signal
    conversion in ``burnrate.domain.normalization``.
    """
    if frequency == RecurringFrequency.BI_WEEKLY:
        return amount * 2
    if frequency == RecurringFrequency.WEEKLY:
        return amount * 4
    if frequency == RecurringFrequency.ANNUAL:
        return amount / 12
    return amount


def infer_recurrence(group: Sequence[FinancialSignal]) -> RecurringEntity:
    """Build the recurring entity for one newest-first merchant group."""
    latest = group[0]
    frequency = infer_frequency(group)
    entity = RecurringEntity(
        merchant=latest.merchant,
        amount=normalize_recurring_amount(latest.amount, frequency),
        frequency=frequency,
        last_date=latest.date,
    )
    logger.debug(
        "Inferred %s for '%s' from %d signal(s)", frequency, latest.merchant, len(group)
    )
    return entity


def group_and_normalize(signals: Iterable[FinancialSignal]) -> list[RecurringEntity]:
    """Group signals by merchant and produce one monthly entity per group."""
    return [infer_recurrence(group) for group in group_by_merchant(signals)]


def calculate_monthly_income(signals: Iterable[FinancialSignal]) -> list[RecurringEntity]:
    """Recurring income from inflow signals marked as an income source."""
    income_signals = [
        s
        for s in signals
        if s.flow == FlowDirection.INFLOW and s.nature == SignalNature.INCOME_SOURCE
    ]
    return group_and_normalize(income_signals)


def calculate_recurring_expenses(signals: Iterable[FinancialSignal]) -> list[RecurringEntity]:
    """Recurring fixed costs from outflow signals marked fixed recurring."""
    expense_signals = [
        s
        for s in signals
        if s.flow == FlowDirection.OUTFLOW and s.nature == SignalNature.FIXED_RECURRING
    ]
    return group_and_normalize(expense_signals)


def calculate_disposable_income(
    income: Sequence[RecurringEntity], expenses: Sequence[RecurringEntity]
) -> DisposableIncomeSummary:
    """Total recurring income minus total recurring fixed costs."""
    total_income = sum((entity.amount for entity in income), Decimal("0"))
    total_fixed_costs = sum((entity.amount for entity in expenses), Decimal("0"))
    return DisposableIncomeSummary(
        total_income=total_income,
        total_fixed_costs=total_fixed_costs,
        disposable_income=total_income - total_fixed_costs,
        recurring_income=tuple(income),
        recurring_expenses=tuple(expenses),
    )


def build_monthly_insights(signals: Sequence[FinancialSignal]) -> DisposableIncomeSummary:
    """Full recurring-income summary for a set of signals."""
    return calculate_disposable_income(
        calculate_monthly_income(signals),
        calculate_recurring_expenses(signals),
    )
