"""Signal summary grouping domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional, Sequence, Union

from burnrate.database.base import Database
from burnrate.domain.entities import (
    FinancialSignal,
    FlowDirection,
    MonthlyTrend,
    SignalGroupSummary,
)
from burnrate.domain.errors import ValidationError
from burnrate.domain.signal import coerce_choice
from burnrate.utils.date_parser import parse_signal_date

UNKNOWN_DATE_KEY = "Unknown date"
OTHER_GROUP_KEY = "Other"


class SummaryGroupBy(str, Enum):
    CATEGORY = "category"
    MERCHANT = "merchant"
    DATE = "date"
    MONTH = "month"
    CUSTOM_GROUPS = "custom_groups"


class SummaryMetric(str, Enum):
    SUM = "sum"
    AVG = "avg"
    COUNT = "count"


CustomGroups = Mapping[str, Sequence[str]]


def metric_value(total: Decimal, count: int, metric: SummaryMetric) -> Decimal:
    """Value of a metric for a bucket holding ``count`` amounts totalling ``total``."""
    if metric == SummaryMetric.COUNT:
        return Decimal(count)
    if metric == SummaryMetric.AVG:
        return total / count if count else Decimal("0")
    return total


class SummaryService:
    """Service for building grouped signal summaries."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def summarize(
        self,
        group_by: Union[SummaryGroupBy, str] = SummaryGroupBy.CATEGORY,
        metric: Union[SummaryMetric, str] = SummaryMetric.SUM,
        flow: Optional[Union[FlowDirection, str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        custom_groups: Optional[CustomGroups] = None,
    ) -> list[SignalGroupSummary]:
        """Group stored signals and compute a metric per group.

        Args:
            group_by: Field to group on
            metric: sum or avg of amounts, or count of signals
            flow: Optional flow filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            custom_groups: Named category lists, required for ``custom_groups``

        Returns:
            Group summaries ordered by value (highest first), then key

        Raises:
            ValidationError: On an unknown option, or custom grouping without groups
        """
        group_by = coerce_choice(SummaryGroupBy, group_by, "group by")
        metric = coerce_choice(SummaryMetric, metric, "metric")
        if group_by == SummaryGroupBy.CUSTOM_GROUPS:
            custom_groups = self.validate_custom_groups(custom_groups)
        signals = self.filter_signals(
            self.db.list_signals(),
            flow=coerce_choice(FlowDirection, flow, "flow") if flow else None,
            start_date=start_date,
            end_date=end_date,
        )
        return self.aggregate(signals, group_by, metric, custom_groups)

    def monthly_trend(
        self,
        metric: Union[SummaryMetric, str] = SummaryMetric.SUM,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[MonthlyTrend]:
        """Inflow and outflow per calendar month.

        Months run oldest to newest. Signals with an unreadable date share
        one trailing bucket, unless a date range drops them.

        Args:
            metric: sum or avg of amounts, or count of signals, per side
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
        """
        metric = coerce_choice(SummaryMetric, metric, "metric")
        signals = self.filter_signals(
            self.db.list_signals(), start_date=start_date, end_date=end_date
        )

        totals: dict[str, dict[FlowDirection, Decimal]] = defaultdict(
            lambda: defaultdict(lambda: Decimal("0"))
        )
        counts: dict[str, dict[FlowDirection, int]] = defaultdict(lambda: defaultdict(int))
        for signal in signals:
            month = self.group_key(signal, SummaryGroupBy.MONTH)
            totals[month][signal.flow] += abs(signal.amount)
            counts[month][signal.flow] += 1

        months = sorted(key for key in totals if key != UNKNOWN_DATE_KEY)
        if UNKNOWN_DATE_KEY in totals:
            months.append(UNKNOWN_DATE_KEY)

        trend = []
        for month in months:
            inflow = totals[month][FlowDirection.INFLOW]
            outflow = totals[month][FlowDirection.OUTFLOW]
            inflow_count = counts[month][FlowDirection.INFLOW]
            outflow_count = counts[month][FlowDirection.OUTFLOW]
            trend.append(
                MonthlyTrend(
                    month=month,
                    inflow=metric_value(inflow, inflow_count, metric),
                    outflow=metric_value(outflow, outflow_count, metric),
                    inflow_count=inflow_count,
                    outflow_count=outflow_count,
                )
            )
        return trend

    @staticmethod
    def validate_custom_groups(custom_groups: Optional[CustomGroups]) -> dict[str, tuple[str, ...]]:
        """Check named category groups and normalize their names.

        Raises:
            ValidationError: If no groups are given or a group is unnamed or empty
        """
        if not custom_groups:
            raise ValidationError("Custom grouping needs at least one named group of categories")

        groups: dict[str, tuple[str, ...]] = {}
        for name, categories in custom_groups.items():
            name = (name or "").strip()
            if not name:
                raise ValidationError("Custom group name cannot be empty")
            cleaned = tuple(c.strip() for c in categories if c and c.strip())
            if not cleaned:
                raise ValidationError(f"Custom group '{name}' has no categories")
            groups[name] = cleaned
        return groups

    def filter_signals(
        self,
        signals: Sequence[FinancialSignal],
        flow: Optional[FlowDirection] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[FinancialSignal]:
        """Filter signals by flow and date range.

        Signals whose date cannot be read are dropped once a range is given.
        """
        result = []
        for signal in signals:
            if flow is not None and signal.flow != flow:
                continue
            if start_date is not None or end_date is not None:
                signal_date = parse_signal_date(signal.date)
                if signal_date is None:
                    continue
                if start_date is not None and signal_date < start_date:
                    continue
                if end_date is not None and signal_date > end_date:
                    continue
            result.append(signal)
        return result

    def group_key(
        self,
        signal: FinancialSignal,
        group_by: SummaryGroupBy,
        custom_groups: Optional[CustomGroups] = None,
    ) -> str:
        """Key of the group a signal falls into.

        Custom groups match categories without regard to case; the first
        group listing the signal's category wins.
        """
        if group_by == SummaryGroupBy.CATEGORY:
            return signal.category or "Uncategorized"
        if group_by == SummaryGroupBy.MERCHANT:
            return signal.merchant or "Unknown"
        if group_by == SummaryGroupBy.CUSTOM_GROUPS:
            category = (signal.category or "").strip().lower()
            for name, categories in (custom_groups or {}).items():
                if category in (c.strip().lower() for c in categories):
                    return name
            return OTHER_GROUP_KEY

        signal_date = parse_signal_date(signal.date)
        if signal_date is None:
            return UNKNOWN_DATE_KEY
        if group_by == SummaryGroupBy.MONTH:
            return f"{signal_date:%Y-%m}"
        return signal_date.isoformat()

    def aggregate(
        self,
        signals: Sequence[FinancialSignal],
        group_by: SummaryGroupBy,
        metric: SummaryMetric,
        custom_groups: Optional[CustomGroups] = None,
    ) -> list[SignalGroupSummary]:
        """Aggregate signals into group summaries."""
        totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        counts: dict[str, int] = defaultdict(int)

        for signal in signals:
            key = self.group_key(signal, group_by, custom_groups)
            totals[key] += abs(signal.amount)
            counts[key] += 1

        results = [
            SignalGroupSummary(
                key=key, value=metric_value(total, counts[key], metric), count=counts[key]
            )
            for key, total in totals.items()
        ]
        return sorted(results, key=lambda item: (-item.value, item.key))
