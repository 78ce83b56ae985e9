"""Recurring insight domain service."""

from burnrate.database.base import Database
from burnrate.domain.entities import DisposableIncomeSummary, RecurringEntity
from burnrate.domain.insights import (
    build_monthly_insights,
    calculate_monthly_income,
    calculate_recurring_expenses,
)


class InsightsService:
    """Recompute recurring insights from the stored signals.

    Nothing is cached: every call reads the current signals, so callers
    invoke it again whenever signals change.
    """

    def __init__(self, db: Database):
        """Initialize insights service.

        Args:
            db: Database instance
        """
        self.db = db

    def monthly_insights(self) -> DisposableIncomeSummary:
        """Recurring income, fixed costs and disposable income."""
        return build_monthly_insights(self.db.list_signals())

    def recurring_income(self) -> list[RecurringEntity]:
        """Recurring income entities only."""
        return calculate_monthly_income(self.db.list_signals())

    def recurring_expenses(self) -> list[RecurringEntity]:
        """Recurring fixed-cost entities only."""
        return calculate_recurring_expenses(self.db.list_signals())
