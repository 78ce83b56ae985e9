"""Domain layer for burnrate application.

Services are imported from their own modules; importing them here would pull
the database layer in before the entities it depends on.
"""

from burnrate.domain.entities import (
    DisposableIncomeSummary,
    FinancialSignal,
    FlowDirection,
    InvestmentAccount,
    ProjectionSnapshot,
    RecurringEntity,
    RecurringFrequency,
    SignalNature,
)

__all__ = [
    "DisposableIncomeSummary",
    "FinancialSignal",
    "FlowDirection",
    "InvestmentAccount",
    "ProjectionSnapshot",
    "RecurringEntity",
    "RecurringFrequency",
    "SignalNature",
]
