"""Domain model entities for burnrate.

These are pure data classes representing business concepts, independent of
database schema. Derived values (recurring entities, summaries, projection
snapshots) live here too so the pure insight functions and the storage layer
share a single vocabulary.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class FlowDirection(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class SignalNature(str, Enum):
    FIXED_RECURRING = "fixed_recurring"
    VARIABLE_ESTIMATE = "variable_estimate"
    INCOME_SOURCE = "income_source"


class RecurringFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi-annual"
    ANNUAL = "annual"


# Frequency label used when neither inference nor the signal itself knows.
UNKNOWN_FREQUENCY = "unknown"


class TaxDocumentType(str, Enum):
    W2 = "w2"
    FORM_1099 = "1099"
    PROPERTY_TAX = "property_tax"
    PAYSTUB = "paystub"
    OTHER = "other"


class FilingStatus(str, Enum):
    SINGLE = "single"
    JOINT = "joint"


@dataclass(frozen=True)
class FinancialSignal:
    """Atomic observed cash-flow event.

    ``date`` is kept as the string the signal arrived with; it may not parse.
    ``amount`` is a magnitude, the direction lives in ``flow``.
    """

    id: str
    date: str
    amount: Decimal
    currency: str
    flow: FlowDirection
    nature: SignalNature
    merchant: str
    category: str
    created_at: datetime
    frequency: Optional[RecurringFrequency] = None
    source_doc_id: Optional[str] = None


@dataclass(frozen=True)
class UploadedDocument:
    """Document whose extraction produced a batch of signals."""

    id: str
    file_name: str
    uploaded_at: datetime
    signal_count: int


@dataclass(frozen=True)
class InvestmentAccount:
    """Tracked investment account used for projections."""

    id: Optional[int]
    name: str
    current_balance: Decimal
    monthly_contribution: Decimal
    annual_growth_rate: Decimal
    signal_id: Optional[str] = None


@dataclass(frozen=True)
class TaxDocument:
    """Tax document with the figures extracted from it."""

    id: int
    file_name: str
    doc_type: TaxDocumentType
    tax_year: str
    uploaded_at: datetime
    entity_name: Optional[str] = None
    gross_income: Optional[Decimal] = None
    federal_tax_withheld: Optional[Decimal] = None
    social_security_tax: Optional[Decimal] = None
    medicare_tax: Optional[Decimal] = None
    state_tax_withheld: Optional[Decimal] = None
    state: Optional[str] = None
    property_tax_amount: Optional[Decimal] = None
    insights: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecurringEntity:
    """Merchant-grouped, monthly normalized recurring cash flow."""

    merchant: str
    amount: Decimal
    frequency: str
    last_date: str


@dataclass(frozen=True)
class DisposableIncomeSummary:
    """Recurring income against recurring fixed costs."""

    total_income: Decimal
    total_fixed_costs: Decimal
    disposable_income: Decimal
    recurring_income: tuple[RecurringEntity, ...]
    recurring_expenses: tuple[RecurringEntity, ...]


@dataclass(frozen=True)
class ProjectionSnapshot:
    """Projected wealth at the start of one calendar year."""

    year: int
    total_balance: int
    total_invested: int
    balances: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SignalGroupSummary:
    """One bucket of a grouped signal summary."""

    key: str
    value: Decimal
    count: int


@dataclass(frozen=True)
class MonthlyTrend:
    """Inflow against outflow for one calendar month."""

    month: str
    inflow: Decimal
    outflow: Decimal
    inflow_count: int
    outflow_count: int

    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow


@dataclass(frozen=True)
class TaxSummary:
    """Totals across all extracted tax documents."""

    gross_income: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    property_tax: Decimal

    @property
    def net_income(self) -> Decimal:
        """Gross income left after the withheld and paid taxes, floored at zero."""
        taxes = self.federal_tax + self.state_tax + self.property_tax
        return max(Decimal("0"), self.gross_income - taxes)


@dataclass(frozen=True)
class TaxStrategyEstimate:
    """Illustrative deduction and credit estimate, not tax advice."""

    filing_status: FilingStatus
    standard_deduction: Decimal
    total_state_and_local_tax: Decimal
    deductible_salt: Decimal
    itemizing_better: bool
    child_tax_credit: Decimal
    child_care_credit: Decimal

    @property
    def total_credits(self) -> Decimal:
        return self.child_tax_credit + self.child_care_credit
