"""Compound-growth projection of investment accounts."""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from burnrate.domain.entities import InvestmentAccount, ProjectionSnapshot
from burnrate.domain.errors import ValidationError
from burnrate.logging import get_logger

logger = get_logger(__name__)

MONTHS_PER_YEAR = 12


@dataclass
class _AccountState:
    account_id: Optional[int]
    balance: float
    invested: float
    contribution: float
    monthly_rate: float

    def advance_month(self) -> None:
        # Interest accrues on the opening balance; the contribution lands after.
        interest = self.balance * self.monthly_rate
        self.balance = self.balance + interest + self.contribution
        self.invested += self.contribution


def round_currency(value: float) -> int:
    """Round to whole currency units, halves rounding up."""
    return int(math.floor(value + 0.5))


def project_investments(
    accounts: Sequence[InvestmentAccount],
    years: int,
    start_year: Optional[int] = None,
) -> list[ProjectionSnapshot]:
    """Project account balances year by year.

    Each account compounds monthly at ``annual_growth_rate / 100 / 12``. The
    returned list has ``years + 1`` snapshots, the first being today's
    balances; an empty account list gives an empty list.

    Args:
        accounts: Investment accounts to project
        years: Projection horizon in years
        start_year: Calendar year of the first snapshot (defaults to this year)

    Returns:
        List of yearly projection snapshots

    Raises:
        ValidationError: If years is negative
    """
    if years < 0:
        raise ValidationError(f"Projection years must not be negative (got {years})")
    if not accounts:
        return []

    if start_year is None:
        start_year = date.today().year

    states = [
        _AccountState(
            account_id=account.id,
            balance=float(account.current_balance),
            invested=float(account.current_balance),
            contribution=float(account.monthly_contribution),
            monthly_rate=float(account.annual_growth_rate) / 100 / MONTHS_PER_YEAR,
        )
        for account in accounts
    ]

    snapshots: list[ProjectionSnapshot] = []
    for offset in range(years + 1):
        snapshots.append(
            ProjectionSnapshot(
                year=start_year + offset,
                total_balance=round_currency(sum(s.balance for s in states)),
                total_invested=round_currency(sum(s.invested for s in states)),
                balances={
                    s.account_id: round_currency(s.balance)
                    for s in states
                    if s.account_id is not None
                },
            )
        )
        for state in states:
            for _ in range(MONTHS_PER_YEAR):
                state.advance_month()

    logger.debug("Projected %d account(s) over %d year(s)", len(states), years)
    return snapshots
