"""Investment account domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from burnrate.database.base import Database
from burnrate.domain.entities import (
    FinancialSignal,
    FlowDirection,
    InvestmentAccount,
    ProjectionSnapshot,
    RecurringFrequency,
    SignalNature,
)
from burnrate.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_investment_account,
    investment_account_not_found,
    negative_amount,
)
from burnrate.domain.projection import project_investments
from burnrate.domain.signal import build_signal
from burnrate.logging import get_logger

logger = get_logger(__name__)

INVESTMENT_CATEGORY = "Investments"


class InvestmentService:
    """Service for managing investment accounts and their projections."""

    def __init__(self, db: Database, currency: str = "USD"):
        """Initialize investment service.

        Args:
            db: Database instance
            currency: Currency recorded on companion contribution signals
        """
        self.db = db
        self.currency = currency

    def save_account(
        self,
        name: str,
        current_balance: Decimal,
        monthly_contribution: Decimal,
        annual_growth_rate: Decimal,
        account_id: Optional[int] = None,
    ) -> int:
        """Create or update an investment account.

        A positive monthly contribution is mirrored by a fixed recurring
        outflow signal linked through ``signal_id``. Saving again updates that
        same signal; dropping the contribution to zero removes it.

        Args:
            name: Account name
            current_balance: Current balance
            monthly_contribution: Amount added every month
            annual_growth_rate: Expected growth in percent per year
            account_id: ID of the account to update, or None to create one

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the contribution is negative
            NotFoundError: If account_id does not exist
            ConflictError: If another account already uses the name
        """
        name = name.strip()
        if not name:
            raise ValidationError("Investment account name must not be empty")
        if monthly_contribution < 0:
            raise ValidationError(negative_amount("Monthly contribution", monthly_contribution))

        existing: Optional[InvestmentAccount] = None
        if account_id is not None:
            existing = self.db.get_investment_account(account_id)
            if existing is None:
                raise NotFoundError(investment_account_not_found(account_id))

        other = self.db.get_investment_account_by_name(name)
        if other is not None and other.id != account_id:
            raise ConflictError(duplicate_investment_account(name))

        signal_id = existing.signal_id if existing else None
        if monthly_contribution > 0:
            signal_id = self._upsert_contribution_signal(signal_id, name, monthly_contribution)
        elif signal_id is not None:
            self._remove_contribution_signal(signal_id)
            signal_id = None

        if existing is None:
            new_id = self.db.create_investment_account(
                name=name,
                current_balance=current_balance,
                monthly_contribution=monthly_contribution,
                annual_growth_rate=annual_growth_rate,
                signal_id=signal_id,
            )
            logger.info("Created investment account '%s' (ID %d)", name, new_id)
            return new_id

        self.db.update_investment_account(
            InvestmentAccount(
                id=existing.id,
                name=name,
                current_balance=current_balance,
                monthly_contribution=monthly_contribution,
                annual_growth_rate=annual_growth_rate,
                signal_id=signal_id,
            )
        )
        logger.info("Updated investment account '%s' (ID %d)", name, existing.id)
        return existing.id

    def get_account(self, account_id: int) -> Optional[InvestmentAccount]:
        """Get investment account by ID, or None if not found."""
        return self.db.get_investment_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[InvestmentAccount]:
        """Get investment account by name, or None if not found."""
        return self.db.get_investment_account_by_name(name)

    def list_accounts(self) -> list[InvestmentAccount]:
        """List all investment accounts."""
        return self.db.list_investment_accounts()

    def delete_account(self, account_id: int) -> None:
        """Delete an investment account along with its contribution signal.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_investment_account(account_id)
        if account is None:
            raise NotFoundError(investment_account_not_found(account_id))

        if account.signal_id is not None:
            self._remove_contribution_signal(account.signal_id)
        self.db.delete_investment_account(account_id)

    def project(self, years: int, start_year: Optional[int] = None) -> list[ProjectionSnapshot]:
        """Project all stored accounts over ``years`` years."""
        return project_investments(self.db.list_investment_accounts(), years, start_year)

    def _upsert_contribution_signal(
        self, signal_id: Optional[str], name: str, contribution: Decimal
    ) -> str:
        current = self.db.get_signal(signal_id) if signal_id else None
        signal = build_signal(
            date=date.today().isoformat(),
            amount=contribution,
            flow=FlowDirection.OUTFLOW,
            nature=SignalNature.FIXED_RECURRING,
            frequency=RecurringFrequency.MONTHLY,
            merchant=name,
            category=INVESTMENT_CATEGORY,
            currency=self.currency,
            signal_id=signal_id,
            created_at=current.created_at if current else None,
        )
        if current is None:
            self.db.add_signals([signal])
        else:
            self.db.replace_signal(signal)
        return signal.id

    def _remove_contribution_signal(self, signal_id: str) -> None:
        signal: Optional[FinancialSignal] = self.db.get_signal(signal_id)
        if signal is not None:
            self.db.delete_signal(signal_id)
