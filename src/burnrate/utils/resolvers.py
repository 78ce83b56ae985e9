"""Utilities for resolving user-supplied identifiers."""

from burnrate.domain.errors import ConflictError, NotFoundError, signal_not_found
from burnrate.domain.investment import InvestmentService
from burnrate.domain.signal import SignalService


def resolve_signal_id(signal_service: SignalService, token: str) -> str:
    """Resolve a full signal ID or a unique ID prefix to a signal ID.

    Args:
        signal_service: SignalService instance
        token: Full signal ID or the leading characters of one

    Returns:
        Signal ID

    Raises:
        NotFoundError: If no signal matches
        ConflictError: If the prefix matches more than one signal
    """
    token = token.strip()
    if signal_service.get_signal(token) is not None:
        return token

    matches = [s.id for s in signal_service.list_signals() if s.id.startswith(token)]
    if not matches or not token:
        raise NotFoundError(signal_not_found(token))
    if len(matches) > 1:
        raise ConflictError(f"Signal prefix '{token}' matches {len(matches)} signals")
    return matches[0]


def resolve_investment_account(investment_service: InvestmentService, account: str | int) -> int:
    """Resolve investment account name or ID to account ID.

    Raises:
        NotFoundError: If the account is not found
    """
    if isinstance(account, int):
        if investment_service.get_account(account) is None:
            raise NotFoundError(f"Investment account ID {account} not found")
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if investment_service.get_account(account_id) is None:
            raise NotFoundError(f"Investment account ID {account_id} not found")
        return account_id

    found = investment_service.get_account_by_name(account)
    if found is None:
        raise NotFoundError(f"Investment account '{account}' not found")
    return found.id
