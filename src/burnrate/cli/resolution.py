"""CLI helpers for identifier resolution and error handling."""

from __future__ import annotations

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.domain.investment import InvestmentService
from burnrate.domain.signal import SignalService
from burnrate.utils.resolvers import resolve_investment_account, resolve_signal_id


def resolve_signal_or_exit(
    ctx: click.Context, signal_service: SignalService, token: str
) -> str:
    """Resolve a signal ID or prefix, or exit with a CLI error."""
    try:
        return resolve_signal_id(signal_service, token)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_investment_account_or_exit(
    ctx: click.Context, investment_service: InvestmentService, account: str | int
) -> int:
    """Resolve investment account name or ID, or exit with a CLI error."""
    try:
        return resolve_investment_account(investment_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
