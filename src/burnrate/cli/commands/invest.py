"""Investment account commands."""

from decimal import Decimal

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.cli.formatting import format_money
from burnrate.cli.resolution import resolve_investment_account_or_exit
from burnrate.config import MAX_PROJECTION_YEARS, MIN_PROJECTION_YEARS
from burnrate.domain.investment import InvestmentService
from burnrate.utils.amount_parser import parse_amount


@click.group()
def invest_group():
    """Manage investment accounts and projections."""
    pass


@invest_group.command("save")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--balance", help="Current balance (default 0, or unchanged when updating)")
@click.option("--contribution", help="Monthly contribution (default 0, or unchanged when updating)")
@click.option("--rate", help="Annual growth rate in percent (default 7, or unchanged when updating)")
@click.option("--rename", help="New name when updating an existing account")
@click.pass_context
def save_account(
    ctx,
    name: str,
    balance: str | None,
    contribution: str | None,
    rate: str | None,
    rename: str | None,
):
    """Create an investment account, or update it if ACCOUNT_NAME exists.

    A positive monthly contribution is tracked as a fixed recurring
    "Investments" outflow, so it shows up in fixed costs.

    Examples:
        burnrate invest save "401k" --balance 25000 --contribution 500 --rate 7
        burnrate invest save "401k" --contribution 750
    """
    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = InvestmentService(db, currency=config.extraction.default_currency)

    existing = service.get_account_by_name(name)
    try:
        current_balance = (
            parse_amount(balance)
            if balance is not None
            else (existing.current_balance if existing else Decimal("0"))
        )
        monthly_contribution = (
            parse_amount(contribution)
            if contribution is not None
            else (existing.monthly_contribution if existing else Decimal("0"))
        )
        growth_rate = (
            parse_amount(rate)
            if rate is not None
            else (
                existing.annual_growth_rate
                if existing
                else Decimal(str(config.projection.default_growth_rate))
            )
        )
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.save_account(
            name=rename or name,
            current_balance=current_balance,
            monthly_contribution=monthly_contribution,
            annual_growth_rate=growth_rate,
            account_id=existing.id if existing else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    action = "Updated" if existing else "Created"
    click.echo(f"{action} investment account '{rename or name}' (ID: {account_id})")
    if monthly_contribution > 0:
        click.echo(f"Tracking {format_money(monthly_contribution)}/mo as a fixed cost")


@invest_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List investment accounts."""
    db = ctx.obj["db"]
    service = InvestmentService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No investment accounts found.")
        return

    click.echo("\nInvestment accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Balance: {format_money(acc.current_balance):>14} | "
            f"{format_money(acc.monthly_contribution)}/mo | {acc.annual_growth_rate.normalize():f}%/yr"
        )


@invest_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool):
    """Delete an investment account and its contribution signal.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = InvestmentService(db)
    account_id = resolve_investment_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete investment account '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted investment account '{account_obj.name}'")


@invest_group.command("project")
@click.option(
    "--years",
    type=click.IntRange(MIN_PROJECTION_YEARS, MAX_PROJECTION_YEARS),
    help="Projection horizon in years (default from BURNRATE_PROJECTION_YEARS or 30)",
)
@click.option("--accounts", "show_accounts", is_flag=True, help="Show per-account balances")
@click.pass_context
def project(ctx, years: int | None, show_accounts: bool):
    """Project investment growth year by year."""
    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = InvestmentService(db)

    horizon = years if years is not None else config.projection.years
    accounts = service.list_accounts()
    try:
        snapshots = service.project(horizon)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not snapshots:
        click.echo("No investment accounts found.")
        return

    names = {acc.id: acc.name for acc in accounts}
    click.echo(f"{'Year':<6} {'Balance':>16} {'Invested':>16} {'Growth':>16}")
    click.echo("-" * 57)
    for snap in snapshots:
        growth = snap.total_balance - snap.total_invested
        click.echo(
            f"{snap.year:<6} {format_money(snap.total_balance):>16} "
            f"{format_money(snap.total_invested):>16} {format_money(growth):>16}"
        )
        if show_accounts:
            for account_id, balance in snap.balances.items():
                click.echo(f"{'':6}   {names.get(account_id, account_id)}: {format_money(balance)}")

    final = snapshots[-1]
    click.echo()
    click.echo(f"Projected wealth in {final.year}: {format_money(final.total_balance)}")
    click.echo(f"Total invested: {format_money(final.total_invested)}")
    click.echo(f"Total growth: {format_money(final.total_balance - final.total_invested)}")


def register_commands(cli):
    """Register investment commands with main CLI."""
    cli.add_command(invest_group, name="invest")
