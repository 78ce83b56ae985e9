"""Signal management commands."""

from dataclasses import replace

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.cli.formatting import format_frequency, format_money
from burnrate.cli.resolution import resolve_signal_or_exit
from burnrate.domain.entities import FlowDirection, RecurringFrequency, SignalNature
from burnrate.domain.signal import SignalService, coerce_choice
from burnrate.utils.amount_parser import parse_magnitude
from burnrate.utils.date_parser import parse_date

FLOW_CHOICES = [f.value for f in FlowDirection]
NATURE_CHOICES = [n.value for n in SignalNature]
FREQUENCY_CHOICES = [f.value for f in RecurringFrequency]


@click.group()
def signal_group():
    """Manage financial signals."""
    pass


@signal_group.command("add")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Signal date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount (e.g., 22.99); the sign is ignored")
@click.option("--flow", required=True, type=click.Choice(FLOW_CHOICES), help="Money direction")
@click.option("--nature", required=True, type=click.Choice(NATURE_CHOICES), help="Recurrence character")
@click.option("--merchant", required=True, help="Counterparty name")
@click.option("--category", default="Uncategorized", show_default=True, help="Category label")
@click.option("--frequency", type=click.Choice(FREQUENCY_CHOICES), help="Declared frequency")
@click.option("--currency", help="Currency code (defaults to BURNRATE_CURRENCY or USD)")
@click.pass_context
def add_signal(
    ctx,
    date_str: str,
    amount: str,
    flow: str,
    nature: str,
    merchant: str,
    category: str,
    frequency: str | None,
    currency: str | None,
):
    """Add a signal manually.

    Examples:
        burnrate signal add --date 2024-02-08 --amount 22.99 --flow outflow \\
            --nature fixed_recurring --merchant Netflix --category Streaming
        burnrate signal add --date today --amount 3250 --flow inflow \\
            --nature income_source --merchant "Acme Corp" --frequency bi-weekly
    """
    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = SignalService(db)

    try:
        signal_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        signal_amount = parse_magnitude(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        signal_id = service.create_signal(
            date=signal_date.isoformat(),
            amount=signal_amount,
            flow=flow,
            nature=nature,
            merchant=merchant,
            category=category,
            currency=(currency or config.extraction.default_currency).upper(),
            frequency=frequency,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created signal {signal_id}")
    click.echo(f"  Date: {signal_date.isoformat()}")
    click.echo(f"  Merchant: {merchant}")
    click.echo(f"  Amount: {format_money(signal_amount)} ({flow})")
    if frequency:
        click.echo(f"  Frequency: {format_frequency(frequency)}")


@signal_group.command("list")
@click.option("--search", help="Only signals whose merchant or category contains this text")
@click.option("--recurring", is_flag=True, help="Only signals with a declared frequency")
@click.pass_context
def list_signals(ctx, search: str | None, recurring: bool):
    """List signals, newest first."""
    db = ctx.obj["db"]
    service = SignalService(db)

    signals = service.list_signals(search=search, recurring_only=recurring)
    if not signals:
        click.echo("No signals found.")
        return

    click.echo(
        f"{'ID':<8}  {'Date':<10}  {'Merchant':<24}  {'Category':<16}  "
        f"{'Amount':>12}  {'Frequency':<11}  {'Monthly':>12}"
    )
    click.echo("-" * 105)
    for s in signals:
        sign = "+" if s.flow == FlowDirection.INFLOW else "-"
        monthly = service.monthly_amount(s)
        click.echo(
            f"{s.id[:8]:<8}  {s.date[:10]:<10}  {s.merchant[:24]:<24}  {s.category[:16]:<16}  "
            f"{sign + format_money(s.amount):>12}  {format_frequency(s.frequency):<11}  "
            f"{format_money(monthly) + '/mo':>12}"
        )
    click.echo(f"\n{len(signals)} signal{'s' if len(signals) != 1 else ''}")


@signal_group.command("show")
@click.argument("signal_id")
@click.pass_context
def show_signal(ctx, signal_id: str):
    """Show one signal in full.

    SIGNAL_ID can be the full ID or a unique prefix.
    """
    db = ctx.obj["db"]
    service = SignalService(db)
    resolved = resolve_signal_or_exit(ctx, service, signal_id)
    s = service.require_signal(resolved)

    click.echo(f"ID: {s.id}")
    click.echo(f"Date: {s.date}")
    click.echo(f"Merchant: {s.merchant}")
    click.echo(f"Category: {s.category}")
    click.echo(f"Amount: {format_money(s.amount)} {s.currency}")
    click.echo(f"Flow: {s.flow.value}")
    click.echo(f"Nature: {s.nature.value}")
    click.echo(f"Frequency: {format_frequency(s.frequency)}")
    click.echo(f"Monthly: {format_money(service.monthly_amount(s))}")
    if s.source_doc_id:
        click.echo(f"Source document: {s.source_doc_id}")


@signal_group.command("edit")
@click.argument("signal_id")
@click.option("--date", "date_str", help="New date (YYYY-MM-DD or relative like 'today')")
@click.option("--amount", help="New amount")
@click.option("--flow", type=click.Choice(FLOW_CHOICES), help="New money direction")
@click.option("--nature", type=click.Choice(NATURE_CHOICES), help="New recurrence character")
@click.option("--merchant", help="New counterparty name")
@click.option("--category", help="New category label")
@click.option("--frequency", help="New frequency, or empty string to clear it")
@click.option("--currency", help="New currency code")
@click.pass_context
def edit_signal(
    ctx,
    signal_id: str,
    date_str: str | None,
    amount: str | None,
    flow: str | None,
    nature: str | None,
    merchant: str | None,
    category: str | None,
    frequency: str | None,
    currency: str | None,
):
    """Edit a signal.

    Fields that are not given keep their current value; the stored signal is
    replaced as a whole. Use --frequency "" to clear the frequency.

    Examples:
        burnrate signal edit 3f2a --amount 24.99
        burnrate signal edit 3f2a --nature variable_estimate --frequency ""
    """
    db = ctx.obj["db"]
    service = SignalService(db)
    resolved = resolve_signal_or_exit(ctx, service, signal_id)
    current = service.require_signal(resolved)

    changes = {}
    try:
        if date_str is not None:
            changes["date"] = parse_date(date_str).isoformat()
        if amount is not None:
            changes["amount"] = parse_magnitude(amount)
        if flow is not None:
            changes["flow"] = FlowDirection(flow)
        if nature is not None:
            changes["nature"] = SignalNature(nature)
        if merchant is not None:
            changes["merchant"] = merchant
        if category is not None:
            changes["category"] = category
        if currency is not None:
            changes["currency"] = currency.upper()
        if frequency is not None:
            changes["frequency"] = (
                coerce_choice(RecurringFrequency, frequency, "frequency") if frequency else None
            )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.replace_signal(replace(current, **changes))
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated signal {resolved}")


@signal_group.command("delete")
@click.argument("signal_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_signal(ctx, signal_id: str, yes: bool):
    """Delete a signal.

    SIGNAL_ID can be the full ID or a unique prefix.
    """
    db = ctx.obj["db"]
    service = SignalService(db)
    resolved = resolve_signal_or_exit(ctx, service, signal_id)
    s = service.require_signal(resolved)

    if not yes and not click.confirm(
        f"Are you sure you want to delete the {s.merchant} signal from {s.date}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_signal(resolved)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted signal {resolved}")


@signal_group.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_signals(ctx, yes: bool):
    """Delete ALL signals."""
    db = ctx.obj["db"]
    service = SignalService(db)

    count = len(service.list_signals())
    if count == 0:
        click.echo("No signals to delete.")
        return

    if not yes and not click.confirm(
        f"Are you sure you want to delete ALL {count} signals? This cannot be undone."
    ):
        click.echo("Deletion cancelled.")
        return

    removed = service.delete_all_signals()
    click.echo(f"Deleted {removed} signal{'s' if removed != 1 else ''}")


def register_commands(cli):
    """Register signal commands with main CLI."""
    cli.add_command(signal_group, name="signal")
