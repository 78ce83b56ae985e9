"""Recurring insight commands."""

import click

from burnrate.cli.formatting import format_frequency, format_money
from burnrate.domain.entities import RecurringEntity
from burnrate.domain.insights_service import InsightsService


def _display_entities(title: str, entities: tuple[RecurringEntity, ...]) -> None:
    click.echo(f"\n{title}:")
    if not entities:
        click.echo("  (none)")
        return
    for entity in sorted(entities, key=lambda e: (-e.amount, e.merchant.lower())):
        click.echo(
            f"  {entity.merchant[:30]:<30} {format_frequency(entity.frequency):<11} "
            f"{format_money(entity.amount) + '/mo':>16}  last {entity.last_date[:10]}"
        )


@click.command("insights")
@click.pass_context
def insights(ctx):
    """Show recurring income, fixed costs and disposable income.

    Signals are grouped by merchant; the interval between dates decides the
    frequency and the latest amount is converted to a monthly figure.
    """
    db = ctx.obj["db"]
    service = InsightsService(db)

    summary = service.monthly_insights()

    _display_entities("Recurring income", summary.recurring_income)
    _display_entities("Fixed costs", summary.recurring_expenses)

    click.echo()
    click.echo("-" * 60)
    click.echo(f"{'Monthly income':<40} {format_money(summary.total_income):>19}")
    click.echo(f"{'Monthly fixed costs':<40} {format_money(summary.total_fixed_costs):>19}")
    click.echo(f"{'Disposable income':<40} {format_money(summary.disposable_income):>19}")


def register_commands(cli):
    """Register insights command with main CLI."""
    cli.add_command(insights)
