"""Grouped signal summary command."""

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.cli.formatting import format_money
from burnrate.domain.entities import FlowDirection
from burnrate.domain.summary import SummaryGroupBy, SummaryMetric, SummaryService
from burnrate.utils.date_parser import parse_date


def parse_custom_groups(values: tuple[str, ...]) -> dict[str, list[str]]:
    """Turn repeated ``NAME=Cat1,Cat2`` options into an ordered mapping.

    Raises:
        ValueError: If a value has no name or no categories
    """
    groups: dict[str, list[str]] = {}
    for value in values:
        name, sep, categories = value.partition("=")
        name = name.strip()
        members = [c.strip() for c in categories.split(",") if c.strip()]
        if not sep or not name or not members:
            raise ValueError(f"expected NAME=Category[,Category...], got '{value}'")
        groups.setdefault(name, []).extend(members)
    return groups


@click.command("summary")
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in SummaryGroupBy]),
    default=SummaryGroupBy.CATEGORY.value,
    show_default=True,
    help="Field to group signals on",
)
@click.option(
    "--metric",
    type=click.Choice([m.value for m in SummaryMetric]),
    default=SummaryMetric.SUM.value,
    show_default=True,
    help="Value computed per group",
)
@click.option("--flow", type=click.Choice([f.value for f in FlowDirection]), help="Only this flow")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--group",
    "custom_groups",
    multiple=True,
    metavar="NAME=CAT1,CAT2",
    help="Named category group for --group-by custom_groups (repeatable)",
)
@click.pass_context
def summary(
    ctx,
    group_by: str,
    metric: str,
    flow: str | None,
    start_date: str | None,
    end_date: str | None,
    custom_groups: tuple[str, ...],
):
    """Summarize signals grouped by category, merchant, date or month.

    Grouping by month shows inflow against outflow for each month. Custom
    groups collect the listed categories under one name; every other
    category lands in "Other".

    Examples:
        burnrate summary --flow outflow
        burnrate summary --group-by merchant --metric count
        burnrate summary --group-by date --start-date "last month"
        burnrate summary --group-by month
        burnrate summary --group-by custom_groups --group "Essentials=Housing,Groceries"
    """
    db = ctx.obj["db"]
    service = SummaryService(db)

    if custom_groups and group_by != SummaryGroupBy.CUSTOM_GROUPS.value:
        click.echo("Error: --group only applies with --group-by custom_groups", err=True)
        ctx.exit(1)
    if flow and group_by == SummaryGroupBy.MONTH.value:
        click.echo("Error: --flow does not apply to --group-by month", err=True)
        ctx.exit(1)

    try:
        groups_by_name = parse_custom_groups(custom_groups)
    except ValueError as e:
        click.echo(f"Error: Invalid group format: {e}", err=True)
        ctx.exit(1)

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    if group_by == SummaryGroupBy.MONTH.value:
        _show_monthly_trend(ctx, service, metric, start, end)
        return

    try:
        groups = service.summarize(
            group_by=group_by,
            metric=metric,
            flow=flow,
            start_date=start,
            end_date=end,
            custom_groups=groups_by_name,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not groups:
        click.echo("No signals found.")
        return

    header = "Group" if group_by == SummaryGroupBy.CUSTOM_GROUPS.value else group_by.capitalize()
    click.echo(f"{header:<32} {metric.upper():>16} {'Signals':>8}")
    click.echo("-" * 58)
    for group in groups:
        click.echo(f"{group.key[:32]:<32} {_format_value(group.value, metric):>16} {group.count:>8}")


def _format_value(value, metric: str) -> str:
    return str(int(value)) if metric == SummaryMetric.COUNT.value else format_money(value)


def _show_monthly_trend(ctx, service: SummaryService, metric: str, start, end):
    try:
        trend = service.monthly_trend(metric=metric, start_date=start, end_date=end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not trend:
        click.echo("No signals found.")
        return

    click.echo(f"{'Month':<14} {'Inflow':>16} {'Outflow':>16} {'Net':>16}")
    click.echo("-" * 65)
    for month in trend:
        click.echo(
            f"{month.month:<14} {_format_value(month.inflow, metric):>16} "
            f"{_format_value(month.outflow, metric):>16} {_format_value(month.net, metric):>16}"
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
