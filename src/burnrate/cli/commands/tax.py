"""Tax document commands."""

from pathlib import Path

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.cli.formatting import format_money
from burnrate.domain.entities import FilingStatus
from burnrate.domain.extraction import parse_model_response
from burnrate.domain.tax import DEFAULT_SALT_CAP, TaxService
from burnrate.utils.amount_parser import parse_amount


@click.group()
def tax_group():
    """Manage tax documents and deduction estimates."""
    pass


@tax_group.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="Document name to record (defaults to the file name)")
@click.pass_context
def import_tax_document(ctx, file_path: Path, name: str | None):
    """Import a tax document extraction result.

    FILE_PATH holds the model's reply for one W-2, 1099, property tax bill or
    paystub: a JSON object with "docType", "taxYear" and a "data" object.
    """
    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = TaxService(db, config.extraction)

    try:
        payload = parse_model_response(file_path.read_text(encoding="utf-8"))
        document_id = service.import_tax_document(name or file_path.name, payload)
    except (OSError, ValueError) as e:
        handle_domain_error(ctx, e)

    document = service.get_tax_document(document_id)
    click.echo(
        f"Imported {document.doc_type.value} '{document.file_name}' "
        f"for {document.tax_year} (ID: {document_id})"
    )
    for insight in document.insights:
        click.echo(f"  - {insight}")


@tax_group.command("list")
@click.pass_context
def list_tax_documents(ctx):
    """List tax documents."""
    db = ctx.obj["db"]
    service = TaxService(db)

    documents = service.list_tax_documents()
    if not documents:
        click.echo("No tax documents found.")
        return

    click.echo("\nTax documents:")
    click.echo("-" * 80)
    for doc in documents:
        gross = format_money(doc.gross_income) if doc.gross_income is not None else "-"
        click.echo(
            f"ID: {doc.id:3d} | {doc.doc_type.value:12s} | {doc.tax_year} | "
            f"{doc.file_name[:28]:28s} | {(doc.entity_name or '-')[:20]:20s} | {gross}"
        )


@tax_group.command("delete")
@click.argument("document_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_tax_document(ctx, document_id: int, yes: bool):
    """Delete a tax document."""
    db = ctx.obj["db"]
    service = TaxService(db)

    document = service.get_tax_document(document_id)
    if document is None:
        click.echo(f"Error: Tax document {document_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete '{document.file_name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_tax_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted tax document '{document.file_name}'")


@tax_group.command("summary")
@click.pass_context
def tax_summary(ctx):
    """Show income and tax totals across all tax documents."""
    db = ctx.obj["db"]
    service = TaxService(db)

    totals = service.summarize()
    click.echo(f"{'Gross income':<28} {format_money(totals.gross_income):>16}")
    click.echo(f"{'Federal tax withheld':<28} {format_money(totals.federal_tax):>16}")
    click.echo(f"{'State tax withheld':<28} {format_money(totals.state_tax):>16}")
    click.echo(f"{'Property tax':<28} {format_money(totals.property_tax):>16}")
    click.echo("-" * 45)
    click.echo(f"{'Net income':<28} {format_money(totals.net_income):>16}")


@tax_group.command("strategy")
@click.option(
    "--filing-status",
    type=click.Choice([s.value for s in FilingStatus]),
    default=FilingStatus.SINGLE.value,
    show_default=True,
    help="Filing status",
)
@click.option("--salt-cap", default=str(DEFAULT_SALT_CAP), show_default=True, help="SALT deduction cap")
@click.option("--children", type=click.IntRange(min=0), default=0, show_default=True, help="Qualifying children")
@click.option("--child-care", default="0", show_default=True, help="Annual child care expenses")
@click.pass_context
def tax_strategy(ctx, filing_status: str, salt_cap: str, children: int, child_care: str):
    """Compare itemizing state and local taxes against the standard deduction.

    The figures are illustrations only and ignore most real tax rules.

    Examples:
        burnrate tax strategy --filing-status joint --children 2 --child-care 6000
    """
    db = ctx.obj["db"]
    service = TaxService(db)

    try:
        cap = parse_amount(salt_cap)
        care = parse_amount(child_care)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        estimate = service.estimate_strategy(
            filing_status=filing_status,
            salt_cap=cap,
            num_children=children,
            child_care_expenses=care,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Filing status: {estimate.filing_status.value}")
    click.echo(f"{'State and local taxes paid':<32} {format_money(estimate.total_state_and_local_tax):>14}")
    click.echo(f"{'Deductible SALT (capped)':<32} {format_money(estimate.deductible_salt):>14}")
    click.echo(f"{'Standard deduction':<32} {format_money(estimate.standard_deduction):>14}")
    if estimate.itemizing_better:
        click.echo("Itemizing beats the standard deduction.")
    else:
        click.echo("The standard deduction is larger; itemizing SALT alone does not help.")
    click.echo(f"{'Child tax credit':<32} {format_money(estimate.child_tax_credit):>14}")
    click.echo(f"{'Child care credit':<32} {format_money(estimate.child_care_credit):>14}")
    click.echo(f"{'Total credits':<32} {format_money(estimate.total_credits):>14}")


def register_commands(cli):
    """Register tax commands with main CLI."""
    cli.add_command(tax_group, name="tax")
