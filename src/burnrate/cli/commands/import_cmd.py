"""Import commands for extracted documents."""

from pathlib import Path

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.cli.formatting import format_frequency, format_money
from burnrate.domain.document import DocumentService
from burnrate.domain.entities import FinancialSignal, FlowDirection
from burnrate.domain.extraction import parse_model_response


def _describe(signal: FinancialSignal) -> str:
    sign = "+" if signal.flow == FlowDirection.INFLOW else "-"
    return (
        f"{signal.date[:10]:<10}  {signal.merchant[:24]:<24}  {signal.category[:16]:<16}  "
        f"{sign + format_money(signal.amount):>12}  {format_frequency(signal.frequency)}"
    )


@click.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="Document name to record (defaults to the file name)")
@click.option("--dry-run", is_flag=True, help="Show the signals that would be imported without saving")
@click.option("--review", is_flag=True, help="Confirm each extracted signal before saving")
@click.pass_context
def import_document(ctx, file_path: Path, name: str | None, dry_run: bool, review: bool):
    """Import signals from a document extraction result.

    FILE_PATH holds the model's reply for one document: a JSON object with a
    "signals" list, optionally surrounded by other text.

    Examples:
        burnrate import statement-2024-02.json
        burnrate import reply.txt --name "Chase February.pdf"
        burnrate import statement-2024-02.json --dry-run
        burnrate import statement-2024-02.json --review
    """
    if dry_run and review:
        click.echo("Error: --dry-run and --review cannot be combined", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = DocumentService(db, config.extraction)

    try:
        payload = parse_model_response(file_path.read_text(encoding="utf-8"))
        preview = service.preview_document(name or file_path.name, payload)
    except (OSError, ValueError) as e:
        handle_domain_error(ctx, e)

    for rejected in preview.rejected:
        click.echo(f"  Skipped row {rejected.index}: {rejected.reason}", err=True)

    if dry_run:
        count = len(preview.signals)
        click.echo(
            f"Would import {count} signal{'s' if count != 1 else ''} "
            f"from '{preview.document.file_name}'"
        )
        for signal in preview.signals:
            click.echo(f"  {_describe(signal)}")
        return

    if review:
        kept = [
            signal.id
            for signal in preview.signals
            if click.confirm(f"Keep {_describe(signal)}?", default=True)
        ]
        preview = preview.keep(kept)
        if not preview.signals and not click.confirm("No signals kept. Record the document anyway?"):
            click.echo("Import cancelled.")
            return

    try:
        result = service.save_preview(preview)
    except ValueError as e:
        handle_domain_error(ctx, e)

    document = result.document
    click.echo(
        f"Imported {document.signal_count} signal{'s' if document.signal_count != 1 else ''} "
        f"from '{document.file_name}' (document {document.id})"
    )


@click.group()
def document_group():
    """Manage imported documents."""
    pass


@document_group.command("list")
@click.pass_context
def list_documents(ctx):
    """List imported documents."""
    db = ctx.obj["db"]
    service = DocumentService(db)

    documents = service.list_documents()
    if not documents:
        click.echo("No documents found.")
        return

    click.echo("\nDocuments:")
    click.echo("-" * 80)
    for doc in documents:
        click.echo(
            f"{doc.id} | {doc.file_name:30s} | "
            f"{doc.uploaded_at:%Y-%m-%d %H:%M} | {doc.signal_count} signals"
        )


@document_group.command("delete")
@click.argument("document_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_document(ctx, document_id: str, yes: bool):
    """Delete a document and every signal extracted from it."""
    db = ctx.obj["db"]
    service = DocumentService(db)

    document = service.get_document(document_id)
    if document is None:
        click.echo(f"Error: Document {document_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete '{document.file_name}' and its {document.signal_count} signals?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = service.delete_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Deleted document '{document.file_name}' and {removed} signal{'s' if removed != 1 else ''}"
    )


def register_commands(cli):
    """Register import and document commands with main CLI."""
    cli.add_command(import_document)
    cli.add_command(document_group, name="document")
