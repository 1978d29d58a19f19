"""Sheet export and import commands."""

import click
from fiscalcontrol.cli.error_handling import actor_options, build_actor, handle_domain_error
from fiscalcontrol.domain.errors import DomainError
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService
from fiscalcontrol.domain.sheet import SheetImportService, write_sheet


@click.command("export")
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="CSV file to write (default: stdout)",
)
@click.pass_context
def export_sheet(ctx, output):
    """Export all payments as CSV with the register sheet headers."""
    service = PaymentLifecycleService(ctx.obj["store"])
    try:
        records = service.list_records(newest_first=False, include_unsynced=False)
    except DomainError as e:
        handle_domain_error(ctx, e)

    count = write_sheet(records, output)
    if output.name != "<stdout>":
        click.echo(f"Exported {count} payment(s) to {output.name}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@actor_options
@click.pass_context
def import_sheet(ctx, csv_file: str, actor: str, role: str):
    """Import payments from a CSV export of the register sheet."""
    service = SheetImportService(ctx.obj["store"])

    try:
        result = service.import_sheet(csv_file, build_actor(actor, role))
    except (DomainError, ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} payments")
    click.echo(f"  Skipped: {result['skipped']} already stored")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register sheet commands with main CLI."""
    cli.add_command(export_sheet)
    cli.add_command(import_sheet)
