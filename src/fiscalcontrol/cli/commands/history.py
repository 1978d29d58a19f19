"""Payment history commands."""

import click
from fiscalcontrol.cli.date_filters import resolve_cli_date_range
from fiscalcontrol.cli.error_handling import handle_domain_error
from fiscalcontrol.domain.entities import PaymentStatus, PaymentType
from fiscalcontrol.domain.errors import DomainError
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService


@click.command("history")
@click.option("--search", help="Text to find in organism, description or municipality")
@click.option(
    "--type",
    "payment_type",
    type=click.Choice([t.value for t in PaymentType], case_sensitive=False),
    help="Only show this payment type",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in PaymentStatus], case_sensitive=False),
    help="Only show this status",
)
@click.option("--start-date", help="Due on or after this date (YYYY-MM-DD)")
@click.option("--end-date", help="Due on or before this date (YYYY-MM-DD)")
@click.option("--period", help="this-month, this-year, last-month, last-year, next-month, next-30-days")
@click.option("--oldest-first", is_flag=True, help="Sort by due date ascending")
@click.option("--verbose", "-v", is_flag=True, help="Show every field of each record")
@click.pass_context
def view_history(
    ctx,
    search: str | None,
    payment_type: str | None,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    oldest_first: bool,
    verbose: bool,
):
    """View registered payments with optional filters."""
    service = PaymentLifecycleService(ctx.obj["store"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    try:
        records = service.list_records(
            search=search,
            payment_type=PaymentType.parse(payment_type) if payment_type else None,
            status=PaymentStatus.parse(status) if status else None,
            start_date=start,
            end_date=end,
            newest_first=not oldest_first,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if not records:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {len(records)} payment(s):")
    if verbose:
        click.echo("=" * 100)
        for record in records:
            click.echo(f"\nPayment ID: {record.id}")
            click.echo(f"  Registered: {record.date_registered}")
            click.echo(f"  Organism: {record.organism}")
            click.echo(f"  Type: {record.payment_type.label}")
            click.echo(f"  Amount: ${record.amount:,.2f}")
            click.echo(f"  Due date: {record.payment_date_real}")
            click.echo(f"  Status: {record.status.value}")
            if record.unit_code or record.unit_name:
                click.echo(f"  Unit: {record.unit_code or ''} {record.unit_name or ''}".rstrip())
            if record.municipality:
                click.echo(f"  Municipality: {record.municipality}")
            if record.description:
                click.echo(f"  Description: {record.description}")
            if record.contact_phone:
                click.echo(f"  Phone: {record.contact_phone}")
            click.echo("-" * 100)
        return

    click.echo("-" * 110)
    click.echo(
        f"{'ID':<38} {'Due':<12} {'Organism':<20} {'Type':<14} {'Amount':>14} {'Status':<14}"
    )
    click.echo("-" * 110)
    for record in records:
        amount_str = f"${record.amount:,.2f}"
        click.echo(
            f"{record.id:<38} {str(record.payment_date_real):<12} {record.organism[:20]:<20} "
            f"{record.payment_type.value:<14} {amount_str:>14} {record.status.value:<14}"
        )


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(view_history)
