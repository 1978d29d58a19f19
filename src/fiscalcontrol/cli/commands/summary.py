"""Summary command."""

import click
from fiscalcontrol.cli.error_handling import handle_domain_error
from fiscalcontrol.domain.errors import DomainError
from fiscalcontrol.domain.summary import SummaryService
from fiscalcontrol.utils.date_parser import parse_date


@click.command("summary")
@click.option("--today", "today_str", help="Reference date for upcoming deadlines")
@click.pass_context
def show_summary(ctx, today_str: str | None):
    """Show totals, spending per payment type and upcoming deadlines."""
    today = None
    if today_str:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    try:
        summary = SummaryService(ctx.obj["store"]).build_summary(today=today)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Total paid:         ${summary.total_spent:,.2f}")
    click.echo(f"Records:            {summary.record_count}")
    click.echo(f"Pending review:     ${summary.pending_amount:,.2f}")
    click.echo(f"Annual projection:  ${summary.projected_annual:,.2f}")

    if summary.by_type:
        click.echo("\nBy payment type:")
        click.echo("-" * 80)
        click.echo(f"{'Type':<32} {'Count':>6} {'Total':>18} {'Projected':>18}")
        click.echo("-" * 80)
        for item in summary.by_type:
            click.echo(
                f"{item.payment_type.label:<32} {item.count:>6} "
                f"{f'${item.total_spent:,.2f}':>18} {f'${item.projected_annual:,.2f}':>18}"
            )

    click.echo("\nUpcoming deadlines (next 30 days):")
    if not summary.upcoming_deadlines:
        click.echo("  None")
    for record in summary.upcoming_deadlines:
        click.echo(
            f"  {record.payment_date_real}  {record.organism:<20} ${record.amount:,.2f}  {record.status.value}"
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(show_summary)
