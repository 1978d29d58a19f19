"""Due-date reminder command, meant to be run once a day by cron."""

import click
from fiscalcontrol.cli.error_handling import handle_domain_error
from fiscalcontrol.domain.errors import DomainError
from fiscalcontrol.domain.reminders import DEFAULT_HORIZON_DAYS, ReminderSweep
from fiscalcontrol.utils.date_parser import parse_date


@click.command("remind")
@click.option("--today", "today_str", help="Run as if today were this date (YYYY-MM-DD)")
@click.option(
    "--horizon",
    type=int,
    default=DEFAULT_HORIZON_DAYS,
    envvar="FISCALCONTROL_REMINDER_HORIZON",
    show_default=True,
    help="Send reminders for payments due in exactly this many days",
)
@click.option("--dry-run", is_flag=True, help="List the reminders without sending them")
@click.pass_context
def send_reminders(ctx, today_str: str | None, horizon: int, dry_run: bool):
    """Send WhatsApp reminders for payments due soon.

    Example crontab entry (08:00 every day):
        0 8 * * * fiscalcontrol remind
    """
    today = None
    if today_str:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    sweep = ReminderSweep(ctx.obj["store"], ctx.obj["dispatcher"])
    try:
        report = sweep.run(today=today, horizon_days=horizon, dry_run=dry_run)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if not report.reminders:
        click.echo(f"No payments due in {horizon} days.")
        return

    for reminder in report.reminders:
        record = reminder.record
        click.echo(
            f"{record.payment_date_real}  {record.organism:<20} ${record.amount:,.2f}  -> {record.contact_phone}"
        )

    if dry_run:
        click.echo(f"Dry run: {len(report.reminders)} reminder(s) not sent.")
    else:
        click.echo(f"Sent {report.sent} reminder(s), {report.failed} failed.")


def register_commands(cli):
    """Register remind command with main CLI."""
    cli.add_command(send_reminders)
