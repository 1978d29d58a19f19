"""Register payment command."""

import click
from fiscalcontrol.cli.error_handling import actor_options, build_actor, handle_domain_error
from fiscalcontrol.domain.entities import PaymentInput, PaymentType
from fiscalcontrol.domain.errors import DomainError, StoreUnavailableError
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService


@click.command("register")
@click.option("--organism", required=True, help="Receiving organism (e.g., SENIAT, IVSS)")
@click.option("--amount", required=True, help="Amount paid (e.g., 1500.00 or 'Bs 1,500.00')")
@click.option(
    "--due-date",
    required=True,
    help="Real payment / due date (YYYY-MM-DD or relative like 'in 3 days')",
)
@click.option(
    "--type",
    "payment_type",
    type=click.Choice([t.value for t in PaymentType], case_sensitive=False),
    default=PaymentType.FISCAL.value,
    show_default=True,
    help="Payment type",
)
@click.option("--date", "date_registered", help="Registration date (defaults to today)")
@click.option("--unit-code", help="Administrative unit code")
@click.option("--unit-name", help="Administrative unit name")
@click.option("--municipality", help="Municipality")
@click.option("--description", help="Free-text description")
@click.option("--phone", help="WhatsApp contact phone for reminders (e.g., 584121234567)")
@actor_options
@click.pass_context
def register_payment(
    ctx,
    organism: str,
    amount: str,
    due_date: str,
    payment_type: str,
    date_registered: str | None,
    unit_code: str | None,
    unit_name: str | None,
    municipality: str | None,
    description: str | None,
    phone: str | None,
    actor: str,
    role: str,
):
    """Register a payment for review.

    Examples:
        fiscalcontrol register --role payer --organism SENIAT --amount 100 --due-date 2024-03-15
        fiscalcontrol register --role admin --organism IVSS --type Parafiscal \\
            --amount 250.50 --due-date "in 3 days" --phone 584121234567
    """
    service = PaymentLifecycleService(ctx.obj["store"], ctx.obj["dispatcher"])
    data = PaymentInput(
        organism=organism,
        amount=amount,
        payment_date_real=due_date,
        payment_type=payment_type,
        date_registered=date_registered,
        unit_code=unit_code,
        unit_name=unit_name,
        municipality=municipality,
        description=description,
        contact_phone=phone,
    )

    try:
        record = service.register(data, build_actor(actor, role))
    except StoreUnavailableError as e:
        click.echo(f"Warning: saved locally only, the record store is unavailable ({e})", err=True)
        if e.record is not None:
            click.echo(f"  Unsaved ID: {e.record.id}", err=True)
        ctx.exit(1)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Registered payment {record.id}")
    click.echo(f"  Organism: {record.organism}")
    click.echo(f"  Type: {record.payment_type.label}")
    click.echo(f"  Amount: ${record.amount:,.2f}")
    click.echo(f"  Due date: {record.payment_date_real}")
    click.echo(f"  Status: {record.status.value}")
    if record.contact_phone:
        click.echo(f"  Reminder phone: {record.contact_phone}")


def register_commands(cli):
    """Register the register command with main CLI."""
    cli.add_command(register_payment)
