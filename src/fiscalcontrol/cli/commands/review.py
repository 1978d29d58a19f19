"""Approve and reject commands."""

import click
from fiscalcontrol.cli.error_handling import actor_options, build_actor, handle_domain_error
from fiscalcontrol.domain.entities import Action
from fiscalcontrol.domain.errors import DomainError
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService


def _review(ctx, record_id: str, action: Action, actor: str, role: str) -> None:
    service = PaymentLifecycleService(ctx.obj["store"], ctx.obj["dispatcher"])
    try:
        record = service.transition(record_id, action, build_actor(actor, role))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Payment {record.id} is now {record.status.value}")
    click.echo(f"  Organism: {record.organism}")
    click.echo(f"  Amount: ${record.amount:,.2f}")


@click.command("approve")
@click.argument("record_id")
@actor_options
@click.pass_context
def approve_payment(ctx, record_id: str, actor: str, role: str):
    """Approve a payment pending review."""
    _review(ctx, record_id, Action.APPROVE, actor, role)


@click.command("reject")
@click.argument("record_id")
@actor_options
@click.pass_context
def reject_payment(ctx, record_id: str, actor: str, role: str):
    """Reject a payment pending review."""
    _review(ctx, record_id, Action.REJECT, actor, role)


def register_commands(cli):
    """Register review commands with main CLI."""
    cli.add_command(approve_payment)
    cli.add_command(reject_payment)
