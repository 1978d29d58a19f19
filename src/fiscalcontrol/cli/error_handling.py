"""CLI error handling helpers."""

import click

from fiscalcontrol.domain.entities import Actor, Role
from fiscalcontrol.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def actor_options(func):
    """Attach --actor/--role options to a command."""
    func = click.option(
        "--role",
        required=True,
        type=click.Choice([r.value for r in Role], case_sensitive=False),
        envvar="FISCALCONTROL_ROLE",
        help="Role of the person running the command",
    )(func)
    func = click.option(
        "--actor",
        default="cli",
        envvar="FISCALCONTROL_ACTOR",
        show_default=True,
        help="Name recorded as the author of the action",
    )(func)
    return func


def build_actor(actor: str, role: str) -> Actor:
    return Actor(name=actor, role=Role.parse(role))
