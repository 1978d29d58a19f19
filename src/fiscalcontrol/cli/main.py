"""Main CLI entry point."""

import logging

import click
from fiscalcontrol.database.factories import create_sqlite_store
from fiscalcontrol.notifications.dispatcher import create_dispatcher

# Import and register all commands at module level
from fiscalcontrol.cli.commands import (
    register,
    history,
    review,
    remind,
    summary,
    serve,
    sheet,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FISCALCONTROL_DB_PATH environment variable)",
    envvar="FISCALCONTROL_DB_PATH",
)
@click.option(
    "--lock-timeout",
    type=float,
    envvar="FISCALCONTROL_LOCK_TIMEOUT",
    help="Seconds to wait for the store write lock (default 10)",
)
@click.option(
    "--api-key",
    envvar="FISCALCONTROL_CALLMEBOT_API_KEY",
    help="CallMeBot API key; without it WhatsApp messages are only logged",
)
@click.option("--verbose", "-v", count=True, help="Log progress (-vv for debug output)")
@click.pass_context
def cli(ctx, db_path: str | None, lock_timeout: float | None, api_key: str | None, verbose: int):
    """FiscalControl - fiscal and parafiscal payment register.

    Register payments, review them as an auditor, and send WhatsApp
    reminders three days before each due date.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path, lock_timeout=lock_timeout)
        store.connect()
        ctx.obj["store"] = store
        ctx.obj["dispatcher"] = create_dispatcher(api_key)
        ctx.obj["db_path"] = db_path
        ctx.call_on_close(store.disconnect)


# Register all commands
register.register_commands(cli)
history.register_commands(cli)
review.register_commands(cli)
remind.register_commands(cli)
summary.register_commands(cli)
serve.register_commands(cli)
sheet.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
