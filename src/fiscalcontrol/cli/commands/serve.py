"""Serve the JSON API."""

import click
import uvicorn

from fiscalcontrol.api.app import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8080, type=int, show_default=True, help="Bind port")
@click.pass_context
def serve(ctx, host: str, port: int):
    """Run the HTTP endpoint used by the web dashboard."""
    app = create_app(store=ctx.obj["store"], dispatcher=ctx.obj["dispatcher"])
    uvicorn.run(app, host=host, port=port)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
