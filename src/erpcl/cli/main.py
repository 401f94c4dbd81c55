"""Main CLI entry point."""

import logging

import click

from erpcl.api.factories import create_http_backend
from erpcl.config import load_config
from erpcl.domain.errors import ValidationError
from erpcl.domain.session import Session
from erpcl.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from erpcl.cli.commands import (
    clients,
    dashboard,
    integrations,
    ledger,
    notifications,
    orders,
    settings,
    suppliers,
)


@click.group()
@click.option(
    "--api-url",
    help="ERP API root (overrides ERPCL_API_URL environment variable)",
    envvar="ERPCL_API_URL",
)
@click.option(
    "--token",
    help="Bearer token (overrides ERPCL_TOKEN environment variable)",
    envvar="ERPCL_TOKEN",
)
@click.option(
    "--timeout",
    type=float,
    help="Request timeout in seconds (overrides ERPCL_TIMEOUT environment variable)",
    envvar="ERPCL_TIMEOUT",
)
@click.option("--verbose", "-v", is_flag=True, help="Log requests and fallbacks")
@click.pass_context
def cli(ctx, api_url: str | None, token: str | None, timeout: float | None, verbose: bool):
    """erpcl - Command line client for the ERP backend.

    Lists and edits clients, purchase orders and ledger entries, shows the
    dashboard and notifications, and queries supplier, SII and bank
    integrations. When the backend is unreachable, list commands show
    labelled sample data.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Connect only when actually running a command (not when showing help).
    # A backend placed in ctx.obj beforehand is used as is.
    if ctx.invoked_subcommand is None or "backend" in ctx.obj:
        return

    try:
        config = load_config(api_url=api_url, token=token, timeout=timeout)
    except ValidationError as e:
        handle_domain_error(ctx, e)

    session = Session.open(token=config.token)
    backend = create_http_backend(session, config)
    ctx.obj["config"] = config
    ctx.obj["session"] = session
    ctx.obj["backend"] = backend

    def close():
        backend.close()
        session.close()

    ctx.call_on_close(close)


# Register all commands
notifications.register_commands(cli)
orders.register_commands(cli)
ledger.register_commands(cli)
clients.register_commands(cli)
dashboard.register_commands(cli)
suppliers.register_commands(cli)
settings.register_commands(cli)
integrations.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
