"""SII and banking commands."""

import click

from erpcl.api.errors import BackendError
from erpcl.cli.error_handling import handle_backend_error, handle_domain_error, require_data
from erpcl.domain.errors import DomainError
from erpcl.domain.integration import IntegrationService
from erpcl.utils.money import format_pesos


@click.group()
def sii_group():
    """Query the SII (tax service)."""
    pass


@sii_group.command("validate-rut")
@click.argument("rut")
@click.pass_context
def validate_rut(ctx, rut: str):
    """Validate a RUT locally and against the SII registry."""
    try:
        result = IntegrationService(ctx.obj["backend"]).validate_rut(rut)
    except BackendError as e:
        handle_backend_error(ctx, e)
    status = "valid" if result.valid else "invalid"
    message = f" ({result.message})" if result.message else ""
    click.echo(f"{result.rut}: {status}{message}")
    if not result.valid:
        ctx.exit(1)


@sii_group.command("tax-status")
@click.argument("rut")
@click.pass_context
def tax_status(ctx, rut: str):
    """Show the tax standing of a taxpayer."""
    try:
        status = IntegrationService(ctx.obj["backend"]).tax_status(rut)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"RUT: {status.rut}")
    click.echo(f"Status: {status.status}")
    click.echo(f"Last declaration: {status.last_declaration or '-'}")
    click.echo(f"Next declaration: {status.next_declaration or '-'}")
    click.echo(f"Credit balance: {format_pesos(status.credit_balance)}")
    click.echo(f"Debt balance: {format_pesos(status.debt_balance)}")
    for remark in status.remarks:
        click.echo(f"  - {remark}")


@click.group()
def banking_group():
    """Query bank integrations."""
    pass


@banking_group.command("banks")
@click.pass_context
def list_banks(ctx):
    """List supported banks."""
    banks = require_data(ctx, IntegrationService(ctx.obj["backend"]).banks())
    for bank in banks:
        services = ", ".join(bank.services)
        click.echo(f"{bank.key:<16} {bank.code:<5} {bank.name:<32} {services}")


@banking_group.command("balance")
@click.option("--bank", "bank_key", required=True, help="Bank key, as shown by 'banking banks'")
@click.option("--account", "account_number", required=True, help="Account number")
@click.option("--rut", required=True, help="Account holder RUT")
@click.pass_context
def account_balance(ctx, bank_key: str, account_number: str, rut: str):
    """Query an account balance."""
    try:
        balance = IntegrationService(ctx.obj["backend"]).balance(bank_key, account_number, rut)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"{balance.bank} {balance.account_type} {balance.account_number}".strip())
    click.echo(f"  Balance: {format_pesos(balance.balance)}")
    click.echo(f"  Available: {format_pesos(balance.available_balance)}")
    if balance.last_update:
        click.echo(f"  Updated: {balance.last_update}")


def register_commands(cli: click.Group) -> None:
    """Register SII and banking commands with main CLI."""
    cli.add_command(sii_group, name="sii")
    cli.add_command(banking_group, name="banking")
