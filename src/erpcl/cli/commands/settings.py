"""Settings commands."""

import click

from erpcl.api.errors import BackendError
from erpcl.cli.error_handling import handle_backend_error, require_data
from erpcl.domain.settings import SettingsService
from erpcl.domain.status import label_for


@click.group()
def settings_group():
    """View company, user and integration settings."""
    pass


@settings_group.command("company")
@click.pass_context
def show_company(ctx):
    """Show the company configuration."""
    config = require_data(ctx, SettingsService(ctx.obj["backend"]).company())
    click.echo(f"Name: {config.name}")
    click.echo(f"RUT: {config.rut}")
    click.echo(f"Address: {config.address}, {config.city}, {config.region}")
    click.echo(f"Phone: {config.phone}    Email: {config.email}")
    if config.website:
        click.echo(f"Website: {config.website}")
    click.echo(f"Business: {config.business_type}    Tax regime: {config.tax_regime}")
    click.echo(f"IVA: {config.iva_rate}%    Currency: {config.currency}")
    click.echo(
        f"Prefixes: invoice {config.invoice_prefix}, quotation {config.quotation_prefix}, "
        f"purchase order {config.purchase_order_prefix}"
    )


@settings_group.command("users")
@click.pass_context
def list_users(ctx):
    """List users."""
    service = SettingsService(ctx.obj["backend"])
    users = require_data(ctx, service.load_users())
    if not users:
        click.echo("No users found.")
        return
    for user in users:
        state = "active" if user.active else "inactive"
        click.echo(f"{user.id!s:<4} {user.email:<28} {user.name:<24} {label_for(user.role):<14} {state}")


@settings_group.command("delete-user")
@click.argument("user_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_user(ctx, user_id: int, yes: bool):
    """Delete a user."""
    if not yes and not click.confirm(f"Are you sure you want to delete user {user_id}?"):
        click.echo("Deletion cancelled.")
        return
    try:
        SettingsService(ctx.obj["backend"]).delete_user(user_id)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Deleted user {user_id}")


@settings_group.command("integrations")
@click.pass_context
def show_integrations(ctx):
    """Show SII, bank and supplier integration settings."""
    config = require_data(ctx, SettingsService(ctx.obj["backend"]).integrations())
    for section, values in (("SII", config.sii), ("Banks", config.banks), ("Suppliers", config.suppliers)):
        click.echo(f"{section}:")
        if not values:
            click.echo("  (not configured)")
        for key, value in values.items():
            click.echo(f"  {key}: {value}")


@settings_group.command("stats")
@click.pass_context
def show_stats(ctx):
    """Show system statistics."""
    stats = require_data(ctx, SettingsService(ctx.obj["backend"]).stats())
    click.echo(f"Company: {stats.company_name}")
    click.echo(f"Users: {stats.users_total} ({stats.users_active} active)")
    for role, count in sorted(stats.users_by_role.items()):
        click.echo(f"  {role}: {count}")


def register_commands(cli: click.Group) -> None:
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
