"""Client commands."""

import click

from erpcl.api.errors import BackendError
from erpcl.cli.error_handling import handle_backend_error, handle_domain_error, require_data
from erpcl.domain.client import ClientService
from erpcl.domain.entities import Client, ClientStatus, ClientType
from erpcl.domain.errors import DomainError
from erpcl.domain.status import label_for


@click.group()
def clients_group():
    """Manage clients."""
    pass


@clients_group.command("list")
@click.option("--search", help="Text to find in the name, RUT or email")
@click.option("--status", type=click.Choice([s.value for s in ClientStatus]))
@click.option("--type", "client_type", type=click.Choice([t.value for t in ClientType]))
@click.pass_context
def list_clients(ctx, search, status, client_type):
    """List clients."""
    service = ClientService(ctx.obj["backend"])
    require_data(ctx, service.load_clients())
    clients = service.list_clients(
        search=search,
        status=ClientStatus(status) if status else None,
        client_type=ClientType(client_type) if client_type else None,
    )

    if not clients:
        click.echo("No clients found.")
        return

    click.echo(f"{'ID':<5} {'RUT':<13} {'Name':<28} {'Email':<30} {'Type':<8} {'Status':<10}")
    click.echo("-" * 98)
    for client in clients:
        click.echo(
            f"{client.id!s:<5} {client.rut:<13} {client.name[:28]:<28} {client.email[:30]:<30} "
            f"{label_for(client.type):<8} {label_for(client.status):<10}"
        )
    click.echo(f"\n{len(clients)} client(s)")


@clients_group.command("create")
@click.option("--rut", required=True, help="RUT, e.g. 12.345.678-5")
@click.option("--name", required=True, help="Name or company name")
@click.option("--email", default="", help="Email")
@click.option("--phone", default="", help="Phone")
@click.option("--address", default="", help="Street address")
@click.option("--city", default="", help="City")
@click.option("--region", default="", help="Region")
@click.option("--type", "client_type", type=click.Choice([t.value for t in ClientType]), default=ClientType.COMPANY.value)
@click.option("--status", type=click.Choice([s.value for s in ClientStatus]), default=ClientStatus.ACTIVE.value)
@click.option("--notes", default="", help="Notes")
@click.pass_context
def create_client(ctx, rut, name, email, phone, address, city, region, client_type, status, notes):
    """Create a client. The RUT check digit is verified first."""
    service = ClientService(ctx.obj["backend"])
    client = Client(
        id=None,
        rut=rut,
        name=name,
        email=email,
        phone=phone,
        address=address,
        city=city,
        region=region,
        type=ClientType(client_type),
        status=ClientStatus(status),
        notes=notes,
    )
    try:
        service.save(client)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Created client '{name}'")


@clients_group.command("activate")
@click.argument("client_id", type=int)
@click.pass_context
def activate_client(ctx, client_id: int):
    """Turn a potential client into an active one."""
    service = ClientService(ctx.obj["backend"])
    service.load_clients()
    try:
        service.activate(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Activated client {client_id}")


@clients_group.command("delete")
@click.argument("client_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client_id: int, yes: bool):
    """Delete a client."""
    if not yes and not click.confirm(f"Are you sure you want to delete client {client_id}?"):
        click.echo("Deletion cancelled.")
        return
    service = ClientService(ctx.obj["backend"])
    try:
        service.delete(client_id)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Deleted client {client_id}")


def register_commands(cli: click.Group) -> None:
    """Register client commands with main CLI."""
    cli.add_command(clients_group, name="clients")
