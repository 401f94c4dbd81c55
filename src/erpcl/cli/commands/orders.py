"""Purchase order commands."""

from pathlib import Path

import click

from erpcl.api.errors import BackendError
from erpcl.cli.date_filters import date_range_options, resolve_cli_date_range
from erpcl.cli.error_handling import handle_backend_error, handle_domain_error, require_data
from erpcl.domain.entities import OrderStatus
from erpcl.domain.errors import DomainError
from erpcl.domain.purchase_order import PurchaseOrderService, order_amounts
from erpcl.domain.status import label_for
from erpcl.utils.date_parser import parse_date
from erpcl.utils.money import format_pesos

STATUS_CHOICES = [status.value for status in OrderStatus]


def _loaded_service(ctx) -> PurchaseOrderService:
    service = PurchaseOrderService(ctx.obj["backend"])
    require_data(ctx, service.load_orders())
    return service


def _parse_item(text: str) -> tuple[str, str, str, str]:
    """Split 'DESCRIPTION:QUANTITY:UNIT_PRICE[:UNIT]'."""
    parts = text.split(":")
    if len(parts) not in (3, 4):
        raise click.BadParameter(
            f"'{text}' is not DESCRIPTION:QUANTITY:UNIT_PRICE[:UNIT]", param_hint="--item"
        )
    description, quantity, unit_price = parts[:3]
    unit = parts[3] if len(parts) == 4 else "unidades"
    return description, quantity, unit_price, unit


@click.group()
def orders_group():
    """Manage purchase orders."""
    pass


@orders_group.command("list")
@click.option("--search", help="Text to find in the order number or supplier name")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only orders in this status")
@date_range_options
@click.pass_context
def list_orders(ctx, search, status, start_date, end_date, period_flags):
    """List purchase orders with totals for the shown orders."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    service = _loaded_service(ctx)
    orders = service.list_orders(
        search=search,
        status=OrderStatus(status) if status else None,
        start_date=start,
        end_date=end,
    )

    if not orders:
        click.echo("No purchase orders found.")
        return

    click.echo(f"{'ID':<5} {'Number':<18} {'Date':<10}  {'Supplier':<28} {'Status':<10} {'Total':>12}")
    click.echo("-" * 90)
    for order in orders:
        click.echo(
            f"{order.id!s:<5} {order.order_number:<18} {order.date}  {order.supplier_name[:28]:<28} "
            f"{label_for(order.status):<10} {format_pesos(order.total):>12}"
        )

    amounts = order_amounts(orders)
    click.echo("-" * 90)
    click.echo(f"Orders: {amounts.count}    Total: {format_pesos(amounts.total_amount)}")
    click.echo(f"Pending: {format_pesos(amounts.pending_amount)}    Delivered: {format_pesos(amounts.delivered_amount)}")


@orders_group.command("show")
@click.argument("order_id", type=int)
@click.pass_context
def show_order(ctx, order_id: int):
    """Show one purchase order with its items."""
    service = _loaded_service(ctx)
    try:
        order = service.get_order(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Order {order.order_number} (ID: {order.id})")
    click.echo(f"  Supplier: {order.supplier_name}")
    click.echo(f"  Date: {order.date}    Delivery: {order.delivery_date or '-'}")
    click.echo(f"  Status: {label_for(order.status)}")
    if order.notes:
        click.echo(f"  Notes: {order.notes}")
    click.echo("  Items:")
    for item in order.items:
        click.echo(
            f"    {item.description:<30} {item.quantity:>8} {item.unit:<10} "
            f"x {format_pesos(item.unit_price):>10} = {format_pesos(item.total):>12}"
        )
    click.echo(f"  Subtotal: {format_pesos(order.subtotal)}")
    click.echo(f"  IVA: {format_pesos(order.tax)}")
    click.echo(f"  Total: {format_pesos(order.total)}")


@orders_group.command("advance")
@click.argument("order_id", type=int)
@click.pass_context
def advance_order(ctx, order_id: int):
    """Move an order to its next status (pending -> approved -> ordered -> delivered)."""
    service = _loaded_service(ctx)
    try:
        new_status = service.advance(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Order {order_id} is now {label_for(new_status)}")


@orders_group.command("cancel")
@click.argument("order_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def cancel_order(ctx, order_id: int, yes: bool):
    """Cancel an order that is not yet delivered."""
    service = _loaded_service(ctx)
    if not yes and not click.confirm(f"Are you sure you want to cancel order {order_id}?"):
        click.echo("Cancellation aborted.")
        return
    try:
        service.cancel(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Cancelled order {order_id}")


@orders_group.command("pdf")
@click.argument("order_id", type=int)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to save the PDF in",
)
@click.pass_context
def order_pdf(ctx, order_id: int, output_dir: Path):
    """Download the order sheet as orden-compra-<ID>.pdf."""
    service = PurchaseOrderService(ctx.obj["backend"])
    try:
        path = service.download_pdf(order_id, directory=output_dir)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Saved {path}")


@orders_group.command("create")
@click.option("--supplier", "supplier_id", type=int, required=True, help="Supplier ID")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Item as DESCRIPTION:QUANTITY:UNIT_PRICE[:UNIT]; repeat for more items",
)
@click.option("--date", "order_date", help="Order date (default: today)")
@click.option("--delivery-date", help="Delivery date (default: 10 days after the order date)")
@click.option("--notes", default="", help="Notes")
@click.pass_context
def create_order(ctx, supplier_id, items, order_date, delivery_date, notes):
    """Create a purchase order.

    Item totals, subtotal, IVA (19%) and total are computed.

    Examples:
        erpcl orders create --supplier 1 --item "Cemento Portland 25kg:100:2500:bolsas"
    """
    try:
        parsed_date = parse_date(order_date) if order_date else None
        parsed_delivery = parse_date(delivery_date) if delivery_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    service = PurchaseOrderService(ctx.obj["backend"])
    form = service.new_form(
        supplier_id=supplier_id,
        order_date=parsed_date,
        delivery_date=parsed_delivery,
        notes=notes,
    )
    try:
        for index, text in enumerate(items):
            description, quantity, unit_price, unit = _parse_item(text)
            if index > 0:
                form.add_line()
            form.update_line(index, "description", description)
            form.update_line(index, "quantity", quantity)
            form.update_line(index, "unit_price", unit_price)
            form.update_line(index, "unit", unit)

        service.save(form)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)

    click.echo(f"Created purchase order for supplier {supplier_id}")
    click.echo(f"  Subtotal: {format_pesos(form.subtotal)}")
    click.echo(f"  IVA: {format_pesos(form.tax)}")
    click.echo(f"  Total: {format_pesos(form.total)}")


def register_commands(cli: click.Group) -> None:
    """Register purchase order commands with main CLI."""
    cli.add_command(orders_group, name="orders")
