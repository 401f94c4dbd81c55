"""Dashboard command."""

import click

from erpcl.domain.dashboard import DashboardService
from erpcl.utils.money import format_pesos


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show KPIs for clients, invoices, purchase invoices and purchase orders.

    Sources that cannot be loaded are shown as zero and listed at the end.
    """
    summary = DashboardService(ctx.obj["backend"]).summary()

    c = summary.clients
    click.echo("Clients")
    click.echo(f"  Total: {c.total}    Active: {c.active}    Potential: {c.potential}    New this month: {c.new_this_month}")

    i = summary.invoices
    click.echo("Invoices")
    click.echo(f"  Total: {i.total}    Paid: {i.paid}    Pending: {i.pending}    Overdue: {i.overdue}")
    click.echo(
        f"  Value: {format_pesos(i.total_value)}    Paid: {format_pesos(i.paid_value)}    "
        f"Pending: {format_pesos(i.pending_value)}    Overdue: {format_pesos(i.overdue_value)}"
    )

    p = summary.purchase_invoices
    click.echo("Purchase invoices")
    click.echo(f"  Total: {p.total}    Paid: {p.paid}    Pending: {p.pending}    Value: {format_pesos(p.total_value)}")

    o = summary.purchase_orders
    click.echo("Purchase orders")
    click.echo(
        f"  Total: {o.total}    Pending: {format_pesos(o.pending_amount)}    "
        f"Delivered: {format_pesos(o.delivered_amount)}"
    )

    margin = f"Net margin: {format_pesos(summary.net_margin)}"
    if summary.margin_percent is not None:
        margin += f" ({summary.margin_percent}%)"
    click.echo(margin)

    if summary.failed_sources:
        click.echo(
            f"Warning: could not load {', '.join(summary.failed_sources)}; shown as zero.",
            err=True,
        )


def register_commands(cli: click.Group) -> None:
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
