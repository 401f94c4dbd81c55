"""Supplier store search and price comparison commands."""

import click

from erpcl.cli.error_handling import handle_domain_error, require_data
from erpcl.domain.errors import DomainError
from erpcl.domain.supplier import SupplierIntegrationService, filter_products, price_range
from erpcl.utils.money import format_pesos


def _echo_products(products) -> None:
    click.echo(f"{'Supplier':<12} {'Product':<40} {'Price':>10}  {'Stock':>6}  Available")
    click.echo("-" * 84)
    for p in products:
        click.echo(
            f"{p.supplier[:12]:<12} {p.name[:40]:<40} {format_pesos(p.price):>10}  "
            f"{p.stock:>6}  {'yes' if p.available else 'no'}"
        )


def _echo_range(prices) -> None:
    if prices.min is None:
        return
    click.echo(
        f"Price range: {format_pesos(prices.min)} - {format_pesos(prices.max)} "
        f"(average {format_pesos(prices.average)})"
    )


@click.group()
def suppliers_group():
    """Search and compare products in supplier stores."""
    pass


@suppliers_group.command("search")
@click.argument("query")
@click.option("--category", help="Product category")
@click.option("--supplier", "suppliers", multiple=True, help="Supplier key; repeat for more")
@click.option("--min-price", type=int, help="Minimum price in pesos")
@click.option("--max-price", type=int, help="Maximum price in pesos")
@click.option("--available", "available_only", is_flag=True, help="Only products in stock")
@click.pass_context
def search_products(ctx, query, category, suppliers, min_price, max_price, available_only):
    """Search products across supplier stores."""
    service = SupplierIntegrationService(ctx.obj["backend"])
    try:
        result = service.search(query, category=category, suppliers=suppliers)
    except DomainError as e:
        handle_domain_error(ctx, e)
    found = require_data(ctx, result)

    products = filter_products(
        found.products, min_price=min_price, max_price=max_price, available_only=available_only
    )
    for hit in found.suppliers:
        status = f"error: {hit.error}" if hit.error else f"{hit.total} result(s)"
        click.echo(f"{hit.name}: {status}")
    if not products:
        click.echo("No products found.")
        return
    _echo_products(products)
    _echo_range(price_range(products))


@suppliers_group.command("compare")
@click.argument("product_name")
@click.option("--category", help="Product category")
@click.pass_context
def compare_prices(ctx, product_name, category):
    """Compare the price of a product across suppliers."""
    service = SupplierIntegrationService(ctx.obj["backend"])
    try:
        result = service.compare(product_name, category=category)
    except DomainError as e:
        handle_domain_error(ctx, e)
    comparison = require_data(ctx, result)

    click.echo(f"{comparison.product_name}: {comparison.total_products} product(s)")
    for stats in comparison.suppliers:
        if stats.error:
            click.echo(f"  {stats.supplier}: error: {stats.error}")
            continue
        click.echo(
            f"  {stats.supplier:<12} {stats.product_count:>3} product(s)  "
            f"average {format_pesos(stats.average_price)}"
        )
    _echo_range(comparison.price_range)


@suppliers_group.command("categories")
@click.pass_context
def list_categories(ctx):
    """List product categories."""
    service = SupplierIntegrationService(ctx.obj["backend"])
    for category in require_data(ctx, service.categories()):
        click.echo(f"{category.id:<4} {category.name:<32} {category.product_count:>5} product(s)")


@suppliers_group.command("stores")
@click.pass_context
def list_stores(ctx):
    """List supplier store locations."""
    service = SupplierIntegrationService(ctx.obj["backend"])
    for store in require_data(ctx, service.stores()):
        click.echo(f"{store.name:<24} {store.address}, {store.city}  {store.phone}")


def register_commands(cli: click.Group) -> None:
    """Register supplier commands with main CLI."""
    cli.add_command(suppliers_group, name="suppliers")
