"""Ledger (accounting) commands."""

from pathlib import Path

import click

from erpcl.api.errors import BackendError
from erpcl.cli.date_filters import date_range_options, resolve_cli_date_range
from erpcl.cli.error_handling import (
    handle_backend_error,
    handle_domain_error,
    require_data,
    sample_data_warning,
)
from erpcl.domain.errors import DomainError
from erpcl.domain.ledger import REPORT_KINDS, LedgerService
from erpcl.utils.date_parser import parse_date
from erpcl.utils.money import format_pesos


def _parse_line(text: str) -> tuple[str, str, str]:
    """Split 'ACCOUNT:DEBIT:CREDIT'."""
    parts = text.split(":")
    if len(parts) != 3:
        raise click.BadParameter(f"'{text}' is not ACCOUNT:DEBIT:CREDIT", param_hint="--line")
    account, debit, credit = parts
    return account, debit, credit


def _echo_report(data, indent: int = 0) -> None:
    """Print a report payload as an indented outline."""
    pad = "  " * indent
    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                click.echo(f"{pad}{key}:")
                _echo_report(value, indent + 1)
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                click.echo(f"{pad}{key}: {format_pesos(round(value))}")
            else:
                click.echo(f"{pad}{key}: {value}")
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, (dict, list)):
                _echo_report(item, indent)
                click.echo(f"{pad}--")
            else:
                click.echo(f"{pad}- {item}")
    else:
        click.echo(f"{pad}{data}")


@click.group()
def ledger_group():
    """Manage ledger entries and accounting reports."""
    pass


@ledger_group.command("list")
@click.option("--search", help="Text to find in the reference or description")
@click.option("--account", help="Only entries with a line on this account code")
@click.option("--verbose", "-v", is_flag=True, help="Show the lines of each entry")
@date_range_options
@click.pass_context
def list_entries(ctx, search, account, verbose, start_date, end_date, period_flags):
    """List ledger entries."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    service = LedgerService(ctx.obj["backend"])
    require_data(ctx, service.load_entries())
    entries = service.list_entries(search=search, start_date=start, end_date=end, account=account)

    if not entries:
        click.echo("No ledger entries found.")
        return

    click.echo(f"{'ID':<5} {'Date':<10}  {'Reference':<14} {'Description':<36} {'Debit':>12} {'Credit':>12}")
    click.echo("-" * 96)
    for entry in entries:
        click.echo(
            f"{entry.id!s:<5} {entry.date}  {entry.reference:<14} {entry.description[:36]:<36} "
            f"{format_pesos(entry.total_debit):>12} {format_pesos(entry.total_credit):>12}"
        )
        if verbose:
            for line in entry.lines:
                click.echo(
                    f"        {line.account:<6} {line.description[:40]:<40} "
                    f"{format_pesos(line.debit):>12} {format_pesos(line.credit):>12}"
                )


@ledger_group.command("accounts")
@click.pass_context
def list_accounts(ctx):
    """Show the chart of accounts."""
    service = LedgerService(ctx.obj["backend"])
    chart = require_data(ctx, service.load_chart())
    for code, name in sorted(chart.items()):
        click.echo(f"{code:<8} {name}")


@ledger_group.command("create")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Line as ACCOUNT:DEBIT:CREDIT; repeat for each line (at least two)",
)
@click.option("--description", required=True, help="Entry description")
@click.option("--reference", required=True, help="Reference, e.g. an invoice number")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.pass_context
def create_entry(ctx, lines, description, reference, entry_date):
    """Create a balanced ledger entry.

    Line descriptions are filled in from the chart of accounts.

    Examples:
        erpcl ledger create --description "Venta" --reference FAC-1 --line 1201:119000:0 --line 4101:0:100000 --line 2105:0:19000
    """
    parsed_date = None
    if entry_date:
        try:
            parsed_date = parse_date(entry_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    service = LedgerService(ctx.obj["backend"])
    sample_data_warning(service.load_chart())
    form = service.new_form(entry_date=parsed_date, reference=reference, description=description)
    for index, text in enumerate(lines):
        account, debit, credit = _parse_line(text)
        if index >= len(form):
            form.add_line()
        form.update_line(index, "account", account)
        form.update_line(index, "debit", debit)
        form.update_line(index, "credit", credit)

    try:
        service.save(form)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except BackendError as e:
        handle_backend_error(ctx, e)

    click.echo(
        f"Created ledger entry: debit {format_pesos(form.total_debit)}, "
        f"credit {format_pesos(form.total_credit)}"
    )


@ledger_group.command("report")
@click.argument("kind", type=click.Choice(REPORT_KINDS))
@click.option("--account", help="Account code (general ledger only)")
@date_range_options
@click.pass_context
def show_report(ctx, kind, account, start_date, end_date, period_flags):
    """Show a balance sheet, income statement or general ledger."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    service = LedgerService(ctx.obj["backend"])
    data = require_data(ctx, service.report(kind, start_date=start, end_date=end, account=account))
    if not data:
        click.echo("Report is empty.")
        return
    _echo_report(data)


@ledger_group.command("pdf")
@click.argument("kind", type=click.Choice(REPORT_KINDS))
@click.option("--account", help="Account code (general ledger only)")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to save the PDF in",
)
@date_range_options
@click.pass_context
def report_pdf(ctx, kind, account, output_dir, start_date, end_date, period_flags):
    """Download a report as reporte-contable-<KIND>.pdf."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    service = LedgerService(ctx.obj["backend"])
    try:
        path = service.download_report_pdf(
            kind, start_date=start, end_date=end, account=account, directory=output_dir
        )
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Saved {path}")


def register_commands(cli: click.Group) -> None:
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
