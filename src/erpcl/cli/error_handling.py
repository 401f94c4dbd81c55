"""CLI error handling helpers."""

from typing import TypeVar

import click

from erpcl.api.errors import BackendError
from erpcl.api.loader import LoadResult, LoadState
from erpcl.domain.errors import DomainError

T = TypeVar("T")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_backend_error(ctx: click.Context, error: BackendError) -> None:
    """Render a failed backend write or lookup and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def sample_data_warning(result: LoadResult) -> None:
    """Label a degraded load so sample data is never shown as real."""
    if result.is_sample:
        click.echo(
            f"Warning: backend unavailable ({result.reason}); showing sample data.", err=True
        )


def require_data(ctx: click.Context, result: LoadResult[T]) -> T:
    """Return a load's data, exiting with an error when the load failed."""
    if result.state == LoadState.FAILED:
        click.echo(f"Error: {result.reason}", err=True)
        ctx.exit(1)
    sample_data_warning(result)
    return result.data  # type: ignore[return-value]
