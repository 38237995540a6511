"""CLI error handling helpers."""

import click

from finnexus.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_load_errors(errors) -> None:
    """Show degraded-read diagnostics on stderr without failing the command."""
    for message in errors:
        click.echo(f"Warning: {message}", err=True)
