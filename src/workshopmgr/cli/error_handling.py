"""CLI error handling helpers."""

import click

from workshopmgr.domain.errors import DomainError, StorageError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Validation errors list every problem on its own line.
    """
    if isinstance(error, ValidationError) and len(error.messages) > 1:
        click.echo("Error:", err=True)
        for message in error.messages:
            click.echo(f"  - {message}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


class StoreErrorGroup(click.Group):
    """Command group that reports storage failures instead of crashing."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except StorageError as e:
            click.echo(f"Error: {e}. Run with -v for details.", err=True)
            ctx.exit(1)
