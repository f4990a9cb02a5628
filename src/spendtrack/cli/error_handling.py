"""CLI error handling helpers."""

import logging

import click

from spendtrack.domain.errors import DomainError, UpstreamFailureError

logger = logging.getLogger(__name__)

HANDLED_ERRORS = (DomainError, UpstreamFailureError)


def handle_domain_error(ctx: click.Context, error: DomainError | UpstreamFailureError) -> None:
    """Render a domain or store error and exit with failure."""
    logger.debug("Command failed", exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
