"""CLI commands that run the service or prepare its database."""

from __future__ import annotations

import click
from loguru import logger

from catalog.domain.exceptions import DomainException
from catalog.infrastructure import bootstrap
from catalog.infrastructure.log_config import configure_logging
from catalog.infrastructure.rpc.server import ServerBindError
from catalog.infrastructure.settings import load_settings


@click.command("serve")
@click.option("--port", type=int, default=None, help="Listen port (overrides PORT).")
def serve(port: int | None) -> None:
    """Start the ProductInfo gRPC server."""
    try:
        bootstrap.serve(port=port)
    except (DomainException, ServerBindError) as exc:
        logger.critical("Startup failed: {}", exc)
        raise click.ClickException(str(exc))


@click.command("init-db")
def init_db() -> None:
    """Connect to the database and create the product table if missing."""
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        database = bootstrap.open_database(settings, bootstrap.CLI_RETRY_POLICY)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    database.dispose()
    click.echo("Product table is ready.")
