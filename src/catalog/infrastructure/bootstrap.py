"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Startup is fail-fast: each step raises, and the CLI turns the error into a
non-zero exit.
"""

from __future__ import annotations

import signal
from dataclasses import replace
from pathlib import Path

from loguru import logger

from catalog.application.product_service import ProductService
from catalog.infrastructure.log_config import configure_logging
from catalog.infrastructure.persistence.database import Database, RetryPolicy, connect
from catalog.infrastructure.persistence.sql_product_repository import SqlProductRepository
from catalog.infrastructure.rpc.server import CatalogServer
from catalog.infrastructure.rpc.servicer import ProductInfoServicer
from catalog.infrastructure.settings import Settings, load_settings

# Admin commands should fail fast rather than wait out a two-minute outage.
CLI_RETRY_POLICY = RetryPolicy(max_elapsed=10.0)


def open_database(settings: Settings, policy: RetryPolicy = RetryPolicy()) -> Database:
    """Connect with backoff and make sure the product table exists."""
    logger.info(
        "Connecting to database {}@{}:{}/{}",
        settings.db_user,
        settings.db_host,
        settings.db_port,
        settings.db_name,
    )
    database = Database(connect(settings.database_url, policy))
    database.ensure_schema()
    logger.info("Database schema ready")
    return database


def product_service(database: Database) -> ProductService:
    return ProductService(product_repo=SqlProductRepository(database))


def build_server(settings: Settings, database: Database) -> CatalogServer:
    servicer = ProductInfoServicer(product_service(database))
    return CatalogServer(servicer, port=settings.port, max_workers=settings.max_workers)


def admin_service(env_file: Path | None = None) -> ProductService:
    """ProductService bound to the configured database, for CLI commands."""
    settings = load_settings(env_file)
    configure_logging(settings.log_level)
    return product_service(open_database(settings, CLI_RETRY_POLICY))


def serve(port: int | None = None, env_file: Path | None = None) -> None:
    """Run the full startup sequence and block until SIGINT or SIGTERM."""
    settings = load_settings(env_file)
    if port is not None:
        settings = replace(settings, port=port)
    configure_logging(settings.log_level)

    database = open_database(settings)
    try:
        server = build_server(settings, database)
        server.start()

        def _shutdown(signum, _frame) -> None:
            logger.info("Received {}, shutting down", signal.Signals(signum).name)
            server.stop()

        signal.signal(signal.SIGINT, _shutdown)
        signal.signal(signal.SIGTERM, _shutdown)
        server.wait()
    finally:
        database.dispose()
    logger.info("Server stopped")
