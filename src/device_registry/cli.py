"""Command-line interface for the Device Registry.

This module provides the CLI commands for running and managing
the Device Registry service.
"""

from typing import NoReturn

import click

from device_registry import __version__
from device_registry.core.config import get_settings
from device_registry.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="device-registry")
def cli() -> None:
    """Device Registry - device groups and system info per namespace.

    Settings are read from DEVICE_REGISTRY_* environment variables
    and the .env file.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Device Registry server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Device Registry server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "device_registry.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("init-db")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. In production, use migrations instead.
    """
    import asyncio

    from device_registry.infrastructure.persistence import models  # noqa: F401
    from device_registry.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command("issue-token")
@click.option("--namespace", required=True, help="Namespace the token is valid for")
@click.option("--subject", default="cli", show_default=True, help="Token subject")
@click.option(
    "--scope",
    "scopes",
    multiple=True,
    default=("devices.read", "devices.write"),
    show_default=True,
    help="Scope to grant; repeat for several",
)
@click.option("--expires-minutes", type=int, default=None, help="Lifetime (defaults to config)")
def issue_token(namespace: str, subject: str, scopes: tuple[str, ...], expires_minutes: int | None) -> None:
    """Mint a bearer token for a namespace."""
    from datetime import timedelta

    from device_registry.infrastructure.auth import jwt_service

    expires_delta = timedelta(minutes=expires_minutes) if expires_minutes else None
    token = jwt_service.create_access_token(
        subject=subject,
        namespace=namespace,
        scopes=scopes,
        expires_delta=expires_delta,
    )
    click.echo(token)


@cli.command()
def info() -> None:
    """Display Device Registry configuration."""
    settings = get_settings()

    click.echo(f"""
Device Registry v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Security:
  Auth:         {settings.auth_protocol}
  Token Expire: {settings.access_token_expire_minutes} minutes

Paging:
  Default:      {settings.default_page_limit}
  Maximum:      {settings.max_page_limit}

Messaging:
  Bus URL:      {settings.message_bus_url or 'in-memory'}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `device-registry` command and `python -m device_registry`.
    """
    cli()


if __name__ == "__main__":
    main()
