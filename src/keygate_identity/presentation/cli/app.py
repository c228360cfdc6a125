"""Keygate CLI application using Typer.

This module provides command-line utilities for Keygate deployments:
secret generation and database schema management.
"""

import asyncio
import secrets

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import create_async_engine

from keygate_config import configure_logging, get_settings
from keygate_identity.infrastructure.persistence.sqlalchemy import (
    create_tables,
    drop_tables,
)

app = typer.Typer(
    name="keygate",
    help="Keygate - user identity and authentication CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database schema management",
    no_args_is_help=True,
)
app.add_typer(db_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Keygate configuration.

    Generates two required secrets:
    - JWT_SECRET_KEY: Secret for signing session, verification and reset tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Keygate Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of entropy for HS256
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


def _database_display(database_url: str) -> str:
    """Strip credentials from a database URL."""
    return database_url.split("@")[-1] if "@" in database_url else database_url


async def _run_schema_change(*, drop: bool, create: bool) -> None:
    engine = create_async_engine(get_settings().database_url, pool_pre_ping=True)
    try:
        if drop:
            await drop_tables(engine)
        if create:
            await create_tables(engine)
    finally:
        await engine.dispose()


@db_app.command("init")
def db_init() -> None:
    """Create all missing tables and indexes (idempotent)."""
    configure_logging()
    console.print(f"Database: {_database_display(get_settings().database_url)}")
    asyncio.run(_run_schema_change(drop=False, create=True))
    console.print("[green]Database initialized successfully![/green]")


@db_app.command("reset")
def db_reset(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip the confirmation prompt",
    ),
) -> None:
    """Drop and recreate all tables (DELETES ALL DATA)."""
    configure_logging()
    console.print(f"Database: {_database_display(get_settings().database_url)}")

    if not force:
        console.print(
            "[bold red]WARNING: This will DELETE ALL DATA in the database![/bold red]"
        )
        if not typer.confirm("Continue?"):
            console.print("Aborted.")
            raise typer.Exit(code=1)

    asyncio.run(_run_schema_change(drop=True, create=True))
    console.print("[green]Database recreated successfully![/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
