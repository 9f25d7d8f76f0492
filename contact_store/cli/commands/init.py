"""init command - Create the contact schema in the configured database."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from contact_store.exceptions import DatabasePlatformMismatchError, EnvNotFoundError, MissingDataSourceError
from contact_store.orm.connection import DataSourceSettings

logger = logging.getLogger("ContactStore")

console = Console()


def init(
    url: Annotated[
        str | None,
        typer.Option("--url", help="Database URL; overrides db.yaml and the environment"),
    ] = None,
    show_sql: Annotated[
        bool,
        typer.Option("--show-sql/--no-show-sql", help="Echo SQL statements"),
    ] = False,
) -> None:
    """Create the tables of the mapped contact types.

    Connection settings come from --url, else configs/db.yaml, else the
    CONTACT_STORE_DATABASE_URL / POSTGRES_* environment variables.

    Examples:
      contact-store init --url sqlite:///contacts.db
      contact-store --config-path=/my/configs init
    """
    from contact_store.orm.config import PersistenceConfiguration

    try:
        settings = _load_settings(url)
    except (EnvNotFoundError, MissingDataSourceError, TypeError) as e:
        typer.echo(f"No data source configured: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        configuration = PersistenceConfiguration(
            settings.db_url, settings.platform, generate_ddl=True, show_sql=show_sql
        )
    except (MissingDataSourceError, ValueError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        with console.status("[bold blue]Creating schema..."):
            factory = configuration.entity_manager_factory()
        tables = ", ".join(table.name for table in factory.tables)
        types = ", ".join(cls.__name__ for cls in factory.managed_types)
    except (SQLAlchemyError, DatabasePlatformMismatchError) as e:
        typer.echo(f"Initialization failed: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        configuration.close()

    console.print(f"[green]✓[/green] Schema ready: {tables} ({types})")


def _load_settings(url: str | None) -> DataSourceSettings:
    import contact_store.cli as cli

    if url is not None:
        return DataSourceSettings(url=url)

    config_dir = cli.CONFIG_PATH or Path.cwd() / "configs"
    if (config_dir / "db.yaml").exists():
        logger.info(f"Using {config_dir / 'db.yaml'}")
        return DataSourceSettings.from_config(config_dir)
    return DataSourceSettings.from_env()
