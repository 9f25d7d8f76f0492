"""contact-store command line: create the contact schema and inspect the mapping."""

import logging
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated

import typer

import contact_store.cli as cli
from contact_store.cli.commands.init import init
from contact_store.cli.commands.show import show_resources

logging.basicConfig(level=logging.INFO, format="%(message)s")

DEFAULT_CONFIG_DIR = "configs"


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"contact-store {get_version('contact-store')}")
        raise typer.Exit()


app = typer.Typer(
    name="contact-store",
    help="Create the contact table and inspect the mapped contact types, their DDL and query metamodel.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config-path",
            "-cp",
            help="Directory holding db.yaml (default: ./configs)",
            envvar="CONTACT_STORE_CONFIG_PATH",
        ),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Persistence tooling for the contacts domain.

    `init` reads the data source from db.yaml in the config directory, falling back to
    CONTACT_STORE_DATABASE_URL or the POSTGRES_* variables. `show` works offline.
    """
    cli.CONFIG_PATH = (config_path or Path.cwd() / DEFAULT_CONFIG_DIR).resolve()


app.command(name="init")(init)
app.command(name="show")(show_resources)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
