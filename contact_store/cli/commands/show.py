"""show command - Show mapped entities, their schema, or their query metamodel."""

from collections.abc import Callable
from typing import Annotated, Any, Literal

import typer

ResourceType = Literal["entities", "schema", "metamodel"]


def show_resources(
    resource: Annotated[
        ResourceType,
        typer.Argument(help="Resource type: entities, schema, or metamodel"),
    ],
    platform: Annotated[
        str,
        typer.Option("--platform", "-p", help="Platform to compile the schema DDL for"),
    ] = "postgresql",
) -> None:
    """Show the mapped contact types.

    RESOURCE types:
      entities   - Mapped entity types with their discriminator values
      schema     - CREATE TABLE statements for the scanned tables
      metamodel  - Query metamodel paths per entity

    Examples:
      contact-store show entities
      contact-store show schema --platform sqlite
      contact-store show metamodel
    """
    RESOURCE_HANDLERS[resource](platform=platform)


def print_entities() -> None:
    """Print the mapped entity types found in the scanned package."""
    from sqlalchemy import inspect

    from contact_store.orm.config import PersistenceConfiguration, scan_packages

    packages = PersistenceConfiguration.packages_to_scan()
    typer.echo(f"\nMapped Entities ({', '.join(packages)}):")
    typer.echo("-" * 60)
    for cls in scan_packages(packages):
        mapper = inspect(cls)
        identity = mapper.polymorphic_identity if mapper.polymorphic_identity is not None else "(abstract)"
        typer.echo(f"  {cls.__name__:<18} {mapper.local_table.name:<12} {identity}")


def print_schema(platform: str) -> None:
    """Print the DDL of the scanned tables."""
    from contact_store.orm.config import describe_schema

    try:
        statements = describe_schema(platform)
    except ValueError:
        typer.echo(f"Unknown platform '{platform}'", err=True)
        raise typer.Exit(1) from None

    for statement in statements:
        typer.echo(f"{statement};\n")


def print_metamodel() -> None:
    """Print the typed paths of each entity's query metamodel."""
    from contact_store.orm.config import PersistenceConfiguration, scan_packages
    from contact_store.orm.metamodel import default_path

    typer.echo("\nQuery Metamodel:")
    typer.echo("-" * 60)
    for cls in scan_packages(PersistenceConfiguration.packages_to_scan()):
        path = default_path(cls)
        parent = path.parent_metamodel.__name__ if path.parent_metamodel is not None else "-"
        typer.echo(f"\n  {type(path).__name__} (extends {parent})")
        for name, attribute_path in path.paths().items():
            typer.echo(f"    {name:<20} {type(attribute_path).__name__}[{attribute_path.type.__name__}]")


RESOURCE_HANDLERS: dict[str, Callable[..., Any]] = {
    "entities": lambda **_: print_entities(),
    "schema": lambda platform, **_: print_schema(platform),
    "metamodel": lambda **_: print_metamodel(),
}
