"""Persistence configuration for contact-store.

Wires an externally supplied data source to an entity manager factory and a
transaction manager. The factory scans exactly the package containing ``Contact``
for mapped types and, by default, generates their schema and echoes SQL.

Example:
    >>> configuration = PersistenceConfiguration("sqlite://")
    >>> with configuration.transaction_manager().transactional() as uow:
    ...     uow.organisations.save(Organisation(organisation_name="Acme"))
"""

import importlib
import logging
import pkgutil
from collections.abc import Sequence
from enum import Enum
from typing import Any

from sqlalchemy import URL, Engine, Sequence, Table, create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

from contact_store.domain import Contact
from contact_store.exceptions import (
    DatabasePlatformMismatchError,
    EntityManagerFactoryClosedError,
    MissingDataSourceError,
)
from contact_store.orm.base import Base
from contact_store.orm.connection import DataSourceSettings
from contact_store.orm.transaction import TransactionManager

logger = logging.getLogger("ContactStore")


class DatabasePlatform(str, Enum):
    """Database platform hint; ``DEFAULT`` accepts whatever the engine is."""

    DEFAULT = "default"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"
    SQL_SERVER = "mssql"

    @classmethod
    def _missing_(cls, value: object) -> "DatabasePlatform | None":
        if isinstance(value, str):
            for member in cls:
                if value.lower() in (member.value, member.name.lower()):
                    return member
        return None

    def matches(self, dialect_name: str) -> bool:
        if self is DatabasePlatform.DEFAULT:
            return True
        if self is DatabasePlatform.MYSQL:
            return dialect_name in ("mysql", "mariadb")
        return dialect_name == self.value


def _in_packages(module_name: str, packages: Sequence[str]) -> bool:
    return any(module_name == package or module_name.startswith(f"{package}.") for package in packages)


def scan_packages(packages: Sequence[str]) -> list[type]:
    """Import every module of the given packages and return their mapped classes.

    Args:
        packages: Dotted package names.

    Returns:
        Mapped classes defined in those packages, sorted by class name.
    """
    for package_name in packages:
        package = importlib.import_module(package_name)
        for module_info in pkgutil.walk_packages(getattr(package, "__path__", []), prefix=f"{package_name}."):
            importlib.import_module(module_info.name)

    mapped = [mapper.class_ for mapper in Base.registry.mappers if _in_packages(mapper.class_.__module__, packages)]
    return sorted(mapped, key=lambda cls: cls.__name__)


class EntityManagerFactory:
    """Produces sessions bound to one engine for the scanned entity types."""

    def __init__(self, engine: Engine, managed_types: Sequence[type], owns_engine: bool = False):
        self.engine = engine
        self.managed_types = tuple(managed_types)
        local_tables = {inspect(cls).local_table for cls in self.managed_types}
        self.tables: tuple[Table, ...] = tuple(t for t in Base.metadata.sorted_tables if t in local_tables)
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._owns_engine = owns_engine
        self.is_open = True

    def create_entity_manager(self) -> Session:
        """Create a new session.

        Raises:
            EntityManagerFactoryClosedError: If the factory has been closed.
        """
        if not self.is_open:
            raise EntityManagerFactoryClosedError
        return self._session_factory()

    def __call__(self) -> Session:
        return self.create_entity_manager()

    def close(self) -> None:
        """Close the factory, disposing the engine if the factory created it."""
        if not self.is_open:
            return
        self.is_open = False
        if self._owns_engine:
            self.engine.dispose()
        logger.info("Entity manager factory closed.")


class PersistenceConfiguration:
    """Assembles the entity manager factory and transaction manager.

    Both are singletons per configuration, built on first request (or eagerly with
    ``initialize()``). Initialization failures propagate unchanged and leave no
    factory behind.
    """

    def __init__(
        self,
        data_source: Engine | str | URL | None,
        database_platform: DatabasePlatform | str | None = None,
        *,
        generate_ddl: bool = True,
        show_sql: bool = True,
    ):
        """Initialize the configuration.

        Args:
            data_source: Engine, or database URL the configuration creates its own engine from.
            database_platform: Optional platform hint; must match the engine dialect.
            generate_ddl: Create the tables of the scanned types on startup.
            show_sql: Echo SQL statements through the ``sqlalchemy.engine`` logger.

        Raises:
            MissingDataSourceError: If ``data_source`` is None.
            ValueError: If ``database_platform`` is not a known platform.
        """
        if data_source is None:
            raise MissingDataSourceError
        self.data_source = data_source
        self.database_platform = DatabasePlatform(database_platform) if database_platform is not None else None
        self.generate_ddl = generate_ddl
        self.show_sql = show_sql
        self._entity_manager_factory: EntityManagerFactory | None = None
        self._transaction_manager: TransactionManager | None = None

    @classmethod
    def from_settings(cls, settings: DataSourceSettings) -> "PersistenceConfiguration":
        return cls(
            settings.db_url,
            settings.platform,
            generate_ddl=settings.generate_ddl,
            show_sql=settings.show_sql,
        )

    @staticmethod
    def packages_to_scan() -> list[str]:
        return [Contact.__module__.rpartition(".")[0]]

    def entity_manager_factory(self) -> EntityManagerFactory:
        if self._entity_manager_factory is None:
            self._entity_manager_factory = self._build_entity_manager_factory()
        return self._entity_manager_factory

    def transaction_manager(self) -> TransactionManager:
        if self._transaction_manager is None:
            self._transaction_manager = TransactionManager(self.entity_manager_factory())
        return self._transaction_manager

    def initialize(self) -> tuple[EntityManagerFactory, TransactionManager]:
        """Build both singletons eagerly, as at application startup."""
        return self.entity_manager_factory(), self.transaction_manager()

    def close(self) -> None:
        if self._entity_manager_factory is not None:
            self._entity_manager_factory.close()
        self._entity_manager_factory = None
        self._transaction_manager = None

    def _resolve_engine(self) -> tuple[Engine, bool]:
        if isinstance(self.data_source, Engine):
            if self.show_sql:
                self.data_source.echo = True
            return self.data_source, False
        if isinstance(self.data_source, (str, URL)):
            return create_engine(self.data_source, echo=self.show_sql), True
        raise TypeError(f"Unsupported data source type: {type(self.data_source).__name__}")  # noqa: TRY003

    def _check_platform(self, engine: Engine) -> None:
        if self.database_platform is None:
            return
        dialect_name = engine.dialect.name
        if not self.database_platform.matches(dialect_name):
            raise DatabasePlatformMismatchError(self.database_platform.value, dialect_name)

    def _build_entity_manager_factory(self) -> EntityManagerFactory:
        engine, owns_engine = self._resolve_engine()
        try:
            self._check_platform(engine)
            packages = self.packages_to_scan()
            managed_types = scan_packages(packages)
            logger.info(f"Scanned {', '.join(packages)}: {', '.join(cls.__name__ for cls in managed_types)}")

            factory = EntityManagerFactory(engine, managed_types, owns_engine=owns_engine)
            if self.generate_ddl:
                Base.metadata.create_all(engine, tables=list(factory.tables))
                logger.info(f"Generated schema for tables: {', '.join(t.name for t in factory.tables)}")
        except Exception:
            if owns_engine:
                engine.dispose()
            raise

        logger.info(f"Entity manager factory ready on '{engine.url.render_as_string(hide_password=True)}'")
        return factory


def describe_schema(platform: DatabasePlatform | str = DatabasePlatform.POSTGRESQL) -> list[str]:
    """Compile the DDL of the scanned tables for a platform without connecting.

    Args:
        platform: Target platform. ``DEFAULT`` compiles with PostgreSQL.

    Returns:
        One ``CREATE SEQUENCE`` statement per sequence the platform needs for id
        generation, followed by one ``CREATE TABLE`` statement per table.
    """
    from sqlalchemy.schema import CreateSequence, CreateTable

    platform = DatabasePlatform(platform)
    dialect_name = "postgresql" if platform is DatabasePlatform.DEFAULT else platform.value
    dialect = _load_dialect(dialect_name)

    managed_types = scan_packages(PersistenceConfiguration.packages_to_scan())
    local_tables = {inspect(cls).local_table for cls in managed_types}
    tables = [table for table in Base.metadata.sorted_tables if table in local_tables]

    sequences: list[Sequence] = []
    for table in tables:
        for column in table.columns:
            if isinstance(column.default, Sequence) and _needs_sequence(column.default, dialect):
                sequences.append(column.default)

    statements = [str(CreateSequence(sequence).compile(dialect=dialect)).strip() for sequence in sequences]
    return statements + [str(CreateTable(table).compile(dialect=dialect)).strip() for table in tables]


def _needs_sequence(sequence: Sequence, dialect: Any) -> bool:
    return dialect.supports_sequences and not (sequence.optional and dialect.sequences_optional)


def _load_dialect(dialect_name: str) -> Any:
    return URL.create(dialect_name).get_dialect()()
