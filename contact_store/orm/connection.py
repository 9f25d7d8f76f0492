import logging
import os
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import URL, Engine, create_engine

from contact_store.exceptions import EnvNotFoundError, MissingDataSourceError

logger = logging.getLogger("ContactStore")

TRUE_VALUES = ("1", "true", "yes", "on")


def _as_bool(value: str | bool | None, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return value.strip().lower() in TRUE_VALUES


@dataclass
class DataSourceSettings:
    """Database connection settings.

    Either ``url`` is given, or the PostgreSQL parts (host, port, username,
    password, database) from which a psycopg URL is built.
    """

    url: str | None = None
    host: str | None = None
    port: int = 5432
    username: str | None = None
    password: str | None = None
    database: str | None = None
    platform: str | None = None
    show_sql: bool = True
    generate_ddl: bool = True

    @property
    def db_url(self) -> str:
        """Construct the SQLAlchemy database URL."""
        if self.url:
            return self.url
        if self.host is None or self.username is None:
            raise MissingDataSourceError
        url = URL.create(
            "postgresql+psycopg",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )
        return url.render_as_string(hide_password=False)

    def get_engine(self) -> Engine:
        """Create a SQLAlchemy engine using the connection settings."""
        return create_engine(self.db_url, echo=self.show_sql)

    @classmethod
    def from_config(cls, config_path: Path | None = None) -> "DataSourceSettings":
        """Load connection settings from ``db.yaml`` in a configuration directory.

        Args:
            config_path: Configuration directory. If None, uses the CLI config path.

        Returns:
            DataSourceSettings instance with loaded configuration.

        Raises:
            FileNotFoundError: If ``db.yaml`` does not exist.
        """
        from omegaconf import DictConfig, OmegaConf

        from contact_store import cli

        resolved_path = config_path or cli.CONFIG_PATH
        if resolved_path is None:
            raise ValueError("Config path not provided and CONFIG_PATH is not set.")  # noqa: TRY003

        cfg = OmegaConf.load(Path(resolved_path) / "db.yaml")
        if not isinstance(cfg, DictConfig):
            raise TypeError("db.yaml must be a YAML mapping.")  # noqa: TRY003

        return cls(
            url=cfg.get("url"),
            host=cfg.get("host"),
            port=int(cfg.get("port", 5432)),
            username=cfg.get("user"),
            password=os.environ.get("POSTGRES_PASSWORD", cfg.get("password")),
            database=cfg.get("database"),
            platform=cfg.get("platform") or None,
            show_sql=_as_bool(cfg.get("show_sql"), True),
            generate_ddl=_as_bool(cfg.get("generate_ddl"), True),
        )

    @classmethod
    def from_env(cls) -> "DataSourceSettings":
        """Load connection settings from environment variables.

        ``CONTACT_STORE_DATABASE_URL`` takes precedence; otherwise the standard
        ``POSTGRES_*`` variables are used.

        Returns:
            DataSourceSettings instance with loaded configuration.

        Raises:
            EnvNotFoundError: If neither a URL nor PostgreSQL credentials are set.
        """
        platform = os.getenv("CONTACT_STORE_DATABASE_PLATFORM") or None
        show_sql = _as_bool(os.getenv("CONTACT_STORE_SHOW_SQL"), True)
        generate_ddl = _as_bool(os.getenv("CONTACT_STORE_GENERATE_DDL"), True)

        url = os.getenv("CONTACT_STORE_DATABASE_URL")
        if url:
            logger.info("Using data source from CONTACT_STORE_DATABASE_URL")
            return cls(url=url, platform=platform, show_sql=show_sql, generate_ddl=generate_ddl)

        for var in ("POSTGRES_USER", "POSTGRES_PASSWORD"):
            if not os.getenv(var):
                raise EnvNotFoundError(var)

        return cls(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            username=os.getenv("POSTGRES_USER"),
            password=os.getenv("POSTGRES_PASSWORD"),
            database=os.getenv("POSTGRES_DB"),
            platform=platform,
            show_sql=show_sql,
            generate_ddl=generate_ddl,
        )
