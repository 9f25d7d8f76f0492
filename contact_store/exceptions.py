class EnvNotFoundError(Exception):
    """Raised when a required environment variable is not found."""

    def __init__(self, env_var_name: str):
        super().__init__(f"Environment variable '{env_var_name}' not found.")


class MissingDataSourceError(Exception):
    """Raised when the persistence configuration has no data source."""

    def __init__(self):
        super().__init__("A data source is required to build the entity manager factory.")


class DatabasePlatformMismatchError(Exception):
    """Raised when the database platform hint does not match the engine dialect."""

    def __init__(self, platform: str, dialect: str):
        super().__init__(f"Database platform '{platform}' does not match engine dialect '{dialect}'.")


class MissingEntityManagerFactoryError(Exception):
    """Raised when a transaction manager is built without an entity manager factory."""

    def __init__(self):
        super().__init__("Transaction manager requires an entity manager factory.")


class EntityManagerFactoryClosedError(Exception):
    """Raised when a session is requested from a closed entity manager factory."""

    def __init__(self):
        super().__init__("Entity manager factory is closed.")


class SessionNotSetError(Exception):
    """Raised when the database session is not set."""

    def __init__(self):
        super().__init__("Database session is not set.")


class ImmutableIdentifierError(Exception):
    """Raised when an already assigned surrogate id is changed."""

    def __init__(self, entity_name: str, current_id: int):
        super().__init__(f"'{entity_name}' already has id {current_id}; ids are immutable once assigned.")


class UnmappedEntityError(Exception):
    """Raised when a metamodel is requested for a class that is not mapped."""

    def __init__(self, cls_name: str):
        super().__init__(f"'{cls_name}' is not a mapped entity.")
