"""Repository layer for contact-store.

Implements the Generic Repository pattern for CRUD operations and metamodel-based
predicate queries with SQLAlchemy. Storage errors propagate unchanged.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from contact_store.orm.metamodel import EntityPath, default_path

T = TypeVar("T")


class GenericRepository(Generic[T]):
    """Generic repository implementing common CRUD operations.

    This base class provides reusable database operations that can be
    extended by specific repositories for custom business logic.
    """

    def __init__(self, session: Session, model_cls: type[T], path: EntityPath | None = None):
        """Initialize repository with a session and model class.

        Args:
            session: SQLAlchemy session for database operations.
            model_cls: The SQLAlchemy model class this repository manages.
            path: Metamodel path predicates are written against. Defaults to the
                model's default metamodel instance (e.g. ``QContact.contact``).
        """
        self.session = session
        self.model_cls = model_cls
        self.path = path if path is not None else default_path(model_cls)

    def add(self, entity: T) -> T:
        """Add a new entity to the session.

        Args:
            entity: The entity instance to add.

        Returns:
            The added entity.
        """
        self.session.add(entity)
        return entity

    def add_all(self, entities: list[T]) -> list[T]:
        """Add multiple entities to the session.

        Args:
            entities: List of entity instances to add.

        Returns:
            The added entities.
        """
        self.session.add_all(entities)
        return entities

    def save(self, entity: T) -> T:
        """Add an entity and flush it so storage assigns its id.

        Args:
            entity: The entity instance to save.

        Returns:
            The saved entity, with its id set.
        """
        self.session.add(entity)
        self.session.flush()
        return entity

    def get_by_id(self, _id: Any) -> T | None:
        """Retrieve an entity by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            The entity if found, None otherwise.
        """
        return self.session.get(self.model_cls, _id)

    def get_all(self, limit: int | None = None, offset: int | None = None) -> list[T]:
        """Retrieve all entities of this type.

        Args:
            limit: Maximum number of results to return.
            offset: Number of results to skip.

        Returns:
            List of all entities.
        """
        stmt = select(self.model_cls).order_by(self.model_cls.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def find_all(self, predicate: Any = None, order_by: Any = None, limit: int | None = None) -> list[T]:
        """Retrieve entities matching a metamodel predicate.

        Args:
            predicate: Boolean expression built from ``self.path``
                (e.g. ``QOrganisation.organisation.organisation_name == "Acme"``).
                None matches every entity.
            order_by: Ordering expression. Defaults to ascending id.
            limit: Maximum number of results to return.

        Returns:
            List of matching entities.
        """
        stmt = self.path.select()
        if predicate is not None:
            stmt = stmt.where(predicate)
        stmt = stmt.order_by(order_by if order_by is not None else self.path.id)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def find_one(self, predicate: Any) -> T | None:
        """Retrieve the single entity matching a predicate.

        Raises:
            sqlalchemy.exc.MultipleResultsFound: If more than one entity matches.
        """
        stmt = self.path.select().where(predicate)
        return self.session.execute(stmt).scalar_one_or_none()

    def count_where(self, predicate: Any) -> int:
        """Count entities matching a metamodel predicate."""
        subquery = self.path.select().where(predicate).subquery()
        return self.session.execute(select(func.count()).select_from(subquery)).scalar_one()

    def delete(self, entity: T) -> None:
        """Delete an entity from the database.

        Args:
            entity: The entity instance to delete.
        """
        self.session.delete(entity)

    def delete_by_id(self, _id: Any) -> bool:
        """Delete an entity by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            True if entity was deleted, False if not found.
        """
        entity = self.get_by_id(_id)
        if entity:
            self.delete(entity)
            return True
        return False

    def count(self) -> int:
        """Count total number of entities.

        Returns:
            Total count of entities.
        """
        return self.session.query(self.model_cls).count()

    def exists(self, _id: Any) -> bool:
        """Check if an entity exists by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            True if entity exists, False otherwise.
        """
        return self.get_by_id(_id) is not None
