"""Transaction manager bound to an entity manager factory."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar

from contact_store.exceptions import MissingEntityManagerFactoryError
from contact_store.orm.uow import ContactUnitOfWork

if TYPE_CHECKING:
    from contact_store.orm.config import EntityManagerFactory

R = TypeVar("R")


class TransactionManager:
    """Demarcates transactions over sessions of one entity manager factory.

    Errors raised inside a transaction roll it back and propagate unchanged.
    """

    def __init__(self, entity_manager_factory: "EntityManagerFactory"):
        if entity_manager_factory is None:
            raise MissingEntityManagerFactoryError
        self.entity_manager_factory = entity_manager_factory

    def begin(self) -> ContactUnitOfWork:
        """Return a new Unit of Work; enter it to open its session."""
        return ContactUnitOfWork(self.entity_manager_factory)

    @contextmanager
    def transactional(self) -> Iterator[ContactUnitOfWork]:
        """Run the block in a transaction, committing when it completes normally.

        Example:
            >>> with transaction_manager.transactional() as uow:
            ...     uow.organisations.save(Organisation(organisation_name="Acme"))
        """
        with self.begin() as uow:
            yield uow
            uow.commit()

    def execute(self, callback: Callable[[ContactUnitOfWork], R]) -> R:
        """Call ``callback`` with a Unit of Work inside a transaction and return its result."""
        with self.transactional() as uow:
            return callback(uow)
