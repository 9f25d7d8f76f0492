"""Contact Unit of Work for contact-store."""

from typing import Any

from contact_store.orm.repository.contact import ContactRepository
from contact_store.orm.repository.organisation import OrganisationRepository
from contact_store.orm.uow.base import BaseUnitOfWork


class ContactUnitOfWork(BaseUnitOfWork):
    """Unit of Work over the contact hierarchy.

    Provides lazy-initialized repositories sharing one session, so their
    changes commit or roll back together.
    """

    def __init__(self, session_factory: Any):
        super().__init__(session_factory)
        self._contact_repo: ContactRepository | None = None
        self._organisation_repo: OrganisationRepository | None = None

    def _reset_repositories(self) -> None:
        self._contact_repo = None
        self._organisation_repo = None

    @property
    def contacts(self) -> ContactRepository:
        """Get the polymorphic Contact repository.

        Raises:
            SessionNotSetError: If session is not initialized.
        """
        return self._get_repository("_contact_repo", ContactRepository)

    @property
    def organisations(self) -> OrganisationRepository:
        """Get the Organisation repository.

        Raises:
            SessionNotSetError: If session is not initialized.
        """
        return self._get_repository("_organisation_repo", OrganisationRepository)

    @staticmethod
    def available_repositories() -> list[str]:
        return ["contacts", "organisations"]
