"""Organisation repository for contact-store."""

from sqlalchemy.orm import Session

from contact_store.domain import Organisation
from contact_store.domain.organisation import rename as rename_organisation
from contact_store.orm.metamodel import EntityPath
from contact_store.orm.repository.base import GenericRepository


class OrganisationRepository(GenericRepository[Organisation]):
    """Repository for Organisation entities."""

    def __init__(self, session: Session, path: EntityPath | None = None):
        super().__init__(session, Organisation, path)

    def find_by_organisation_name(self, organisation_name: str) -> list[Organisation]:
        """Retrieve organisations whose name equals ``organisation_name`` exactly.

        Names carry no uniqueness constraint, so several rows may match.
        """
        return self.find_all(self.path.organisation_name == organisation_name)

    def search_by_organisation_name(self, fragment: str, limit: int | None = None) -> list[Organisation]:
        """Retrieve organisations whose name contains ``fragment``, ignoring case.

        Args:
            fragment: Text to look for. Wildcard characters are matched literally.
            limit: Maximum number of results to return.

        Returns:
            Matching organisations ordered by name.
        """
        return self.find_all(
            self.path.organisation_name.contains_ignore_case(fragment),
            order_by=self.path.organisation_name,
            limit=limit,
        )

    def rename(self, organisation: Organisation, organisation_name: str | None) -> Organisation:
        """Change an organisation's name; the change is written on the next flush."""
        rename_organisation(organisation, organisation_name)
        return organisation
