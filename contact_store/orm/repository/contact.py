"""Contact repository for contact-store.

Queries over the whole contact hierarchy; rows load as their concrete subtype.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from contact_store.domain import Contact
from contact_store.orm.metamodel import EntityPath
from contact_store.orm.repository.base import GenericRepository


class ContactRepository(GenericRepository[Contact]):
    """Polymorphic repository for all contact types."""

    def __init__(self, session: Session, path: EntityPath | None = None):
        super().__init__(session, Contact, path)

    def count_by_type(self) -> dict[str, int]:
        """Count contacts per discriminator value.

        Returns:
            Mapping of discriminator value (e.g. ``"ORGANISATION"``) to row count.
        """
        stmt = select(Contact.contact_type, func.count(Contact.id)).group_by(Contact.contact_type)
        return {contact_type: count for contact_type, count in self.session.execute(stmt).all()}
