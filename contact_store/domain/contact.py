"""Abstract root of the contact hierarchy, stored in the single ``contact`` table."""

from typing import Any

from sqlalchemy import String
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from contact_store.orm.base import Base, Persistable


class Contact(Persistable, Base):
    """Abstract contact record.

    All subtypes share the ``contact`` table (single-table inheritance); the
    ``contactType`` column tells them apart and is maintained by the ORM.
    Callers can read ``contact_type`` and query on it, but not assign it.
    """

    __tablename__ = "contact"

    _contact_type: Mapped[str] = mapped_column("contactType", String(31), nullable=False)

    __mapper_args__ = {"polymorphic_on": "_contact_type"}

    def __init__(self, **kwargs: Any) -> None:
        if type(self) is Contact:
            raise TypeError("Contact is abstract; instantiate a subtype such as Organisation.")  # noqa: TRY003
        super().__init__(**kwargs)

    @hybrid_property
    def contact_type(self) -> str:
        return self._contact_type
