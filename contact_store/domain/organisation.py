"""Organisation, the only concrete contact type."""

from sqlalchemy import Text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from contact_store.domain.contact import Contact


class Organisation(Contact):
    """Organisation-type contact.

    ``organisation_name`` is read-only outside this module; use :func:`rename`.
    Any string is accepted, including the empty string.
    """

    DISCRIMINATOR_VALUE = "ORGANISATION"

    __mapper_args__ = {"polymorphic_identity": DISCRIMINATOR_VALUE}

    # Nullable: other subtypes share the contact table.
    _organisation_name: Mapped[str | None] = mapped_column("organisationName", Text, nullable=True)

    def __init__(self, organisation_name: str | None = None) -> None:
        super().__init__()
        self._organisation_name = organisation_name

    @hybrid_property
    def organisation_name(self) -> str | None:
        return self._organisation_name


def rename(organisation: Organisation, organisation_name: str | None) -> None:
    """Change an organisation's name.

    The change is written on the next flush of the session holding the
    organisation. No validation is applied; ``None`` and ``""`` are stored as given.
    """
    organisation._organisation_name = organisation_name  # noqa: SLF001
