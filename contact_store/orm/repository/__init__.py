"""Repository module for contact-store ORM.

This module provides repository classes for data access layer operations.
"""

from contact_store.orm.repository.base import GenericRepository
from contact_store.orm.repository.contact import ContactRepository
from contact_store.orm.repository.organisation import OrganisationRepository

__all__ = [
    "ContactRepository",
    "GenericRepository",
    "OrganisationRepository",
]
