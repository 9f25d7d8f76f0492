"""Mapped entity types of the contacts domain.

The persistence configuration scans exactly this package for mapped types.
"""

from contact_store.domain.contact import Contact
from contact_store.domain.organisation import Organisation

__all__ = ["Contact", "Organisation"]
