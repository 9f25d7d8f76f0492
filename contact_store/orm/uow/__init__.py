"""Unit of Work (UoW) pattern implementations for contact-store.

Provides transaction management and repository coordination:
- BaseUnitOfWork: Abstract base class with common patterns
- ContactUnitOfWork: Contact and Organisation repositories over one session
"""

from contact_store.orm.uow.base import BaseUnitOfWork
from contact_store.orm.uow.contact_uow import ContactUnitOfWork

__all__ = [
    "BaseUnitOfWork",
    "ContactUnitOfWork",
]
