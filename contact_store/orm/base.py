"""Declarative base and the persistable mixin shared by every mapped entity."""

from typing import Any

from sqlalchemy import BigInteger, Integer, Sequence
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from contact_store.exceptions import ImmutableIdentifierError

# SQLite only autoincrements an INTEGER PRIMARY KEY (the rowid alias).
IdType = BigInteger().with_variant(Integer(), "sqlite")

# Used only where the platform has no identity or serial columns (Oracle).
ID_SEQUENCE = Sequence("persistable_id_seq", optional=True)


class Base(DeclarativeBase):
    pass


class Persistable:
    """Mixin giving an entity a storage-assigned 64-bit surrogate key.

    The id is unset until the first successful insert and immutable afterwards.
    Equality follows the id: two instances of the same class are equal when both
    have been persisted with the same id. Unsaved instances equal only themselves.
    """

    id: Mapped[int] = mapped_column(IdType, ID_SEQUENCE, primary_key=True, autoincrement=True)

    @property
    def is_new(self) -> bool:
        return self.id is None

    @validates("id")
    def _validate_id(self, key: str, value: Any) -> Any:
        current = self.__dict__.get(key)
        if current is not None and value != current:
            raise ImmutableIdentifierError(type(self).__name__, current)
        return value

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return self.id is not None and self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash((type(self).__name__, self.id))

    def __repr__(self) -> str:
        return f"Entity of type {type(self).__name__} with id: {self.id}"
