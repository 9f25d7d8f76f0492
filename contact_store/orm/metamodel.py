"""Query metamodel for the mapped entities.

Each mapped entity gets a ``Q<Entity>`` class exposing one typed path per column
attribute, so query code can reference columns without string literals:

    >>> from contact_store.orm.metamodel import QOrganisation
    >>> organisation = QOrganisation.organisation
    >>> stmt = organisation.select().where(organisation.organisation_name == "Acme")

The classes are derived from the SQLAlchemy mappers and cached, so deriving the
metamodel twice for the same entity yields the same class. A subtype's metamodel
holds its parent's metamodel as ``_super`` over the same alias and reuses the
parent's path objects for inherited attributes.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Any, ClassVar

from sqlalchemy import Select, inspect, select
from sqlalchemy.orm import aliased
from sqlalchemy.sql.operators import ColumnOperators

from contact_store.domain import Contact, Organisation
from contact_store.exceptions import UnmappedEntityError
from contact_store.orm.base import Persistable

# (public name, mapped attribute key, python type)
PathSpec = tuple[str, str, type]


class Path(ColumnOperators):
    """Typed reference to one attribute of an entity path.

    Behaves as a SQLAlchemy column expression: comparison operators build
    predicates and the path can be selected or ordered by directly.
    """

    def __init__(self, parent: "EntityPath", name: str, attribute_key: str, python_type: type):
        self.parent = parent
        self.name = name
        self.type = python_type
        self.expression = getattr(parent.entity, attribute_key)

    def __clause_element__(self) -> Any:
        return self.expression.__clause_element__()

    def operate(self, op: Any, *other: Any, **kwargs: Any) -> Any:
        return op(self.expression, *other, **kwargs)

    def reverse_operate(self, op: Any, other: Any, **kwargs: Any) -> Any:
        return op(other, self.expression, **kwargs)

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.parent.variable}.{self.name})"


class NumberPath(Path):
    pass


class StringPath(Path):
    def contains_ignore_case(self, value: str) -> Any:
        return self.expression.icontains(value, autoescape=True)

    def starts_with_ignore_case(self, value: str) -> Any:
        return self.expression.istartswith(value, autoescape=True)

    def is_empty(self) -> Any:
        return self.expression == ""


class SimplePath(Path):
    pass


def _create_path(parent: "EntityPath", spec: PathSpec) -> Path:
    name, key, python_type = spec
    if python_type is str:
        return StringPath(parent, name, key, python_type)
    if python_type in (int, float, Decimal):
        return NumberPath(parent, name, key, python_type)
    return SimplePath(parent, name, key, python_type)


class EntityPath:
    """Base class of every ``Q<Entity>`` metamodel class.

    Constructed either from a variable name, which becomes the SQL alias, or from
    another entity path whose alias it then shares.
    """

    entity_type: ClassVar[type]
    parent_metamodel: ClassVar["type[EntityPath] | None"] = None
    attribute_paths: ClassVar[tuple[PathSpec, ...]] = ()

    def __init__(self, variable_or_path: "str | EntityPath"):
        if isinstance(variable_or_path, EntityPath):
            self.variable = variable_or_path.variable
            self.entity = variable_or_path.entity
        else:
            if inspect(self.entity_type, raiseerr=False) is None:
                raise UnmappedEntityError(self.entity_type.__name__)
            self.variable = variable_or_path
            self.entity = aliased(self.entity_type, name=variable_or_path)

        if self.parent_metamodel is not None:
            self._super = self.parent_metamodel(self)
            for name in self.parent_metamodel.path_names():
                setattr(self, name, getattr(self._super, name))

        for spec in self.attribute_paths:
            setattr(self, spec[0], _create_path(self, spec))

    @classmethod
    def path_names(cls) -> list[str]:
        inherited = cls.parent_metamodel.path_names() if cls.parent_metamodel is not None else []
        return inherited + [spec[0] for spec in cls.attribute_paths]

    def paths(self) -> dict[str, Path]:
        return {name: getattr(self, name) for name in self.path_names()}

    def select(self) -> Select:
        return select(self.entity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.variable})"


class QPersistable(EntityPath):
    """Metamodel of the persistable mixin; only usable as another path's ``_super``."""

    entity_type = Persistable
    attribute_paths = (("id", "id", int),)


def _lower_camel(name: str) -> str:
    return name[:1].lower() + name[1:]


def _python_type(column: Any) -> type:
    try:
        return column.type.python_type
    except NotImplementedError:
        return object


@lru_cache(maxsize=None)
def metamodel_for(entity_cls: type) -> type[EntityPath]:
    """Derive the ``Q<Entity>`` metamodel class of a mapped entity.

    Args:
        entity_cls: A mapped entity class, or ``Persistable``.

    Returns:
        The metamodel class, with its default instance bound to the entity name
        in lower camel case (``QOrganisation.organisation``).

    Raises:
        UnmappedEntityError: If ``entity_cls`` is not mapped.
    """
    if entity_cls is Persistable:
        return QPersistable

    mapper = inspect(entity_cls, raiseerr=False)
    if mapper is None:
        raise UnmappedEntityError(entity_cls.__name__)

    if mapper.inherits is not None:
        parent: type[EntityPath] | None = metamodel_for(mapper.inherits.class_)
    elif issubclass(entity_cls, Persistable):
        parent = QPersistable
    else:
        parent = None

    inherited = set(parent.path_names()) if parent is not None else set()
    own = tuple(
        (prop.key.lstrip("_"), prop.key, _python_type(prop.columns[0]))
        for prop in mapper.column_attrs
        if prop.key.lstrip("_") not in inherited
    )

    name = f"Q{entity_cls.__name__}"
    metamodel = type(
        name,
        (EntityPath,),
        {
            "__doc__": f"{name} is a query type for {entity_cls.__name__}",
            "__module__": __name__,
            "entity_type": entity_cls,
            "parent_metamodel": parent,
            "attribute_paths": own,
        },
    )
    variable = _lower_camel(entity_cls.__name__)
    setattr(metamodel, variable, metamodel(variable))
    return metamodel


def default_path(entity_cls: type) -> EntityPath:
    """Return the default instance of an entity's metamodel (``QContact.contact``)."""
    return getattr(metamodel_for(entity_cls), _lower_camel(entity_cls.__name__))


QContact = metamodel_for(Contact)
QOrganisation = metamodel_for(Organisation)

__all__ = [
    "EntityPath",
    "NumberPath",
    "Path",
    "QContact",
    "QOrganisation",
    "QPersistable",
    "SimplePath",
    "StringPath",
    "default_path",
    "metamodel_for",
]
