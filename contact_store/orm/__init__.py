"""
This orm module contains the persistence layer of contact-store: the declarative base,
the persistence configuration that wires a data source to an entity manager factory and
a transaction manager, the query metamodel, repositories and the Unit of Work.

Mapped entity types live in `contact_store.domain`, the package the configuration scans.
"""
