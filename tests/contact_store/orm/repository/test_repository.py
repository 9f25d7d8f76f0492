"""Tests for the contact and organisation repositories."""

import pytest
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Session

from contact_store.domain import Organisation
from contact_store.orm.metamodel import QOrganisation
from contact_store.orm.repository import ContactRepository, OrganisationRepository


@pytest.fixture
def organisation_repository(db_session: Session) -> OrganisationRepository:
    """Create an OrganisationRepository instance for testing."""
    return OrganisationRepository(db_session)


@pytest.fixture
def contact_repository(db_session: Session) -> ContactRepository:
    """Create a ContactRepository instance for testing."""
    return ContactRepository(db_session)


class TestGenericOperations:
    def test_save_assigns_id(self, organisation_repository: OrganisationRepository):
        organisation = organisation_repository.save(Organisation(organisation_name="Repo Acme"))

        assert organisation.id is not None
        assert organisation_repository.exists(organisation.id)

    def test_get_by_id(self, organisation_repository: OrganisationRepository, db_session: Session):
        organisation_id = organisation_repository.save(Organisation(organisation_name="Repo Acme")).id
        db_session.expunge_all()

        loaded = organisation_repository.get_by_id(organisation_id)

        assert loaded.organisation_name == "Repo Acme"

    def test_get_by_id_missing(self, organisation_repository: OrganisationRepository):
        assert organisation_repository.get_by_id(-1) is None
        assert not organisation_repository.exists(-1)

    def test_add_all_and_count(self, organisation_repository: OrganisationRepository, db_session: Session):
        initial = organisation_repository.count()

        organisation_repository.add_all([Organisation(organisation_name=f"Repo {i}") for i in range(3)])
        db_session.flush()

        assert organisation_repository.count() == initial + 3

    def test_get_all_with_limit(self, organisation_repository: OrganisationRepository, db_session: Session):
        organisation_repository.add_all([Organisation(organisation_name=f"Repo {i}") for i in range(3)])
        db_session.flush()

        assert len(organisation_repository.get_all(limit=2)) == 2

    def test_delete_by_id(self, organisation_repository: OrganisationRepository, db_session: Session):
        organisation_id = organisation_repository.save(Organisation(organisation_name="Repo Delete")).id

        assert organisation_repository.delete_by_id(organisation_id)
        db_session.flush()

        assert not organisation_repository.exists(organisation_id)
        assert not organisation_repository.delete_by_id(organisation_id)

    def test_find_one_multiple_raises(self, organisation_repository: OrganisationRepository):
        organisation_repository.save(Organisation(organisation_name="Repo Twin"))
        organisation_repository.save(Organisation(organisation_name="Repo Twin"))

        with pytest.raises(MultipleResultsFound):
            organisation_repository.find_one(QOrganisation.organisation.organisation_name == "Repo Twin")

    def test_find_one_none(self, organisation_repository: OrganisationRepository):
        assert organisation_repository.find_one(QOrganisation.organisation.organisation_name == "Repo Nobody") is None


class TestOrganisationRepository:
    def test_find_by_organisation_name(self, organisation_repository: OrganisationRepository):
        organisation_repository.save(Organisation(organisation_name="Repo Initech"))
        organisation_repository.save(Organisation(organisation_name="Repo Initech"))

        found = organisation_repository.find_by_organisation_name("Repo Initech")

        assert len(found) == 2
        assert found[0].id < found[1].id

    def test_search_by_organisation_name(self, organisation_repository: OrganisationRepository):
        organisation_repository.save(Organisation(organisation_name="Repo Umbrella Corp"))
        organisation_repository.save(Organisation(organisation_name="Repo Umbrella Academy"))

        found = organisation_repository.search_by_organisation_name("umbrella")

        assert [o.organisation_name for o in found] == ["Repo Umbrella Academy", "Repo Umbrella Corp"]

    def test_rename(self, organisation_repository: OrganisationRepository, db_session: Session):
        organisation = organisation_repository.save(Organisation(organisation_name="Repo Old"))

        organisation_repository.rename(organisation, "Repo New")
        db_session.flush()
        db_session.expunge_all()

        assert organisation_repository.get_by_id(organisation.id).organisation_name == "Repo New"


class TestContactRepository:
    def test_loads_concrete_subtype(
        self, contact_repository: ContactRepository, organisation_repository: OrganisationRepository, db_session: Session
    ):
        organisation_id = organisation_repository.save(Organisation(organisation_name="Repo Contact")).id
        db_session.expunge_all()

        loaded = contact_repository.get_by_id(organisation_id)

        assert isinstance(loaded, Organisation)

    def test_count_by_type(
        self, contact_repository: ContactRepository, organisation_repository: OrganisationRepository
    ):
        initial = contact_repository.count_by_type().get(Organisation.DISCRIMINATOR_VALUE, 0)

        organisation_repository.save(Organisation(organisation_name="Repo Counted"))

        assert contact_repository.count_by_type()[Organisation.DISCRIMINATOR_VALUE] == initial + 1
