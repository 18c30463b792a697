"""Tests for the SQLAlchemy Persistence and MappingStore adapters (in-memory SQLite)."""

from __future__ import annotations

import pytest

from src.salesforce_sync.mapping.exceptions import InvalidMappingDefinitionError
from src.salesforce_sync.orm.adapter import (
    SqlAlchemyMappingStore,
    SqlAlchemyPersistence,
    qualified_name,
)
from src.salesforce_sync.orm.models import SalesforceMappingModel
from tests.models import CONTACT, CUSTOMER, Contact, Customer


@pytest.fixture
def persistence(session) -> SqlAlchemyPersistence:
    return SqlAlchemyPersistence(session)


@pytest.fixture
def store(session) -> SqlAlchemyMappingStore:
    return SqlAlchemyMappingStore(session)


class TestSqlAlchemyPersistence:
    def test_qualified_name(self):
        assert qualified_name(Customer) == "tests.models.Customer"

    def test_resolve_concrete_type(self, persistence):
        assert persistence.resolve_concrete_type(Customer()) == CUSTOMER

    def test_identifier_of_transient_entity(self, persistence):
        assert persistence.get_identifier(Customer(name="Acme")) is None

    def test_identifier_after_flush(self, persistence, session):
        customer = Customer(name="Acme")
        session.add(customer)
        session.flush()

        assert persistence.get_identifier(customer) == customer.id

    def test_schema_accessor(self, persistence):
        schema = persistence.get_schema_for(CONTACT)
        contact = Contact()

        schema.set(contact, "email", "ada@example.com")

        assert schema.has_field("email")
        assert not schema.has_field("rating")
        assert schema.get(contact, "email") == "ada@example.com"
        assert "salesforce_id" in schema.field_names

    def test_schema_accessor_rejects_unknown_field(self, persistence):
        schema = persistence.get_schema_for(CONTACT)

        with pytest.raises(InvalidMappingDefinitionError, match="'rating' does not exist"):
            schema.get(Contact(), "rating")

    def test_unknown_class(self, persistence):
        with pytest.raises(InvalidMappingDefinitionError, match="Unknown local class"):
            persistence.get_schema_for("tests.models.Opportunity")

    def test_explicit_model_list(self, session):
        persistence = SqlAlchemyPersistence(session, models=[Contact])

        persistence.get_schema_for(CONTACT)
        with pytest.raises(InvalidMappingDefinitionError):
            persistence.get_schema_for(CUSTOMER)

    def test_find_coerces_text_identifier(self, persistence, session):
        customer = Customer(name="Acme")
        session.add(customer)
        session.flush()

        assert persistence.find(CUSTOMER, str(customer.id)) is customer
        assert persistence.find(CUSTOMER, customer.id) is customer
        assert persistence.find(CUSTOMER, 999) is None

    def test_find_one_by(self, persistence, session):
        contact = Contact(first_name="Ada", salesforce_id="003000000000001AAA")
        session.add(contact)
        session.flush()

        assert persistence.find_one_by(CONTACT, {"salesforce_id": "003000000000001AAA"}) is contact
        assert persistence.find_one_by(CONTACT, {"salesforce_id": "003000000000404AAA"}) is None


class TestSqlAlchemyMappingStore:
    def test_save_and_find(self, store):
        store.save(CUSTOMER, 12, "001000000000012AAA")

        by_local = store.find_by_local_key(CUSTOMER, 12)
        by_remote = store.find_by_remote_key("001000000000012AAA", CUSTOMER)

        assert by_local is by_remote
        assert by_local.entity_id == "12"
        assert by_local.salesforce_id == "001000000000012AAA"

    def test_save_replaces_existing_id(self, store, session):
        store.save(CUSTOMER, 12, "001000000000012AAA")
        store.save(CUSTOMER, "12", "001000000000099AAA")

        rows = session.query(SalesforceMappingModel).all()
        assert len(rows) == 1
        assert store.find_by_local_key(CUSTOMER, 12).salesforce_id == "001000000000099AAA"
        assert store.find_by_remote_key("001000000000012AAA", CUSTOMER) is None

    def test_lookups_are_scoped_by_class(self, store):
        store.save(CUSTOMER, 12, "001000000000012AAA")

        assert store.find_by_local_key(CONTACT, 12) is None
        assert store.find_by_remote_key("001000000000012AAA", CONTACT) is None

    def test_remove(self, store):
        store.save(CUSTOMER, 12, "001000000000012AAA")

        assert store.remove(CUSTOMER, 12) is True
        assert store.remove(CUSTOMER, 12) is False
        assert store.find_by_local_key(CUSTOMER, 12) is None
