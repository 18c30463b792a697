"""Unit tests for SObject and SyncEvent schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.salesforce_sync.mapping.schemas import (
    Action,
    LocalReference,
    SalesforcePayload,
    SObject,
    SyncEvent,
)


class TestSObject:
    def test_value_and_clear_are_exclusive(self):
        with pytest.raises(ValidationError, match="both set and cleared: Name"):
            SObject(fields={"Name": "Acme"}, fields_to_null=["Name"])

    def test_null_field_is_listed_once(self):
        s_object = SObject(fields_to_null=["Phone", "Phone"])

        assert s_object.fields_to_null == ("Phone",)
        assert s_object.is_null("Phone")

    def test_absent_is_not_null(self):
        s_object = SObject()

        assert s_object.get("Website") is None
        assert not s_object.is_null("Website")

    def test_is_read_only(self):
        s_object = SObject(id="001000000000001AAA", fields={"Name": "Acme"})

        with pytest.raises(ValidationError):
            s_object.id = "001000000000002AAA"
        with pytest.raises(TypeError):
            s_object.fields["Name"] = "Evil Corp"
        with pytest.raises(AttributeError):
            s_object.fields_to_null.append("Name")

        assert s_object.get("Name") == "Acme"

    def test_fields_are_copied_on_construction(self):
        fields = {"Name": "Acme"}
        s_object = SObject(fields=fields)

        fields["Name"] = "Evil Corp"

        assert s_object.get("Name") == "Acme"

    def test_to_payload(self):
        s_object = SObject(
            id="001000000000001AAA", fields={"Name": "Acme"}, fields_to_null=["Phone"]
        )

        assert s_object.to_payload() == {
            "Id": "001000000000001AAA",
            "Name": "Acme",
            "fieldsToNull": ["Phone"],
        }

    def test_to_payload_without_id_or_clears(self):
        s_object = SObject(fields={"Name": "Acme"})

        assert s_object.to_payload() == {"Name": "Acme"}

    def test_model_dump_renders_plain_dict(self):
        s_object = SObject(fields={"Name": "Acme"})

        assert s_object.model_dump() == {
            "id": None,
            "fields": {"Name": "Acme"},
            "fields_to_null": (),
        }

    def test_from_payload_drops_attributes(self):
        s_object = SObject.from_payload(
            {
                "attributes": {"type": "Account", "url": "/services/data/v59.0/sobjects/Account/001"},
                "Id": "001000000000001AAA",
                "Name": "Acme",
                "Phone": None,
            }
        )

        assert s_object.id == "001000000000001AAA"
        assert s_object.fields == {"Name": "Acme", "Phone": None}
        assert s_object.fields_to_null == ()

    def test_from_payload_keeps_clears_out_of_values(self):
        s_object = SObject.from_payload({"Name": "Acme", "Phone": None, "fieldsToNull": ["Phone"]})

        assert s_object.fields == {"Name": "Acme"}
        assert s_object.fields_to_null == ("Phone",)


class TestSyncEvent:
    def test_is_frozen(self):
        event = SyncEvent(
            salesforce=SalesforcePayload(s_object=SObject(), type="Account"),
            local=LocalReference(id=1, type="app.models.Customer"),
            action=Action.CREATE,
        )

        with pytest.raises(ValidationError):
            event.action = Action.DELETE

    def test_action_from_string(self):
        event = SyncEvent(
            salesforce=SalesforcePayload(s_object=SObject(), type="Account"),
            local=LocalReference(type="app.models.Customer"),
            action="update",
        )

        assert event.action is Action.UPDATE
        assert event.local.id is None

    def test_nested_object_is_frozen(self):
        event = SyncEvent(
            salesforce=SalesforcePayload(s_object=SObject(fields={"Name": "Acme"}), type="Account"),
            local=LocalReference(id=1, type="app.models.Customer"),
            action=Action.CREATE,
        )

        with pytest.raises(ValidationError):
            event.salesforce.s_object.id = "001000000000001AAA"
        with pytest.raises(TypeError):
            event.salesforce.s_object.fields["Name"] = "Evil Corp"


class TestAction:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("create", Action.CREATE),
            ("Create", Action.CREATE),
            ("Update", Action.UPDATE),
            ("DELETE", Action.DELETE),
        ],
    )
    def test_lookup_is_case_insensitive(self, value, expected):
        assert Action(value) is expected

    @pytest.mark.parametrize("value", ["upsert", "", 1])
    def test_unknown_value(self, value):
        with pytest.raises(ValueError):
            Action(value)
