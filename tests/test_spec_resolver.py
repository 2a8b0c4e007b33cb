"""Unit tests for standard name resolution."""
from __future__ import annotations

import pytest

from mapping_explainer.exceptions import UpstreamError
from mapping_explainer.models.schemas import FieldDefinition, normalize_synonyms
from mapping_explainer.resolvers.spec_resolver import SpecResolver, match_record_id
from tests.mocks import data as mock_data
from tests.mocks.store import FakeDocumentStore


@pytest.fixture()
def resolver(store):
    return SpecResolver(store)


def test_field_definitions_for_resource(resolver):
    definitions = resolver.resolve_field_definitions("property")
    assert [d.standard_name for d in definitions][:3] == [
        "PurchaseContractDate",
        "PropertyType",
        "ParkingTotal",
    ]
    assert definitions[0].data_type == "Date"


def test_resource_key_is_lowercased(resolver):
    assert len(resolver.resolve_field_definitions("Property")) == 6


def test_record_ids_are_strings(resolver):
    definitions = resolver.resolve_field_definitions("property")
    assert definitions[1].record_id == "100020"


@pytest.mark.parametrize(
    "catalog",
    [
        None,
        "not an object",
        {},
        {"resources": "nope"},
        {"resources": {"property": {"not": "a list"}}},
    ],
)
def test_malformed_catalog_yields_empty(catalog):
    resolver = SpecResolver(FakeDocumentStore(catalog=catalog))
    assert resolver.resolve_field_definitions("property") == []
    assert resolver.resolve_record_id("property", "ListingKey") is None


def test_unknown_resource_yields_empty(resolver):
    assert resolver.resolve_field_definitions("office") == []


@pytest.mark.parametrize(
    "name",
    ["PurchaseContractDate", "purchasecontractdate", "  PURCHASECONTRACTDATE  ", "ContractDate", " pendingdate "],
)
def test_resolve_by_name_or_synonym_ignoring_case_and_whitespace(resolver, name):
    assert resolver.resolve_record_id("property", name) == "100017"


def test_synonym_list_form(resolver):
    assert resolver.resolve_record_id("property", "proptype") == "100020"
    assert resolver.resolve_record_id("property", "CLASS") == "100020"


def test_unknown_name_is_not_found(resolver):
    assert resolver.resolve_record_id("property", "NoSuchField") is None
    assert resolver.resolve_record_id("property", "   ") is None


def test_earlier_synonym_wins_over_later_standard_name():
    definitions = [
        FieldDefinition(record_id="1", standard_name="Alpha", synonyms=normalize_synonyms("Beta")),
        FieldDefinition(record_id="2", standard_name="Beta"),
    ]
    assert match_record_id(definitions, "beta") == "1"


def test_first_match_in_catalog_order():
    definitions = [
        FieldDefinition(record_id="1", standard_name="Alpha", synonyms=normalize_synonyms(["Shared"])),
        FieldDefinition(record_id="2", standard_name="Gamma", synonyms=normalize_synonyms(["Shared"])),
    ]
    assert match_record_id(definitions, "shared") == "1"


def test_unusable_entries_are_skipped():
    catalog = mock_data.make_catalog_document(
        {
            "property": [
                None,
                mock_data.make_field_entry(None, "NoRecord"),
                mock_data.make_field_entry("5", None),
                mock_data.make_field_entry("6", "Usable"),
            ]
        }
    )
    resolver = SpecResolver(FakeDocumentStore(catalog=catalog))
    definitions = resolver.resolve_field_definitions("property")
    assert [d.record_id for d in definitions] == ["6"]
    assert resolver.resolve_record_id("property", "NoRecord") is None


def test_synonym_forms_normalize_identically():
    assert normalize_synonyms(" Foo , bar,,") == normalize_synonyms(["foo", "BAR ", None, ""])
    assert normalize_synonyms(None) == frozenset()
    assert normalize_synonyms(12) == frozenset()


def test_store_failure_propagates():
    resolver = SpecResolver(FakeDocumentStore(fail=True))
    with pytest.raises(UpstreamError):
        resolver.resolve_record_id("property", "ListingKey")
