"""Unit tests for request orchestration."""
from __future__ import annotations

import pytest

from mapping_explainer.exceptions import ConfigurationError, InvalidInputError, UpstreamError
from mapping_explainer.explainers.function_explainer import FunctionExplainer
from mapping_explainer.models.rules import parse_field_rule
from mapping_explainer.pipeline.explain_service import ExplanationService, shared_function_source
from mapping_explainer.pipeline.validation import parse_source_id, require_text
from tests.mocks import data as mock_data
from tests.mocks.llm import FakeCompletion
from tests.mocks.store import FakeDocumentStore

SOURCE_ID = mock_data.SOURCE_ID


def classes_rule(bodies):
    mapping = {f"C{i}": mock_data.make_rule("Function", ["A"], body) for i, body in enumerate(bodies)}
    return parse_field_rule(mock_data.make_rule("Classes", [], mapping))


def test_shared_source_for_plain_function():
    rule = parse_field_rule(mock_data.make_rule("Function", ["A"], "return 1;"))
    assert shared_function_source(rule) == "return 1;"
    assert shared_function_source(parse_field_rule(mock_data.make_rule("Function", ["A"]))) is None


def test_shared_source_identical_bodies_after_trim():
    assert shared_function_source(classes_rule(["return 1;", "  return 1;\n"])) == "return 1;"


@pytest.mark.parametrize(
    "bodies",
    [["return 1;", "return 2;"], ["return 1;", "   "], ["return 1;", None]],
)
def test_shared_source_requires_identical_non_blank_bodies(bodies):
    assert shared_function_source(classes_rule(bodies)) is None


def test_shared_source_requires_all_functions():
    mapping = {
        "RESI": mock_data.make_rule("Function", ["A"], "return 1;"),
        "LAND": mock_data.make_rule("One To One", ["A"]),
    }
    rule = parse_field_rule(mock_data.make_rule("Classes", [], mapping))
    assert shared_function_source(rule) is None
    assert shared_function_source(parse_field_rule(mock_data.make_rule("Classes", [], {}))) is None
    assert shared_function_source(parse_field_rule(mock_data.make_rule("Map", [], {}))) is None


def test_explain_direct_copy_does_not_call_llm(service, fake_completion):
    result = service.explain(SOURCE_ID, "property", "PurchaseContractDate")
    assert result.record_id == "100017"
    assert result.mapping_type == "One To One"
    assert result.mls_fields == ["LIST_10"]
    assert "copied directly from the MLS field LIST_10" in result.explanation
    assert result.class_names == {}
    assert fake_completion.calls == []


def test_explain_function_uses_llm_text(service, fake_completion):
    result = service.explain(str(SOURCE_ID), " property ", "ParkingTotal")
    assert result.explanation == fake_completion.content
    assert len(fake_completion.calls) == 1
    assert "Field Name: ParkingTotal" in fake_completion.calls[0]["messages"][1]["content"]
    assert result.raw_mapping == mock_data.PARKING_FUNCTION


def test_explain_shared_function_calls_llm_once(service, fake_completion):
    result = service.explain(SOURCE_ID, "property", "StreetName")
    assert len(fake_completion.calls) == 1
    assert mock_data.PARKING_FUNCTION.strip() in fake_completion.calls[0]["messages"][1]["content"]
    assert "same function across multiple property classes: Residential, Land" in result.explanation
    assert result.explanation.endswith(fake_completion.content)
    assert result.class_names["RESI"] == "Residential"


def test_explain_collapsed_classes(service, fake_completion):
    result = service.explain(SOURCE_ID, "property", "PropertySubType")
    assert "This applies to these classes: Residential, Land, Commercial." in result.explanation
    assert fake_completion.calls == []


def test_explain_without_explainer_uses_fallback(store):
    service = ExplanationService(store, None)
    result = service.explain(SOURCE_ID, "property", "ParkingTotal")
    assert "custom JavaScript function" in result.explanation


def test_explain_not_found(service):
    assert service.explain(SOURCE_ID, "property", "NoSuchField") is None
    assert service.explain(1, "property", "ParkingTotal") is None


def test_explain_reads_each_snapshot_once(store, service):
    service.explain(SOURCE_ID, "property", "StreetName")
    assert store.spec_reads == 1
    assert store.mapping_reads == 1


@pytest.mark.parametrize(
    "source_id,resource,name",
    [(None, "property", "X"), ("abc", "property", "X"), (0, "property", "X"), (-3, "property", "X"),
     (True, "property", "X"), ("\u00b2", "property", "X"), ("\u0663", "property", "X"),
     (SOURCE_ID, "", "X"), (SOURCE_ID, "property", "  "), (SOURCE_ID, None, "X")],
)
def test_invalid_input_rejected_before_store_access(store, service, source_id, resource, name):
    with pytest.raises(InvalidInputError):
        service.explain(source_id, resource, name)
    assert store.spec_reads == 0
    assert store.mapping_reads == 0


def test_store_failure_propagates(function_explainer):
    service = ExplanationService(FakeDocumentStore(fail=True), function_explainer)
    with pytest.raises(UpstreamError):
        service.explain(SOURCE_ID, "property", "ParkingTotal")


def test_llm_failure_propagates(store):
    explainer = FunctionExplainer(completion_fn=FakeCompletion(error=ConnectionError("down")))
    service = ExplanationService(store, explainer)
    with pytest.raises(UpstreamError):
        service.explain(SOURCE_ID, "property", "ParkingTotal")


def test_listing_helpers(service):
    assert service.list_resources(SOURCE_ID) == ["property", "member"]
    fields = service.list_fields(SOURCE_ID, "member")
    assert fields == [{"key": "200001", "mappingType": "One To One", "mlsFields": ["AGENT_FIRST"], "mapping": None}]
    assert service.field_by_key(SOURCE_ID, "property", "100020")["mappingType"] == "Map"
    assert service.field_by_key(SOURCE_ID, "property", "missing") is None
    assert service.field_by_name(SOURCE_ID, "property", "ContractDate").record_id == "100017"


def test_explain_function_requires_explainer(store):
    with pytest.raises(ConfigurationError):
        ExplanationService(store, None).explain_function("ParkingTotal", "return 1;")


def test_validation_helpers():
    assert parse_source_id("  42 ") == 42
    assert parse_source_id(7) == 7
    with pytest.raises(InvalidInputError, match="ssid"):
        parse_source_id("\u00b2")
    assert require_text("  property ", "resource") == "property"
    with pytest.raises(InvalidInputError, match="resource"):
        require_text(5, "resource")
