"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from tests.mocks import data as mock_data  # noqa: E402
from tests.mocks.llm import FakeCompletion  # noqa: E402
from tests.mocks.store import FakeDocumentStore  # noqa: E402


@pytest.fixture()
def catalog_document():
    return mock_data.make_catalog_document()


@pytest.fixture()
def mapping_document():
    return mock_data.make_mapping_document()


@pytest.fixture()
def store(catalog_document, mapping_document):
    return FakeDocumentStore(
        catalog=catalog_document,
        mappings={mock_data.SOURCE_ID: mapping_document},
    )


@pytest.fixture()
def fake_completion():
    return FakeCompletion("The function for the field ParkingTotal... adds LIST_117 and LIST_118.")


@pytest.fixture()
def function_explainer(fake_completion):
    from mapping_explainer.explainers.function_explainer import FunctionExplainer

    return FunctionExplainer(model="test-model", completion_fn=fake_completion)


@pytest.fixture()
def service(store, function_explainer):
    from mapping_explainer.pipeline.explain_service import ExplanationService

    return ExplanationService(store, function_explainer)
