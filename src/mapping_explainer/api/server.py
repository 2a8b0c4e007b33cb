"""HTTP surface for field resolution and explanations."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mapping_explainer.config import get_settings
from mapping_explainer.exceptions import ConfigurationError, InvalidInputError, UpstreamError
from mapping_explainer.explainers.function_explainer import FunctionExplainer
from mapping_explainer.logging_config import configure_logging
from mapping_explainer.pipeline.explain_service import ExplanationService
from mapping_explainer.pipeline.validation import parse_source_id, require_text
from mapping_explainer.store.document_store import DocumentStore

logger = structlog.get_logger()


class FunctionExplainRequest(BaseModel):
    fieldName: Any = None
    mappingFunction: Any = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_format, settings.log_level)
    store = DocumentStore(settings.require_database_url(), sslmode=settings.db_sslmode)
    explainer = None
    if settings.function_explainer_enabled:
        explainer = FunctionExplainer(
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            api_key=settings.llm_api_key,
        )
    app.state.service = ExplanationService(store, explainer)
    logger.info("Service started", function_explainer=explainer is not None)
    try:
        yield
    finally:
        store.close()


app = FastAPI(
    title="mapping-explainer",
    description="Plain-language explanations of standard field mappings",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


def get_service(request: Request) -> ExplanationService:
    return request.app.state.service


@app.exception_handler(InvalidInputError)
def invalid_input_handler(_request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(UpstreamError)
def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("Upstream failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": "Internal error"})


@app.exception_handler(ConfigurationError)
def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"error": str(exc)})


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": message})


@app.get("/api/health")
def health():
    return {"ok": True}


@app.get("/api/resources")
def list_resources(ssid: Optional[str] = None, service: ExplanationService = Depends(get_service)):
    source_id = parse_source_id(ssid)
    return {"ssid": source_id, "resources": service.list_resources(source_id)}


@app.get("/api/fields")
def list_fields(
    ssid: Optional[str] = None,
    resource: Optional[str] = None,
    service: ExplanationService = Depends(get_service),
):
    source_id = parse_source_id(ssid)
    resource = require_text(resource, "resource")
    return {"ssid": source_id, "resource": resource, "fields": service.list_fields(source_id, resource)}


@app.get("/api/field")
def get_field(
    ssid: Optional[str] = None,
    resource: Optional[str] = None,
    key: Optional[str] = None,
    service: ExplanationService = Depends(get_service),
):
    source_id = parse_source_id(ssid)
    resource = require_text(resource, "resource")
    key = require_text(key, "key")
    field_mapping = service.field_by_key(source_id, resource, key)
    if field_mapping is None:
        return _not_found("Field mapping not found")
    return {"ssid": source_id, "resource": resource, "key": key, "fieldMapping": field_mapping}


@app.get("/api/field-by-name")
def get_field_by_name(
    ssid: Optional[str] = None,
    resource: Optional[str] = None,
    standardName: Optional[str] = None,
    service: ExplanationService = Depends(get_service),
):
    source_id = parse_source_id(ssid)
    resource = require_text(resource, "resource")
    standard_name = require_text(standardName, "standardName")
    resolved = service.field_by_name(source_id, resource, standard_name)
    if resolved is None:
        return _not_found("No mapping found for that ssid/resource/standardName")
    return {
        "ssid": source_id,
        "resource": resource,
        "standardName": standard_name,
        "fieldMapping": resolved.to_view(),
    }


@app.get("/api/explain")
def explain(
    ssid: Optional[str] = None,
    resource: Optional[str] = None,
    standardName: Optional[str] = None,
    service: ExplanationService = Depends(get_service),
):
    result = service.explain(ssid, resource, standardName)
    if result is None:
        return _not_found("No mapping found for that ssid/resource/standardName")
    return result.to_response()


@app.post("/api/explain-function")
def explain_function(payload: FunctionExplainRequest, service: ExplanationService = Depends(get_service)):
    if not payload.fieldName or not payload.mappingFunction:
        return JSONResponse(status_code=400, content={"error": "fieldName and mappingFunction are required"})
    return {"explanation": service.explain_function(payload.fieldName, payload.mappingFunction)}
