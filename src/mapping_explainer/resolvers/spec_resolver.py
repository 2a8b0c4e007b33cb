"""Resolve standard field names against the latest catalog."""
from __future__ import annotations

from typing import List, Optional

import structlog

from mapping_explainer.models.schemas import FieldDefinition, SpecCatalog, normalize_name

logger = structlog.get_logger()


class SpecResolver:
    """Look up field definitions in the latest catalog version.

    The catalog is re-read on every call.
    """

    def __init__(self, store):
        self.store = store

    def latest_catalog(self) -> Optional[SpecCatalog]:
        row = self.store.latest_spec_row()
        if row is None:
            logger.info("No catalog version available")
            return None
        return SpecCatalog.from_document(row.version, row.document)

    def resolve_field_definitions(self, resource: str) -> List[FieldDefinition]:
        """All field definitions for a resource (e.g. "property", "member").

        Returns an empty list when the resource or the catalog is missing or
        malformed.
        """
        catalog = self.latest_catalog()
        if catalog is None:
            return []
        definitions = catalog.field_definitions(resource)
        if not definitions:
            logger.debug("No field definitions", resource=resource, version=catalog.version)
        return definitions

    def resolve_record_id(self, resource: str, standard_name: str) -> Optional[str]:
        """Record id for a standard name or, failing that, one of its synonyms."""
        definitions = self.resolve_field_definitions(resource)
        if not definitions:
            return None
        return match_record_id(definitions, standard_name)


def match_record_id(definitions: List[FieldDefinition], name: str) -> Optional[str]:
    """First definition in catalog order whose standard name or synonym matches ``name``."""
    normalized = normalize_name(name)
    if not normalized:
        return None
    for definition in definitions:
        if definition.matches_name(normalized) or definition.matches_synonym(normalized):
            return definition.record_id
    return None
