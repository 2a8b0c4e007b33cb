"""Resolve published mapping documents and the field rules inside them."""
from __future__ import annotations

from typing import List, Optional

import structlog

from mapping_explainer.models.rules import FieldRule
from mapping_explainer.models.schemas import FieldRuleEntry, MappingDocument, ResolvedField
from mapping_explainer.resolvers.spec_resolver import SpecResolver

logger = structlog.get_logger()


class MappingVersionResolver:
    """Find the latest published mapping document for a data source."""

    def __init__(self, store):
        self.store = store

    def resolve_latest_published(self, source_id: int) -> Optional[MappingDocument]:
        """Latest published document, or ``None`` if nothing is published yet."""
        row = self.store.latest_published_mapping_row(source_id)
        if row is None:
            logger.info("No published mapping", source_id=source_id)
            return None
        return MappingDocument.from_row(row.row_id, row.source_id, row.document)


class FieldMappingResolver:
    """Navigate a published mapping document down to single field rules."""

    def __init__(self, versions: MappingVersionResolver, specs: SpecResolver):
        self.versions = versions
        self.specs = specs

    def list_resources(self, source_id: int) -> List[str]:
        document = self.versions.resolve_latest_published(source_id)
        if document is None:
            return []
        return document.resource_names()

    def list_field_rules(self, source_id: int, resource: str) -> List[FieldRuleEntry]:
        document = self.versions.resolve_latest_published(source_id)
        if document is None:
            return []
        return document.field_rules(resource)

    def resolve_by_key(self, source_id: int, resource: str, key: str) -> Optional[FieldRule]:
        """Rule stored under an internal key (a record id or GUID)."""
        for entry in self.list_field_rules(source_id, resource):
            if entry.key == key:
                return entry.rule
        return None

    def resolve_by_standard_name(
        self, source_id: int, resource: str, standard_name: str
    ) -> Optional[ResolvedField]:
        """Resolve name -> record id through the catalog, then record id -> rule.

        The document snapshot travels with the result so callers read
        category names from the same version the rule came from.
        """
        record_id = self.specs.resolve_record_id(resource, standard_name)
        if record_id is None:
            logger.info("Record id not found", resource=resource, standard_name=standard_name)
            return None
        record_id = str(record_id)

        document = self.versions.resolve_latest_published(source_id)
        if document is None:
            return None

        for entry in document.field_rules(resource):
            if entry.key == record_id:
                return ResolvedField(record_id=record_id, rule=entry.rule, document=document)

        logger.info(
            "No field rule for record id",
            source_id=source_id,
            resource=resource,
            record_id=record_id,
        )
        return None
