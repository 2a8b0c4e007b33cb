"""Pydantic models for catalog and mapping snapshots."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mapping_explainer.models.rules import FieldRule, parse_field_rule

METADATA_KEY = "metadata"


def normalize_name(value: Any) -> str:
    """Case- and whitespace-insensitive form used for name matching."""
    return str(value).strip().lower()


def normalize_synonyms(raw: Any) -> FrozenSet[str]:
    """Synonyms may be missing, a comma-separated string or a list."""
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [item for item in raw if item]
    else:
        return frozenset()
    return frozenset(normalize_name(item) for item in items if str(item).strip())


class FieldDefinition(BaseModel):
    """A standard field from the catalog."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    standard_name: str
    synonyms: FrozenSet[str] = frozenset()
    data_type: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Any) -> Optional["FieldDefinition"]:
        """Build from a catalog entry; ``None`` for unusable entries."""
        if not isinstance(entry, dict):
            return None
        record_id = entry.get("recordID")
        standard_name = entry.get("standardName")
        if record_id is None or record_id == "" or not isinstance(standard_name, str):
            return None
        data_type = entry.get("dataType") or entry.get("type") or None
        return cls(
            record_id=str(record_id),
            standard_name=standard_name,
            synonyms=normalize_synonyms(entry.get("synonyms")),
            data_type=str(data_type) if data_type is not None else None,
        )

    def matches_name(self, normalized: str) -> bool:
        return normalize_name(self.standard_name) == normalized

    def matches_synonym(self, normalized: str) -> bool:
        return normalized in self.synonyms


class SpecCatalog(BaseModel):
    """Snapshot of one catalog version."""

    model_config = ConfigDict(frozen=True)

    version: Optional[str] = None
    resources: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, version: Optional[str], document: Any) -> "SpecCatalog":
        resources = document.get("resources") if isinstance(document, dict) else None
        return cls(version=version, resources=resources if isinstance(resources, dict) else {})

    def field_definitions(self, resource: str) -> List[FieldDefinition]:
        entries = self.resources.get(resource.lower())
        if not isinstance(entries, list):
            return []
        definitions = (FieldDefinition.from_entry(entry) for entry in entries)
        return [d for d in definitions if d is not None]


class FieldRuleEntry(BaseModel):
    """A rule together with the key it is stored under."""

    model_config = ConfigDict(frozen=True)

    key: str
    rule: FieldRule

    def to_view(self) -> Dict[str, Any]:
        return {"key": self.key, **self.rule.to_view()}


class MappingDocument(BaseModel):
    """Snapshot of one published mapping version for a data source."""

    model_config = ConfigDict(frozen=True)

    row_id: int
    source_id: Optional[int] = None
    date_published: Optional[str] = None
    tree: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_row(cls, row_id: int, source_id: Optional[int], document: Any) -> "MappingDocument":
        if not isinstance(document, dict):
            document = {}
        tree = document.get("mapping")
        published = document.get("datePublished")
        return cls(
            row_id=row_id,
            source_id=source_id,
            date_published=str(published) if published not in (None, "") else None,
            tree=tree if isinstance(tree, dict) else {},
        )

    def resource_names(self) -> List[str]:
        return [name for name in self.tree if name != METADATA_KEY]

    def field_rules(self, resource: str) -> List[FieldRuleEntry]:
        resource_tree = self.tree.get(resource) if resource != METADATA_KEY else None
        if not isinstance(resource_tree, dict):
            return []
        return [
            FieldRuleEntry(key=str(key), rule=parse_field_rule(value))
            for key, value in resource_tree.items()
        ]

    def category_names(self, resource: str) -> Dict[str, str]:
        """Invert ``mappedMlsClasses`` (friendly name -> code) to code -> friendly name."""
        metadata = self.tree.get(METADATA_KEY)
        resources = metadata.get("resources") if isinstance(metadata, dict) else None
        resource_meta = resources.get(resource) if isinstance(resources, dict) else None
        mapped = resource_meta.get("mappedMlsClasses") if isinstance(resource_meta, dict) else None
        if not isinstance(mapped, dict):
            return {}
        return {str(code): str(friendly) for friendly, code in mapped.items() if code is not None}


class ResolvedField(BaseModel):
    """Rule resolved from a standard name, with the snapshot it came from."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    rule: FieldRule
    document: MappingDocument

    def to_view(self) -> Dict[str, Any]:
        return {"recordID": self.record_id, "key": self.record_id, **self.rule.to_view()}


class ExplanationResult(BaseModel):
    """Explanation text plus the structured rule it was derived from."""

    source_id: int
    resource: str
    standard_name: str
    record_id: str
    mapping_type: Optional[str] = None
    mls_fields: List[str] = Field(default_factory=list)
    raw_mapping: Any = None
    class_names: Dict[str, str] = Field(default_factory=dict)
    explanation: str

    def to_response(self) -> Dict[str, Any]:
        return {
            "ssid": self.source_id,
            "resource": self.resource,
            "standardName": self.standard_name,
            "recordID": self.record_id,
            "mappingType": self.mapping_type,
            "mlsFields": self.mls_fields,
            "rawMapping": self.raw_mapping,
            "classNames": self.class_names,
            "explanation": self.explanation,
        }
