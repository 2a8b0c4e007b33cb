"""Field-level transformation rules.

Mapping documents store rules as loosely shaped JSON. Everything is parsed
into the closed set of rule classes below before any rendering happens; a
shape that matches no known rule becomes an ``UndefinedRule``.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MappingType(Enum):
    """Rule kinds, keyed by the ``mappingType`` string stored in documents."""
    DIRECT_COPY = "One To One"
    LOOKUP_TABLE = "Map"
    CATEGORIZED = "Classes"
    CUSTOM_FUNCTION = "Function"
    UNDEFINED = "Undefined"


class FieldRule(BaseModel):
    """Common shape of every rule."""

    model_config = ConfigDict(frozen=True)

    mapping_type: MappingType = MappingType.UNDEFINED
    type_label: Optional[str] = None  # mappingType exactly as stored
    mls_fields: List[str] = Field(default_factory=list)
    raw_mls_fields: Any = None  # mlsFields exactly as stored
    raw_mapping: Any = None

    def describe_type(self) -> str:
        return self.type_label or "Unknown type"

    def to_view(self) -> Dict[str, Any]:
        """Structured form handed to callers next to the explanation."""
        return {
            "mappingType": self.type_label,
            "mlsFields": list(self.mls_fields),
            "mapping": self.raw_mapping,
        }


class UndefinedRule(FieldRule):
    pass


class DirectCopyRule(FieldRule):
    mapping_type: MappingType = MappingType.DIRECT_COPY


class LookupTableRule(FieldRule):
    mapping_type: MappingType = MappingType.LOOKUP_TABLE
    table: Optional[Dict[str, Any]] = None


class CategorizedRule(FieldRule):
    mapping_type: MappingType = MappingType.CATEGORIZED
    categories: Dict[str, FieldRule] = Field(default_factory=dict)


class CustomFunctionRule(FieldRule):
    mapping_type: MappingType = MappingType.CUSTOM_FUNCTION
    source: Optional[str] = None

    @property
    def has_source(self) -> bool:
        return bool(self.source and self.source.strip())


def normalize_mls_fields(raw: Any) -> List[str]:
    """Keep list order, drop null entries, stringify the rest."""
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(item) for item in raw if item is not None]


def _mapping_type_of(label: Optional[str]) -> MappingType:
    if not label:
        return MappingType.UNDEFINED
    try:
        return MappingType(label)
    except ValueError:
        return MappingType.UNDEFINED


def parse_field_rule(raw: Any) -> FieldRule:
    """Parse one stored rule (``{mappingType, mlsFields, mapping}``)."""
    if not isinstance(raw, dict):
        return UndefinedRule()

    label = raw.get("mappingType")
    label = label.strip() if isinstance(label, str) and label.strip() else None
    mls_fields = normalize_mls_fields(raw.get("mlsFields"))
    mapping = raw.get("mapping")
    mapping_type = _mapping_type_of(label)

    common = {
        "type_label": label,
        "mls_fields": mls_fields,
        "raw_mls_fields": raw.get("mlsFields"),
        "raw_mapping": mapping,
    }

    if mapping_type is MappingType.DIRECT_COPY:
        return DirectCopyRule(**common)

    if mapping_type is MappingType.LOOKUP_TABLE:
        table = mapping if isinstance(mapping, dict) else None
        return LookupTableRule(table=table, **common)

    if mapping_type is MappingType.CATEGORIZED:
        categories: Dict[str, FieldRule] = {}
        if isinstance(mapping, dict):
            categories = {str(code): parse_field_rule(cfg) for code, cfg in mapping.items()}
        return CategorizedRule(categories=categories, **common)

    if mapping_type is MappingType.CUSTOM_FUNCTION:
        source = mapping if isinstance(mapping, str) else None
        return CustomFunctionRule(source=source, **common)

    return UndefinedRule(**common)


def lookup_table_entries(table: Dict[str, Any]) -> List[Tuple[str, Any]]:
    """Return the ``(raw, normalized)`` pairs of a lookup table.

    A table holding exactly one entry whose value is itself an object, e.g.
    ``{"PropertyType": {"Farm": "Farm"}}``, is keyed by its source field;
    it is unwrapped one level. Nothing else is unwrapped.
    """
    entries = list(table.items())
    if len(entries) == 1 and isinstance(entries[0][1], dict):
        entries = list(entries[0][1].items())
    return entries
