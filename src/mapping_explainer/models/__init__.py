"""Data models: stored tables, snapshots and field rules."""
from .rules import (
    CategorizedRule,
    CustomFunctionRule,
    DirectCopyRule,
    FieldRule,
    LookupTableRule,
    MappingType,
    UndefinedRule,
    lookup_table_entries,
    parse_field_rule,
)
from .schemas import (
    ExplanationResult,
    FieldDefinition,
    FieldRuleEntry,
    MappingDocument,
    ResolvedField,
    SpecCatalog,
)

__all__ = [
    "CategorizedRule",
    "CustomFunctionRule",
    "DirectCopyRule",
    "ExplanationResult",
    "FieldDefinition",
    "FieldRule",
    "FieldRuleEntry",
    "LookupTableRule",
    "MappingDocument",
    "MappingType",
    "ResolvedField",
    "SpecCatalog",
    "UndefinedRule",
    "lookup_table_entries",
    "parse_field_rule",
]
