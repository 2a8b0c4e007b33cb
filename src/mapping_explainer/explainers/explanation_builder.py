"""Deterministic plain-language explanations for field rules.

``render`` never calls out to anything: explanations of custom functions
are produced elsewhere and passed in as ``function_explanation``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from mapping_explainer.models.rules import (
    CategorizedRule,
    CustomFunctionRule,
    DirectCopyRule,
    FieldRule,
    LookupTableRule,
    lookup_table_entries,
)

MAX_EXAMPLES = 8


def format_mls_fields(mls_fields: List[str]) -> str:
    """Turn a list of source fields into a friendly description."""
    if not mls_fields:
        return "no specific MLS fields"
    if len(mls_fields) == 1:
        return f"the MLS field {mls_fields[0]}"
    return f"these MLS fields: {', '.join(mls_fields)}"


def format_lookup_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def render(
    field_label: Optional[str],
    rule: FieldRule,
    class_name_lookup: Optional[Mapping[str, str]] = None,
    function_explanation: Optional[str] = None,
) -> str:
    """Build the explanation for one rule.

    Args:
        field_label: Standard field name shown to the reader
        rule: Parsed field rule
        class_name_lookup: Category code -> friendly name
        function_explanation: Text from the function explainer, if any

    Returns:
        Explanation text
    """
    label = field_label or "this field"
    names = dict(class_name_lookup or {})
    explanation = function_explanation if isinstance(function_explanation, str) and function_explanation else None

    if isinstance(rule, DirectCopyRule):
        return _render_direct_copy(label, rule)
    if isinstance(rule, LookupTableRule):
        return _render_lookup_table(label, rule)
    if isinstance(rule, CategorizedRule):
        return _render_categorized(label, rule, names, explanation)
    if isinstance(rule, CustomFunctionRule):
        return _render_custom_function(label, rule, explanation)
    return f"The mapping for {label} is not defined. The result will always be empty."


def _render_direct_copy(label: str, rule: DirectCopyRule) -> str:
    return (
        f"For all records, the value for {label} is copied directly from "
        f"{format_mls_fields(rule.mls_fields)}. "
        "If those MLS fields are empty, the result is also empty."
    )


def _render_lookup_table(label: str, rule: LookupTableRule) -> str:
    fields_text = format_mls_fields(rule.mls_fields)
    if rule.table is None:
        return f"The value for {label} comes from {fields_text}, but it is converted through a lookup table."

    entries = lookup_table_entries(rule.table)
    if not entries:
        return (
            f"The value for {label} comes from {fields_text}, but the lookup table is empty, "
            "so the result will usually match the original MLS value."
        )

    example_lines = [
        f'"{raw}" → "{format_lookup_value(normalized)}"'
        for raw, normalized in entries[:MAX_EXAMPLES]
    ]
    suffix = ""
    if len(entries) > len(example_lines):
        suffix = "\nThere are additional MLS values not listed here that follow the same pattern."

    return (
        f"The value for {label} comes from {fields_text}, but specific raw MLS values "
        "are converted using a lookup table.\n\n"
        "The lookup value mappings are: (MLS Lookups → RESO Lookups)\n"
        + "\n".join(example_lines)
        + suffix
        + "\n\nIf the MLS value is not in the table, the result may be empty or stay as "
        "the original MLS value, depending on configuration."
    )


def _stored_fields_key(rule: FieldRule) -> str:
    """Structural text of ``mlsFields`` as stored; missing or falsy means ``[]``."""
    return json.dumps(rule.raw_mls_fields or [], separators=(",", ":"), ensure_ascii=False, default=str)


def _shares_type_and_fields(categories: Dict[str, FieldRule]) -> bool:
    rules = list(categories.values())
    first = rules[0]
    first_fields = _stored_fields_key(first)
    return all(
        rule.describe_type() == first.describe_type() and _stored_fields_key(rule) == first_fields
        for rule in rules
    )


def _union_mls_fields(categories: Dict[str, FieldRule]) -> List[str]:
    seen: List[str] = []
    for rule in categories.values():
        for field in rule.mls_fields:
            if field not in seen:
                seen.append(field)
    return seen


def _render_categorized(
    label: str,
    rule: CategorizedRule,
    names: Dict[str, str],
    function_explanation: Optional[str],
) -> str:
    categories = rule.categories
    if not categories:
        return (
            f"The mapping for {label} is based on property classes, but no class-specific "
            "rules are defined. The result will be empty."
        )

    class_list = ", ".join(names.get(code, code) for code in categories)

    if _shares_type_and_fields(categories):
        first = next(iter(categories.values()))
        text = (
            f"The mapping for {label} depends on the property class, but all classes are "
            "handled the same way.\n\n"
            f"All classes use a {first.describe_type()} mapping from "
            f"{format_mls_fields(first.mls_fields)}.\n\n"
            f"This applies to these classes: {class_list}."
        )
        if function_explanation:
            text += "\n\nFunction details:\n" + function_explanation
        return text

    if function_explanation:
        all_fields = _union_mls_fields(categories)
        all_fields_text = (
            f"these MLS fields: {', '.join(all_fields)}"
            if all_fields
            else "the available MLS fields for that class"
        )
        return (
            f"The mapping for {label} uses the same function across multiple property "
            f"classes: {class_list}.\n\n"
            f"That function reads from {all_fields_text} to build the result.\n\n"
            "Function details:\n" + function_explanation
        )

    class_lines = [
        f"{names.get(code, code)} ({code}): {cfg.describe_type()} using "
        f"{format_mls_fields(cfg.mls_fields)};"
        for code, cfg in list(categories.items())[:MAX_EXAMPLES]
    ]
    suffix = ""
    if len(categories) > len(class_lines):
        suffix = "\nThere are additional property classes not listed here that follow similar rules."

    return (
        f"The mapping for {label} depends on the property class. For each class, it uses "
        "its own mapping type and MLS fields.\n\n"
        "Some examples are:\n" + "\n".join(class_lines) + suffix
    )


def _render_custom_function(
    label: str, rule: CustomFunctionRule, function_explanation: Optional[str]
) -> str:
    if function_explanation:
        return function_explanation

    extra = (
        " It uses a custom JavaScript function to combine and clean the MLS data."
        if rule.has_source
        else " It uses custom logic to combine the MLS data, but the function body is not available."
    )
    return (
        f"The value for {label} is calculated using {format_mls_fields(rule.mls_fields)}."
        f"{extra} The details of the function can be shown separately if needed."
    )
