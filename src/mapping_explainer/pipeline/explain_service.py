"""Per-request orchestration: resolve a field, explain its rule."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from mapping_explainer.exceptions import ConfigurationError
from mapping_explainer.explainers.explanation_builder import render
from mapping_explainer.explainers.function_explainer import FunctionExplainer
from mapping_explainer.models.rules import CategorizedRule, CustomFunctionRule, FieldRule
from mapping_explainer.models.schemas import ExplanationResult, ResolvedField
from mapping_explainer.pipeline.validation import parse_source_id, require_text
from mapping_explainer.resolvers.mapping_resolver import FieldMappingResolver, MappingVersionResolver
from mapping_explainer.resolvers.spec_resolver import SpecResolver

logger = structlog.get_logger()


def shared_function_source(rule: FieldRule) -> Optional[str]:
    """Function body to send to the explainer, if there is exactly one.

    A plain function rule yields its body. A categorized rule yields a body
    only when every category is a function with the same non-blank body
    (compared after trimming), so the explainer runs once for all of them.
    """
    if isinstance(rule, CustomFunctionRule):
        return rule.source if rule.has_source else None

    if isinstance(rule, CategorizedRule):
        categories = list(rule.categories.values())
        if not categories:
            return None
        if not all(isinstance(cfg, CustomFunctionRule) and cfg.has_source for cfg in categories):
            return None
        bodies = [cfg.source.strip() for cfg in categories]
        if all(body == bodies[0] for body in bodies):
            return bodies[0]

    return None


class ExplanationService:
    """Entry points used by the HTTP layer and the command line."""

    def __init__(self, store, function_explainer: Optional[FunctionExplainer] = None):
        """Initialize service.

        Args:
            store: Document store (see ``mapping_explainer.store``)
            function_explainer: Explainer for custom functions; None disables it
        """
        specs = SpecResolver(store)
        self.fields = FieldMappingResolver(MappingVersionResolver(store), specs)
        self.function_explainer = function_explainer

    def list_resources(self, source_id: Any) -> List[str]:
        return self.fields.list_resources(parse_source_id(source_id))

    def list_fields(self, source_id: Any, resource: Any) -> List[Dict[str, Any]]:
        entries = self.fields.list_field_rules(parse_source_id(source_id), require_text(resource, "resource"))
        return [entry.to_view() for entry in entries]

    def field_by_key(self, source_id: Any, resource: Any, key: Any) -> Optional[Dict[str, Any]]:
        key = require_text(key, "key")
        rule = self.fields.resolve_by_key(
            parse_source_id(source_id), require_text(resource, "resource"), key
        )
        if rule is None:
            return None
        return {"key": key, **rule.to_view()}

    def field_by_name(self, source_id: Any, resource: Any, standard_name: Any) -> Optional[ResolvedField]:
        return self.fields.resolve_by_standard_name(
            parse_source_id(source_id),
            require_text(resource, "resource"),
            require_text(standard_name, "standardName"),
        )

    def explain_function(self, field_label: Any, source_text: Any) -> str:
        if self.function_explainer is None:
            raise ConfigurationError("Function explainer is disabled")
        return self.function_explainer.explain(
            require_text(field_label, "fieldName"), require_text(source_text, "mappingFunction")
        )

    def explain(self, source_id: Any, resource: Any, standard_name: Any) -> Optional[ExplanationResult]:
        """Resolve a standard field and explain its rule.

        Returns:
            ExplanationResult, or None if the field cannot be resolved
        """
        source_id = parse_source_id(source_id)
        resource = require_text(resource, "resource")
        standard_name = require_text(standard_name, "standardName")

        resolved = self.fields.resolve_by_standard_name(source_id, resource, standard_name)
        if resolved is None:
            return None
        rule = resolved.rule

        function_explanation = None
        source_text = shared_function_source(rule)
        if source_text is not None and self.function_explainer is not None:
            function_explanation = self.function_explainer.explain(standard_name, source_text)

        class_names: Dict[str, str] = {}
        if isinstance(rule, CategorizedRule):
            class_names = resolved.document.category_names(resource)

        explanation = render(standard_name, rule, class_names, function_explanation)
        logger.info(
            "Explanation built",
            source_id=source_id,
            resource=resource,
            record_id=resolved.record_id,
            mapping_type=rule.mapping_type.value,
            used_function_explainer=function_explanation is not None,
        )

        return ExplanationResult(
            source_id=source_id,
            resource=resource,
            standard_name=standard_name,
            record_id=resolved.record_id,
            mapping_type=rule.type_label,
            mls_fields=list(rule.mls_fields),
            raw_mapping=rule.raw_mapping,
            class_names=class_names,
            explanation=explanation,
        )
