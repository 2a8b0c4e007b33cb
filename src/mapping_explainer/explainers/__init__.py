"""Explanation rendering and the LLM function explainer."""
from .explanation_builder import format_mls_fields, render
from .function_explainer import FunctionExplainer

__all__ = ["FunctionExplainer", "format_mls_fields", "render"]
