"""Request orchestration."""
from .explain_service import ExplanationService, shared_function_source

__all__ = ["ExplanationService", "shared_function_source"]
