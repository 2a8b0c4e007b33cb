"""Process-scoped document store."""
from .document_store import DocumentStore, MappingRow, SpecRow

__all__ = ["DocumentStore", "MappingRow", "SpecRow"]
