"""In-memory stand-in for the document store."""
from __future__ import annotations

from typing import Any, Dict, Optional

from mapping_explainer.exceptions import UpstreamError
from mapping_explainer.store.document_store import MappingRow, SpecRow


class FakeDocumentStore:
    def __init__(
        self,
        catalog: Any = None,
        mappings: Optional[Dict[int, Any]] = None,
        version: str = "2.0.0",
        fail: bool = False,
    ):
        self.catalog = catalog
        self.mappings = mappings or {}
        self.version = version
        self.fail = fail
        self.spec_reads = 0
        self.mapping_reads = 0

    def latest_spec_row(self) -> Optional[SpecRow]:
        self.spec_reads += 1
        if self.fail:
            raise UpstreamError("Catalog read failed: connection refused")
        if self.catalog is None:
            return None
        return SpecRow(row_id=1, version=self.version, document=self.catalog)

    def latest_published_mapping_row(self, source_id: int) -> Optional[MappingRow]:
        self.mapping_reads += 1
        if self.fail:
            raise UpstreamError("Mapping read failed: connection refused")
        document = self.mappings.get(source_id)
        if document is None:
            return None
        return MappingRow(row_id=10, source_id=source_id, document=document)
