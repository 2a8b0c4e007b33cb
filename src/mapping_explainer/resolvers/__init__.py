"""Catalog and mapping resolvers."""
from .mapping_resolver import FieldMappingResolver, MappingVersionResolver
from .spec_resolver import SpecResolver, match_record_id

__all__ = ["FieldMappingResolver", "MappingVersionResolver", "SpecResolver", "match_record_id"]
