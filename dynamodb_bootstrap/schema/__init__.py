"""
Schema derivation: entity descriptor → CreateTable schema.

Pure transformations, applied in this order:
- extract_key_attributes: keep attributes that carry a key role
- build_key_schema: primary key plus local/global index buckets
- assemble_indexes: IndexSchema per bucket
- build_table_schema: TableSchema with billing, validated
"""

from .extractor import TaggedAttribute, extract_key_attributes
from .indexes import AssembledIndexes, assemble_indexes
from .key_schema import KeySchemaFragment, build_key_schema, order_key_elements
from .table_request import build_table_schema, validate_table_schema

__all__ = [
    "AssembledIndexes",
    "KeySchemaFragment",
    "TaggedAttribute",
    "assemble_indexes",
    "build_key_schema",
    "build_table_schema",
    "extract_key_attributes",
    "order_key_elements",
    "validate_table_schema",
]
