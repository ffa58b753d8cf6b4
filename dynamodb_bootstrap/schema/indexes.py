"""Assemble secondary index definitions from per-index key buckets."""

from typing import NamedTuple, Tuple

from ..models import IndexKind, IndexSchema
from .key_schema import IndexBuckets, KeySchemaFragment, order_key_elements


class AssembledIndexes(NamedTuple):
    global_indexes: Tuple[IndexSchema, ...]
    local_indexes: Tuple[IndexSchema, ...]


def assemble_index_group(buckets: IndexBuckets, kind: IndexKind) -> Tuple[IndexSchema, ...]:
    """Build one IndexSchema per non-empty bucket, projecting all attributes."""
    return tuple(
        IndexSchema(name=name, kind=kind, key_elements=order_key_elements(elements))
        for name, elements in buckets.items()
        if elements
    )


def assemble_indexes(fragment: KeySchemaFragment) -> AssembledIndexes:
    """Build the global and local index lists of a table.

    Local and global buckets are processed independently; a name lives in
    exactly one of them, as decided by build_key_schema().
    """
    return AssembledIndexes(
        global_indexes=assemble_index_group(fragment.global_index_keys, IndexKind.GLOBAL),
        local_indexes=assemble_index_group(fragment.local_index_keys, IndexKind.LOCAL),
    )
