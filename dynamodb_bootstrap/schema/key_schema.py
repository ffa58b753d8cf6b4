"""
Key Schema Builder

Turns role-tagged attributes into the primary key and the per-index key
elements of a table. Index placement is decided here, once: an index whose
name is in the entity's local index set goes to the local buckets, every
other index is global.

The result is a KeySchemaFragment: tuples and read-only mappings, built in a
single pass and never mutated afterwards.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple

from ..models import AttributeDescriptor, KeySchemaElement, KeyType, RoleKind
from .extractor import TaggedAttribute

IndexBuckets = Mapping[str, Tuple[KeySchemaElement, ...]]


class KeySchemaFragment(NamedTuple):
    """Everything derived from an entity's key roles, before index assembly."""
    attribute_definitions: Tuple[AttributeDescriptor, ...]
    primary_key: Tuple[KeySchemaElement, ...]
    local_index_keys: IndexBuckets
    global_index_keys: IndexBuckets


def order_key_elements(elements: Iterable[KeySchemaElement]) -> Tuple[KeySchemaElement, ...]:
    """Order key elements HASH first, then RANGE.

    DynamoDB rejects key schemas that list the RANGE element first. There are
    only two key types, so the order is spelled out instead of sorted.
    """
    elements = list(elements)
    hash_elements = [element for element in elements if element.key_type is KeyType.HASH]
    range_elements = [element for element in elements if element.key_type is KeyType.RANGE]
    return tuple(hash_elements + range_elements)


def build_key_schema(
    tagged_attributes: Sequence[TaggedAttribute],
    local_index_names: Iterable[str] = ()
) -> KeySchemaFragment:
    """Partition tagged attributes into primary and secondary key elements.

    Args:
        tagged_attributes: Output of extract_key_attributes()
        local_index_names: Index names declared as local secondary indexes

    Returns:
        KeySchemaFragment with every key sequence ordered HASH then RANGE
    """
    local_names = frozenset(local_index_names)
    attribute_definitions: List[AttributeDescriptor] = []
    primary_key: List[KeySchemaElement] = []
    local_buckets: Dict[str, List[KeySchemaElement]] = {}
    global_buckets: Dict[str, List[KeySchemaElement]] = {}

    for descriptor, roles in tagged_attributes:
        attribute_definitions.append(descriptor)
        kinds = {role.kind for role in roles}

        if RoleKind.PARTITION_KEY in kinds:
            primary_key.append(KeySchemaElement(attribute_name=descriptor.name, key_type=KeyType.HASH))
        elif RoleKind.SORT_KEY in kinds:
            primary_key.append(KeySchemaElement(attribute_name=descriptor.name, key_type=KeyType.RANGE))

        for role in roles:
            if role.kind is RoleKind.SECONDARY_PARTITION_KEY:
                key_type = KeyType.HASH
            elif role.kind is RoleKind.SECONDARY_SORT_KEY:
                key_type = KeyType.RANGE
            else:
                continue

            element = KeySchemaElement(attribute_name=descriptor.name, key_type=key_type)
            for index_name in role.index_names:
                buckets = local_buckets if index_name in local_names else global_buckets
                buckets.setdefault(index_name, []).append(element)

    return KeySchemaFragment(
        attribute_definitions=tuple(attribute_definitions),
        primary_key=order_key_elements(primary_key),
        local_index_keys=_freeze(local_buckets),
        global_index_keys=_freeze(global_buckets),
    )


def _freeze(buckets: Dict[str, List[KeySchemaElement]]) -> IndexBuckets:
    return MappingProxyType({name: order_key_elements(elements) for name, elements in buckets.items()})
