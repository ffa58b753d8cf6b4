"""
Table Request Builder

Runs the full derivation for one entity (extract → key schema → indexes) and
combines the result into a validated TableSchema. Validation happens before
anything is sent to the store: a schema that fails here is never submitted.
"""

import logging
from typing import List, Optional, Sequence

from ..exceptions import InvalidSchemaError
from ..models import (
    BillingPolicy,
    EntityDescriptor,
    IndexSchema,
    KeySchemaElement,
    KeyType,
    OnDemandBilling,
    ScalarType,
    TableSchema,
)
from .extractor import extract_key_attributes
from .indexes import assemble_indexes
from .key_schema import build_key_schema

logger = logging.getLogger(__name__)


def build_table_schema(entity: EntityDescriptor, billing: Optional[BillingPolicy] = None) -> TableSchema:
    """Derive and validate the table schema of one entity.

    Args:
        entity: Entity declaration with its resolved table name
        billing: Billing policy; on-demand when omitted

    Returns:
        Validated TableSchema

    Raises:
        InvalidSchemaError: If the declaration does not describe a valid table
    """
    tagged = extract_key_attributes(entity)
    fragment = build_key_schema(tagged, entity.local_index_names)
    indexes = assemble_indexes(fragment)

    schema = TableSchema(
        table_name=entity.table_name,
        attribute_definitions=fragment.attribute_definitions,
        primary_key=fragment.primary_key,
        global_indexes=indexes.global_indexes,
        local_indexes=indexes.local_indexes,
        billing=billing if billing is not None else OnDemandBilling(),
    )
    validate_table_schema(schema)

    logger.debug(
        f"Built schema for {entity.entity_id}: table={schema.table_name}, "
        f"key={[e.attribute_name for e in schema.primary_key]}, "
        f"gsi={[i.name for i in schema.global_indexes]}, lsi={[i.name for i in schema.local_indexes]}"
    )
    return schema


def validate_table_schema(schema: TableSchema) -> None:
    """Check the structural rules DynamoDB enforces on CreateTable.

    Raises:
        InvalidSchemaError: Listing every problem found
    """
    problems: List[str] = []

    problems.extend(_key_problems("primary key", schema.primary_key))

    for index in schema.global_indexes + schema.local_indexes:
        problems.extend(_key_problems(f"{index.kind.value} index '{index.name}'", index.key_elements))

    for index in schema.local_indexes:
        problems.extend(_local_index_problems(index, schema))

    for attribute in schema.attribute_definitions:
        if attribute.scalar_type is ScalarType.UNKNOWN:
            problems.append(f"attribute '{attribute.name}' has no DynamoDB scalar type (S, N or B)")

    if problems:
        raise InvalidSchemaError(
            f"Invalid schema for table {schema.table_name}",
            table_name=schema.table_name,
            problems=problems
        )


def _key_problems(label: str, elements: Sequence[KeySchemaElement]) -> List[str]:
    hash_keys = [e.attribute_name for e in elements if e.key_type is KeyType.HASH]
    range_keys = [e.attribute_name for e in elements if e.key_type is KeyType.RANGE]
    problems = []

    if not hash_keys:
        if range_keys:
            problems.append(f"{label} declares sort key {range_keys} but no partition key")
        else:
            problems.append(f"{label} has no partition key")
    elif len(hash_keys) > 1:
        problems.append(f"{label} has more than one partition key: {hash_keys}")

    if len(range_keys) > 1:
        problems.append(f"{label} has more than one sort key: {range_keys}")

    return problems


def _local_index_problems(index: IndexSchema, schema: TableSchema) -> List[str]:
    problems = []
    if schema.sort_key is None:
        problems.append(f"local index '{index.name}' requires the table to have a sort key")
    if index.partition_key is not None and index.partition_key != schema.partition_key:
        problems.append(
            f"local index '{index.name}' must use the table partition key "
            f"'{schema.partition_key}', not '{index.partition_key}'"
        )
    if index.sort_key is None:
        problems.append(f"local index '{index.name}' requires a sort key")
    return problems
