"""
Table Schema Models

Immutable values describing a CreateTable request: key schema elements,
secondary indexes, billing policy and the table schema that ties them
together. TableSchema.to_create_table_kwargs() renders the keyword arguments
for boto3's DynamoDB client create_table().
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .descriptors import AttributeDescriptor


class KeyType(str, Enum):
    """Key element types accepted by DynamoDB."""
    HASH = "HASH"
    RANGE = "RANGE"


class IndexKind(str, Enum):
    """Placement of a secondary index."""
    LOCAL = "local"
    GLOBAL = "global"


class KeySchemaElement(BaseModel):
    """One (attribute, key type) pair of a key schema."""

    attribute_name: str
    key_type: KeyType

    model_config = ConfigDict(frozen=True)

    def to_request(self) -> Dict[str, str]:
        return {'AttributeName': self.attribute_name, 'KeyType': self.key_type.value}


class ProvisionedBilling(BaseModel):
    """Fixed read/write throughput on the table and every global index."""

    billing_mode: Literal['PROVISIONED'] = 'PROVISIONED'
    read_capacity_units: PositiveInt = 10
    write_capacity_units: PositiveInt = 10

    model_config = ConfigDict(frozen=True)

    def throughput(self) -> Dict[str, int]:
        return {
            'ReadCapacityUnits': self.read_capacity_units,
            'WriteCapacityUnits': self.write_capacity_units
        }

    def table_fields(self) -> Dict[str, Any]:
        return {'BillingMode': self.billing_mode, 'ProvisionedThroughput': self.throughput()}

    def global_index_fields(self) -> Dict[str, Any]:
        return {'ProvisionedThroughput': self.throughput()}


class OnDemandBilling(BaseModel):
    """Pay-per-request billing; no capacity units anywhere in the request."""

    billing_mode: Literal['PAY_PER_REQUEST'] = 'PAY_PER_REQUEST'

    model_config = ConfigDict(frozen=True)

    def table_fields(self) -> Dict[str, Any]:
        return {'BillingMode': self.billing_mode}

    def global_index_fields(self) -> Dict[str, Any]:
        return {}


BillingPolicy = Union[ProvisionedBilling, OnDemandBilling]


class IndexSchema(BaseModel):
    """A secondary index definition projecting all attributes."""

    name: str = Field(..., min_length=1)
    kind: IndexKind
    key_elements: Tuple[KeySchemaElement, ...]
    projection_type: Literal['ALL'] = 'ALL'

    model_config = ConfigDict(frozen=True)

    @property
    def partition_key(self) -> Optional[str]:
        return _first_of(self.key_elements, KeyType.HASH)

    @property
    def sort_key(self) -> Optional[str]:
        return _first_of(self.key_elements, KeyType.RANGE)

    def to_request(self) -> Dict[str, Any]:
        return {
            'IndexName': self.name,
            'KeySchema': [element.to_request() for element in self.key_elements],
            'Projection': {'ProjectionType': self.projection_type}
        }


class TableSchema(BaseModel):
    """Final provisioning payload for one entity."""

    table_name: str = Field(..., min_length=1)
    attribute_definitions: Tuple[AttributeDescriptor, ...]
    primary_key: Tuple[KeySchemaElement, ...]
    global_indexes: Tuple[IndexSchema, ...] = ()
    local_indexes: Tuple[IndexSchema, ...] = ()
    billing: BillingPolicy = Field(default_factory=OnDemandBilling, discriminator='billing_mode')

    model_config = ConfigDict(frozen=True)

    @property
    def partition_key(self) -> Optional[str]:
        return _first_of(self.primary_key, KeyType.HASH)

    @property
    def sort_key(self) -> Optional[str]:
        return _first_of(self.primary_key, KeyType.RANGE)

    def to_create_table_kwargs(self) -> Dict[str, Any]:
        """Render keyword arguments for ``client.create_table``.

        Empty index lists are left out; DynamoDB rejects empty
        GlobalSecondaryIndexes/LocalSecondaryIndexes arrays.
        """
        kwargs: Dict[str, Any] = {
            'TableName': self.table_name,
            'AttributeDefinitions': [attribute.to_request() for attribute in self.attribute_definitions],
            'KeySchema': [element.to_request() for element in self.primary_key],
        }

        if self.global_indexes:
            kwargs['GlobalSecondaryIndexes'] = [
                {**index.to_request(), **self.billing.global_index_fields()}
                for index in self.global_indexes
            ]
        if self.local_indexes:
            kwargs['LocalSecondaryIndexes'] = [index.to_request() for index in self.local_indexes]

        kwargs.update(self.billing.table_fields())
        return kwargs


def _first_of(elements: Tuple[KeySchemaElement, ...], key_type: KeyType) -> Optional[str]:
    for element in elements:
        if element.key_type is key_type:
            return element.attribute_name
    return None
