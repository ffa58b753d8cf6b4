"""
Entity Descriptor Models

An EntityDescriptor is the explicit, already-resolved declaration of one
entity type: its physical table name, the attributes that take part in a key
and the role(s) each attribute plays. Descriptors are built once per entity
type by the registration layer (see registry.py) or by hand, and handed to the
schema builders as plain data.

Example:
    user = EntityDescriptor(
        entity_id="app.models.User",
        table_name="dev_user",
        attributes=(
            AttributeDeclaration(name="id", scalar_type=ScalarType.STRING,
                                 roles=(KeyRole.partition_key(),)),
            AttributeDeclaration(name="email", scalar_type=ScalarType.STRING,
                                 roles=(KeyRole.secondary_partition_key("by_email"),)),
        ),
    )
"""

from enum import Enum
from typing import FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScalarType(str, Enum):
    """DynamoDB scalar attribute types usable in a key."""
    STRING = "S"
    NUMBER = "N"
    BINARY = "B"
    UNKNOWN = "UNKNOWN"


class RoleKind(str, Enum):
    """Key role an attribute can play."""
    PARTITION_KEY = "partition_key"
    SORT_KEY = "sort_key"
    SECONDARY_PARTITION_KEY = "secondary_partition_key"
    SECONDARY_SORT_KEY = "secondary_sort_key"


SECONDARY_ROLE_KINDS = frozenset({RoleKind.SECONDARY_PARTITION_KEY, RoleKind.SECONDARY_SORT_KEY})


class KeyRole(BaseModel):
    """Role tag on an attribute.

    Secondary roles name the indexes they apply to; primary roles name none.
    """

    kind: RoleKind
    index_names: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_index_names(self) -> 'KeyRole':
        if self.kind in SECONDARY_ROLE_KINDS and not self.index_names:
            raise ValueError(f"{self.kind.value} role must name at least one index")
        if self.kind not in SECONDARY_ROLE_KINDS and self.index_names:
            raise ValueError(f"{self.kind.value} role cannot name indexes")
        if any(not name for name in self.index_names):
            raise ValueError("Index names cannot be empty")
        return self

    @property
    def is_secondary(self) -> bool:
        return self.kind in SECONDARY_ROLE_KINDS

    @classmethod
    def partition_key(cls) -> 'KeyRole':
        return cls(kind=RoleKind.PARTITION_KEY)

    @classmethod
    def sort_key(cls) -> 'KeyRole':
        return cls(kind=RoleKind.SORT_KEY)

    @classmethod
    def secondary_partition_key(cls, *index_names: str) -> 'KeyRole':
        return cls(kind=RoleKind.SECONDARY_PARTITION_KEY, index_names=tuple(index_names))

    @classmethod
    def secondary_sort_key(cls, *index_names: str) -> 'KeyRole':
        return cls(kind=RoleKind.SECONDARY_SORT_KEY, index_names=tuple(index_names))


class AttributeDescriptor(BaseModel):
    """One scalar attribute as it appears in AttributeDefinitions."""

    name: str = Field(..., min_length=1, description="Attribute name")
    scalar_type: ScalarType = Field(..., description="DynamoDB scalar type")

    model_config = ConfigDict(frozen=True)

    def to_request(self) -> dict:
        return {'AttributeName': self.name, 'AttributeType': self.scalar_type.value}


class AttributeDeclaration(BaseModel):
    """An entity attribute together with the key roles it was declared with."""

    name: str = Field(..., min_length=1, description="Attribute name")
    scalar_type: ScalarType = Field(..., description="DynamoDB scalar type")
    roles: Tuple[KeyRole, ...] = Field(default=(), description="Declared key roles")

    model_config = ConfigDict(frozen=True)

    @property
    def descriptor(self) -> AttributeDescriptor:
        return AttributeDescriptor(name=self.name, scalar_type=self.scalar_type)


class EntityDescriptor(BaseModel):
    """Explicit declaration of one entity type, ready for schema derivation."""

    entity_id: str = Field(..., min_length=1, description="Identifier of the entity type")
    table_name: str = Field(..., min_length=1, description="Resolved physical table name")
    attributes: Tuple[AttributeDeclaration, ...] = Field(
        default=(), description="Attributes in declaration order"
    )
    local_index_names: FrozenSet[str] = Field(
        default_factory=frozenset, description="Index names created as local secondary indexes"
    )
    is_document: bool = Field(
        default=False, description="Sub-document types never own a table"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_unique_attribute_names(self) -> 'EntityDescriptor':
        seen = set()
        for attribute in self.attributes:
            if attribute.name in seen:
                raise ValueError(f"Duplicate attribute '{attribute.name}' in entity {self.entity_id}")
            seen.add(attribute.name)
        return self
