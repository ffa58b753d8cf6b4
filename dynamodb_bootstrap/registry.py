"""
Entity Registration

Application entities are pydantic models that declare their table layout in a
``Meta`` class, the same way the key-building helpers expect it:

    class User(BaseModel):
        id: str
        dob: int
        email: str

        class Meta(TableMeta):
            partition_key = "id"
            sort_key = "dob"
            indexes = [IndexDefinition("by_email", partition_key="email", sort_key="dob")]

descriptor_from_model() turns that declaration into an EntityDescriptor once
per entity type. The schema builders only ever see the descriptor; nothing
below this module looks at model classes.

EntityRegistry keeps descriptors by entity id and resolves string references
for the provisioning pass.
"""

import importlib
import logging
import re
import types
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, Type, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel

from .config import BootstrapConfig
from .exceptions import EntityNotFoundError, InvalidSchemaError
from .models import AttributeDeclaration, EntityDescriptor, KeyRole, RoleKind, ScalarType

logger = logging.getLogger(__name__)

_UNION_TYPES = tuple(t for t in (Union, getattr(types, 'UnionType', None)) if t is not None)


# =============================================================================
# Table Metadata Declarations
# =============================================================================

class IndexDefinition:
    """Defines a secondary index of an entity."""
    def __init__(
        self,
        name: str,
        partition_key: Optional[str] = None,
        sort_key: Optional[str] = None
    ):
        self.name = name
        self.partition_key = partition_key
        self.sort_key = sort_key

    def __repr__(self) -> str:
        return f"IndexDefinition(name={self.name!r}, partition_key={self.partition_key!r}, sort_key={self.sort_key!r})"


class TableMeta:
    """Base class for table metadata declarations.

    Indexes listed in ``local_index_names`` become local secondary indexes and
    must use the table partition key; all other indexes are global. Set
    ``document = True`` on types that are only ever embedded in other items.
    """
    table_name: Optional[str] = None
    partition_key: Optional[str] = None
    sort_key: Optional[str] = None
    indexes: List[IndexDefinition] = []
    local_index_names: Sequence[str] = ()
    document: bool = False


# =============================================================================
# Type and Name Resolution
# =============================================================================

def infer_scalar_type(annotation: Any) -> ScalarType:
    """Map a field annotation to the DynamoDB scalar type its values are stored as.

    Booleans, datetimes and string enums are written as strings, so they key
    as S. Optional[X] is treated as X.

    Examples:
        >>> infer_scalar_type(Optional[int])
        <ScalarType.NUMBER: 'N'>
        >>> infer_scalar_type(bytes)
        <ScalarType.BINARY: 'B'>
    """
    origin = get_origin(annotation)

    if origin in _UNION_TYPES:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return infer_scalar_type(args[0])
        return ScalarType.UNKNOWN

    if origin is Literal:
        values = get_args(annotation)
        return infer_scalar_type(type(values[0])) if values else ScalarType.UNKNOWN

    if not isinstance(annotation, type):
        return ScalarType.UNKNOWN

    # bool is an int subclass; check it first
    if issubclass(annotation, bool):
        return ScalarType.STRING
    if issubclass(annotation, Enum):
        return ScalarType.NUMBER if issubclass(annotation, int) else ScalarType.STRING
    if issubclass(annotation, (str, datetime, date, UUID)):
        return ScalarType.STRING
    if issubclass(annotation, (int, float, Decimal)):
        return ScalarType.NUMBER
    if issubclass(annotation, (bytes, bytearray)):
        return ScalarType.BINARY
    return ScalarType.UNKNOWN


def to_snake_case(name: str) -> str:
    """Convert a CamelCase class name to snake_case."""
    return re.sub(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])', '_', name).lower()


def entity_id_for(model_class: Type[BaseModel]) -> str:
    """Stable identifier of an entity type: its import path."""
    return f"{model_class.__module__}.{model_class.__qualname__}"


def resolve_table_name(model_class: Type[BaseModel], config: Optional[BootstrapConfig] = None) -> str:
    """Default naming strategy for entity tables.

    Uses ``Meta.table_name`` when set, the snake_case class name otherwise,
    then applies the configured prefix/environment.

    Examples:
        >>> resolve_table_name(UserProfile, BootstrapConfig(table_prefix="app", environment="dev"))
        'app_dev_user_profile'
    """
    meta = getattr(model_class, 'Meta', None)
    base_name = getattr(meta, 'table_name', None) or to_snake_case(model_class.__name__)
    return config.get_table_name(base_name) if config is not None else base_name


# =============================================================================
# Descriptor Construction
# =============================================================================

def descriptor_from_model(
    model_class: Type[BaseModel],
    config: Optional[BootstrapConfig] = None
) -> EntityDescriptor:
    """Build the EntityDescriptor of a pydantic model with a Meta class.

    Args:
        model_class: Pydantic BaseModel class with Meta class
        config: Used for table naming; table names are unprefixed without it

    Returns:
        EntityDescriptor with attributes in field declaration order

    Raises:
        ValueError: If the model has no Meta class or Meta names unknown fields
    """
    if not hasattr(model_class, 'Meta'):
        raise ValueError(f"Model {model_class.__name__} must have a Meta class declaring its keys")

    meta = model_class.Meta
    fields = model_class.model_fields

    # attribute -> role kind -> index names
    declared: Dict[str, Dict[RoleKind, List[str]]] = {}

    def declare(attribute: Optional[str], kind: RoleKind, index_name: Optional[str] = None) -> None:
        if attribute is None:
            return
        if attribute not in fields:
            raise ValueError(f"Model {model_class.__name__}.Meta references unknown field '{attribute}'")
        index_names = declared.setdefault(attribute, {}).setdefault(kind, [])
        if index_name is not None and index_name not in index_names:
            index_names.append(index_name)

    declare(getattr(meta, 'partition_key', None), RoleKind.PARTITION_KEY)
    declare(getattr(meta, 'sort_key', None), RoleKind.SORT_KEY)
    for index in getattr(meta, 'indexes', []):
        declare(index.partition_key, RoleKind.SECONDARY_PARTITION_KEY, index.name)
        declare(index.sort_key, RoleKind.SECONDARY_SORT_KEY, index.name)

    attributes = []
    for field_name, field_info in fields.items():
        roles = tuple(
            KeyRole(kind=kind, index_names=tuple(index_names))
            for kind, index_names in declared.get(field_name, {}).items()
        )
        attributes.append(AttributeDeclaration(
            name=field_name,
            scalar_type=infer_scalar_type(field_info.annotation),
            roles=roles
        ))

    return EntityDescriptor(
        entity_id=entity_id_for(model_class),
        table_name=resolve_table_name(model_class, config),
        attributes=tuple(attributes),
        local_index_names=frozenset(getattr(meta, 'local_index_names', ())),
        is_document=bool(getattr(meta, 'document', False))
    )


# =============================================================================
# Registry
# =============================================================================

class EntityRegistry:
    """Descriptors of the entity types an application provisions tables for.

    Example:
        registry = EntityRegistry(config)

        @registry.register
        class User(BaseModel):
            ...

        provisioner.provision_entities(registry.descriptors())
    """

    def __init__(self, config: Optional[BootstrapConfig] = None):
        self.config = config
        self._descriptors: Dict[str, EntityDescriptor] = {}

    def register(self, model_class: Type[BaseModel]) -> Type[BaseModel]:
        """Register a model class; usable as a class decorator."""
        self.add(descriptor_from_model(model_class, self.config))
        return model_class

    def add(self, descriptor: EntityDescriptor) -> None:
        """Register an already built descriptor."""
        self._descriptors[descriptor.entity_id] = descriptor
        logger.debug(f"Registered entity {descriptor.entity_id} -> {descriptor.table_name}")

    def descriptors(self) -> List[EntityDescriptor]:
        """All registered descriptors, in registration order."""
        return list(self._descriptors.values())

    def resolve(self, entity_ref: str) -> EntityDescriptor:
        """Resolve an entity id or importable model path to its descriptor.

        Raises:
            EntityNotFoundError: If the reference names no model with a Meta class
            InvalidSchemaError: If the model's Meta declaration is invalid
        """
        if entity_ref in self._descriptors:
            return self._descriptors[entity_ref]

        model_class = _import_model(entity_ref)
        if not hasattr(model_class, 'Meta'):
            logger.error(f"Invalid entity reference {entity_ref}: model has no Meta class")
            raise EntityNotFoundError(entity_ref)

        try:
            return descriptor_from_model(model_class, self.config)
        except ValueError as e:
            # Includes pydantic ValidationError from the descriptor itself
            raise InvalidSchemaError(
                f"Invalid entity declaration {entity_ref}",
                table_name=resolve_table_name(model_class, self.config),
                problems=[str(e)],
                original_error=e,
                entity_id=entity_ref
            ) from e

    def __contains__(self, entity_ref: object) -> bool:
        return entity_ref in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


def _import_model(entity_ref: str) -> Type[BaseModel]:
    module_path, _, attribute = entity_ref.rpartition('.')
    if not module_path:
        raise EntityNotFoundError(entity_ref)

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.error(f"Invalid entity reference {entity_ref}: {e}")
        raise EntityNotFoundError(entity_ref, e) from e

    model_class = getattr(module, attribute, None)
    if not (isinstance(model_class, type) and issubclass(model_class, BaseModel)):
        logger.error(f"Invalid entity reference {entity_ref}: not a pydantic model")
        raise EntityNotFoundError(entity_ref)
    return model_class
