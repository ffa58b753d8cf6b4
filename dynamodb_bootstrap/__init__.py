from .config import BootstrapConfig
from .exceptions import (
    BootstrapError,
    EntityNotFoundError,
    InvalidSchemaError,
    ProvisioningTimeoutError,
    StoreUnavailableError,
    TableAlreadyExistsError,
)
from .models import (
    # Entity declarations
    AttributeDeclaration,
    AttributeDescriptor,
    EntityDescriptor,
    KeyRole,
    RoleKind,
    ScalarType,
    # CreateTable payload
    BillingPolicy,
    IndexKind,
    IndexSchema,
    KeySchemaElement,
    KeyType,
    OnDemandBilling,
    ProvisionedBilling,
    TableSchema,
    # Provisioning results
    OutcomeStatus,
    ProvisioningOutcome,
)
from .schema import build_table_schema
from .registry import (
    EntityRegistry,
    IndexDefinition,
    TableMeta,
    descriptor_from_model,
    resolve_table_name,
)
from .core import (
    TableProvisioner,
    TableStore,
    TableStoreGateway,
    create_provisioner,
    create_table_store,
    provision_entities,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "BootstrapConfig",

    # Exceptions
    "BootstrapError",
    "EntityNotFoundError",
    "InvalidSchemaError",
    "ProvisioningTimeoutError",
    "StoreUnavailableError",
    "TableAlreadyExistsError",

    # Entity declarations
    "AttributeDeclaration",
    "AttributeDescriptor",
    "EntityDescriptor",
    "KeyRole",
    "RoleKind",
    "ScalarType",

    # CreateTable payload
    "BillingPolicy",
    "IndexKind",
    "IndexSchema",
    "KeySchemaElement",
    "KeyType",
    "OnDemandBilling",
    "ProvisionedBilling",
    "TableSchema",

    # Provisioning results
    "OutcomeStatus",
    "ProvisioningOutcome",

    # Schema derivation
    "build_table_schema",

    # Registration
    "EntityRegistry",
    "IndexDefinition",
    "TableMeta",
    "descriptor_from_model",
    "resolve_table_name",

    # Provisioning
    "TableProvisioner",
    "TableStore",
    "TableStoreGateway",
    "create_provisioner",
    "create_table_store",
    "provision_entities",
]
