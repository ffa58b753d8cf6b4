# Entity declarations
from .descriptors import (
    AttributeDeclaration,
    AttributeDescriptor,
    EntityDescriptor,
    KeyRole,
    RoleKind,
    ScalarType,
)

# CreateTable payload
from .schema import (
    BillingPolicy,
    IndexKind,
    IndexSchema,
    KeySchemaElement,
    KeyType,
    OnDemandBilling,
    ProvisionedBilling,
    TableSchema,
)

# Provisioning results
from .outcomes import OutcomeStatus, ProvisioningOutcome

__all__ = [
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
]
