# Base exception class
from .base import BootstrapError

# Domain-specific exceptions
from .domain_exceptions import (
    EntityNotFoundError,
    InvalidSchemaError,
    ProvisioningTimeoutError,
    StoreUnavailableError,
    TableAlreadyExistsError,
)

__all__ = [
    # Base exception
    "BootstrapError",

    # Domain exceptions (alphabetically ordered)
    "EntityNotFoundError",
    "InvalidSchemaError",
    "ProvisioningTimeoutError",
    "StoreUnavailableError",
    "TableAlreadyExistsError",
]
