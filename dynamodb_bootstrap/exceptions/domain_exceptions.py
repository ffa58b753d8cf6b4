"""
Domain-Specific Exceptions for Table Bootstrap

Every failure the provisioning pass can record against an entity is one of
these. They all extend BootstrapError so callers can catch the whole family.

Organized by category:
1. Schema Errors
2. Entity Resolution Errors
3. Store Errors
"""

from typing import Any, Dict, List, Optional

from .base import BootstrapError


# =============================================================================
# Schema Errors
# =============================================================================

class InvalidSchemaError(BootstrapError):
    """Raised when an entity declaration cannot produce a valid table schema.

    Used for:
    - Missing or duplicated primary partition key
    - Secondary sort key declared for an index with no partition key
    - Key attributes whose scalar type cannot be inferred
    - Local indexes that do not share the table's partition key
    - Meta declarations naming fields the model does not have
    - ValidationException returned by CreateTable
    """

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        problems: Optional[List[str]] = None,
        original_error: Optional[Exception] = None,
        entity_id: Optional[str] = None
    ):
        """Initialize invalid schema error.

        Args:
            message: Human-readable error message
            table_name: Table the schema was built for
            problems: Individual validation problems found
            original_error: The original exception that caused this error
            entity_id: Entity whose declaration is invalid
        """
        self.problems = problems or []
        context = {'problems': self.problems} if self.problems else None
        super().__init__(message, original_error, context, table_name=table_name, entity_id=entity_id)


# =============================================================================
# Entity Resolution Errors
# =============================================================================

class EntityNotFoundError(BootstrapError):
    """Raised when an entity reference does not name a declared entity type."""

    def __init__(self, entity_ref: str, original_error: Optional[Exception] = None):
        self.entity_ref = entity_ref
        super().__init__(f"Entity not found: {entity_ref}", original_error, entity_id=entity_ref)


# =============================================================================
# Store Errors
# =============================================================================

class TableAlreadyExistsError(BootstrapError):
    """Raised when CreateTable reports that the table already exists.

    Provisioning treats this as a lost creation race: another process created
    the table between the table listing and our request.
    """

    def __init__(self, table_name: str, original_error: Optional[Exception] = None):
        super().__init__(f"Table already exists: {table_name}", original_error, table_name=table_name)


class StoreUnavailableError(BootstrapError):
    """Raised when the store cannot serve a request.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Throttling, account limits and service-side errors
    - Invalid endpoint configurations
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        table_name: Optional[str] = None
    ):
        super().__init__(message, original_error, context, table_name=table_name)


class ProvisioningTimeoutError(BootstrapError):
    """Raised when an entity did not finish provisioning before the pass deadline."""

    def __init__(self, table_name: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Provisioning of table {table_name} did not finish within {timeout_seconds}s",
            context={'timeout_seconds': timeout_seconds},
            table_name=table_name
        )
