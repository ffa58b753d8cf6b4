import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models.schema import BillingPolicy, OnDemandBilling, ProvisionedBilling

# Load environment variables from .env file if it exists
load_dotenv()

BILLING_MODES = ('PROVISIONED', 'PAY_PER_REQUEST')


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


class BootstrapConfig(BaseModel):
    """Configuration for the DynamoDB connection and table provisioning."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Table naming
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Number of retry attempts for failed requests"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Environment settings
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "dev"),
        description="Current environment (dev, staging, prod)"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for provisioning"
    )

    # Provisioning settings
    billing_mode: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_BILLING_MODE", "PAY_PER_REQUEST"),
        description="Billing mode for created tables (PROVISIONED or PAY_PER_REQUEST)"
    )

    read_capacity: int = Field(
        default_factory=lambda: int(os.getenv("DYNAMODB_READ_CAPACITY", "10")),
        description="Read capacity units for provisioned tables"
    )

    write_capacity: int = Field(
        default_factory=lambda: int(os.getenv("DYNAMODB_WRITE_CAPACITY", "10")),
        description="Write capacity units for provisioned tables"
    )

    max_workers: int = Field(
        default_factory=lambda: int(os.getenv("DYNAMODB_PROVISION_WORKERS", "1")),
        description="Number of entities provisioned concurrently"
    )

    provision_timeout_seconds: Optional[float] = Field(
        default_factory=lambda: _optional_float("DYNAMODB_PROVISION_TIMEOUT"),
        description="Deadline for a whole provisioning pass (None waits indefinitely)"
    )

    wait_for_active: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_WAIT_FOR_ACTIVE", "false").lower() == "true",
        description="Wait for each created table to become ACTIVE"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_environments = ['dev', 'staging', 'prod']
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator('billing_mode')
    @classmethod
    def validate_billing_mode(cls, v):
        """Validate billing mode, accepting any case."""
        mode = v.upper()
        if mode not in BILLING_MODES:
            raise ValueError(f"Billing mode must be one of: {list(BILLING_MODES)}")
        return mode

    @field_validator('read_capacity', 'write_capacity', 'max_workers')
    @classmethod
    def validate_positive(cls, v, info):
        """Capacity units and worker counts must be positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix and environment.

        Args:
            base_name: Base table name

        Returns:
            Full table name with prefix and environment
        """
        parts = []

        if self.table_prefix:
            parts.append(self.table_prefix)

        if self.environment != "prod":
            parts.append(self.environment)

        parts.append(base_name)

        return "_".join(parts)

    def billing_policy(self) -> BillingPolicy:
        """Build the billing policy applied to every created table."""
        if self.billing_mode == 'PROVISIONED':
            return ProvisionedBilling(
                read_capacity_units=self.read_capacity,
                write_capacity_units=self.write_capacity
            )
        return OnDemandBilling()

    @classmethod
    def from_env(cls) -> 'BootstrapConfig':
        """Create configuration from environment variables.

        Returns:
            BootstrapConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'BootstrapConfig':
        """Create configuration for DynamoDB Local.

        Returns:
            BootstrapConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            environment="dev",
            enable_debug_logging=True,
            wait_for_active=True
        )

    model_config = ConfigDict(
        validate_assignment=True
    )
