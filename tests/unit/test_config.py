import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from dynamodb_bootstrap.config import BootstrapConfig
from dynamodb_bootstrap.models import OnDemandBilling, ProvisionedBilling


class TestBootstrapConfig:
    """Test cases for BootstrapConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {"AWS_REGION": "us-west-2"}, clear=True):
            config = BootstrapConfig()

            assert config.region_name == "us-west-2"
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 30.0
            assert config.environment == "dev"
            assert config.billing_mode == "PAY_PER_REQUEST"
            assert config.read_capacity == 10
            assert config.write_capacity == 10
            assert config.max_workers == 1
            assert config.provision_timeout_seconds is None
            assert config.wait_for_active is False

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:8000",
            "DYNAMODB_TABLE_PREFIX": "test",
            "ENVIRONMENT": "staging",
            "DYNAMODB_BILLING_MODE": "provisioned",
            "DYNAMODB_READ_CAPACITY": "5",
            "DYNAMODB_WRITE_CAPACITY": "7",
            "DYNAMODB_PROVISION_WORKERS": "4",
            "DYNAMODB_PROVISION_TIMEOUT": "12.5",
            "DYNAMODB_WAIT_FOR_ACTIVE": "true",
        }

        with patch.dict(os.environ, env_vars):
            config = BootstrapConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.endpoint_url == "http://localhost:8000"
            assert config.table_prefix == "test"
            assert config.environment == "staging"
            assert config.billing_mode == "PROVISIONED"
            assert config.read_capacity == 5
            assert config.write_capacity == 7
            assert config.max_workers == 4
            assert config.provision_timeout_seconds == 12.5
            assert config.wait_for_active is True

    def test_table_name_generation(self):
        """Test table name generation with prefix and environment."""
        config = BootstrapConfig(table_prefix="myapp", environment="dev")

        assert config.get_table_name("users") == "myapp_dev_users"

    def test_table_name_generation_prod(self):
        """Test table name generation in production (no environment suffix)."""
        config = BootstrapConfig(table_prefix="myapp", environment="prod")

        assert config.get_table_name("users") == "myapp_users"

    def test_table_name_generation_no_prefix(self):
        """Test table name generation without prefix."""
        config = BootstrapConfig(table_prefix="", environment="dev")

        assert config.get_table_name("users") == "dev_users"

    def test_local_development_config(self):
        """Test local development configuration."""
        config = BootstrapConfig.for_local_development()

        assert config.aws_access_key_id == "local"
        assert config.aws_secret_access_key == "local"
        assert config.endpoint_url == "http://localhost:8000"
        assert config.environment == "dev"
        assert config.enable_debug_logging is True
        assert config.wait_for_active is True

    def test_invalid_environment(self):
        """Test validation of environment values."""
        with pytest.raises(ValidationError):
            BootstrapConfig(environment="invalid")

    def test_invalid_region(self):
        """Test validation of region name."""
        with pytest.raises(ValidationError):
            BootstrapConfig(region_name="")

    def test_invalid_billing_mode(self):
        """Test validation of billing mode."""
        with pytest.raises(ValidationError):
            BootstrapConfig(billing_mode="RESERVED")

    @pytest.mark.parametrize("field", ["read_capacity", "write_capacity", "max_workers"])
    def test_non_positive_values_rejected(self, field):
        """Capacity units and worker counts must be positive."""
        with pytest.raises(ValidationError, match=f"{field} must be a positive integer"):
            BootstrapConfig(**{field: 0})

    def test_assignment_is_validated(self):
        """Assigning an invalid value is rejected like construction."""
        config = BootstrapConfig(environment="dev")

        with pytest.raises(ValidationError):
            config.environment = "qa"


class TestBillingPolicy:
    """Test the billing policy derived from configuration."""

    def test_on_demand_by_default(self):
        config = BootstrapConfig(billing_mode="PAY_PER_REQUEST")

        assert config.billing_policy() == OnDemandBilling()

    def test_provisioned_uses_configured_capacity(self):
        config = BootstrapConfig(billing_mode="PROVISIONED", read_capacity=3, write_capacity=4)

        policy = config.billing_policy()

        assert isinstance(policy, ProvisionedBilling)
        assert policy.read_capacity_units == 3
        assert policy.write_capacity_units == 4
