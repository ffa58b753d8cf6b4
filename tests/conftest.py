"""
Test configuration and fixtures for dynamodb_bootstrap.

Provides entity descriptors used across the suite, an in-memory TableStore,
and moto-backed DynamoDB for gateway/provisioner integration tests.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import dynamodb_bootstrap
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from dynamodb_bootstrap import BootstrapConfig, EntityDescriptor, KeyRole, ScalarType
from tests.helpers import FakeTableStore, attribute


@pytest.fixture
def bootstrap_config():
    """Configuration for testing."""
    return BootstrapConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="dev",
        table_prefix="test",
        billing_mode="PAY_PER_REQUEST",
        max_workers=1,
        provision_timeout_seconds=None,
        wait_for_active=False,
        enable_debug_logging=False
    )


@pytest.fixture
def fake_store():
    """Empty in-memory table store."""
    return FakeTableStore()


@pytest.fixture
def user_descriptor():
    """User entity: composite primary key and two global indexes sharing a sort key."""
    return EntityDescriptor(
        entity_id="tests.User",
        table_name="test_dev_user",
        attributes=(
            attribute("id", ScalarType.STRING, KeyRole.partition_key()),
            attribute("email", ScalarType.STRING, KeyRole.secondary_partition_key("index1")),
            attribute("company", ScalarType.STRING, KeyRole.secondary_partition_key("index2")),
            attribute("type", ScalarType.NUMBER, KeyRole.secondary_sort_key("index1", "index2")),
            attribute("dob", ScalarType.NUMBER, KeyRole.sort_key()),
        ),
    )


@pytest.fixture
def simple_descriptor():
    """Entity with a single partition key and one untagged attribute."""
    return EntityDescriptor(
        entity_id="tests.EntityWithoutIndexKey",
        table_name="test_dev_entity_without_index_key",
        attributes=(
            attribute("id", ScalarType.STRING, KeyRole.partition_key()),
            attribute("dummy", ScalarType.STRING),
        ),
    )


@pytest.fixture
def local_index_descriptor():
    """Entity with one local and one global index."""
    return EntityDescriptor(
        entity_id="tests.Order",
        table_name="test_dev_order",
        attributes=(
            attribute(
                "customer_id", ScalarType.STRING,
                KeyRole.partition_key(), KeyRole.secondary_partition_key("by_created")
            ),
            attribute("order_id", ScalarType.STRING, KeyRole.sort_key()),
            attribute("created_at", ScalarType.STRING, KeyRole.secondary_sort_key("by_created")),
            attribute("status", ScalarType.STRING, KeyRole.secondary_partition_key("by_status")),
        ),
        local_index_names=frozenset({"by_created"}),
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so moto never sees real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_dynamodb_client(aws_credentials):
    """Mock DynamoDB client."""
    with mock_aws():
        yield boto3.client('dynamodb', region_name='us-east-1')
