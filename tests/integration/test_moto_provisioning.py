"""
End-to-end provisioning against moto's in-memory DynamoDB.

These tests exercise the real boto3 gateway: ListTables pagination,
CreateTable request rendering and the resulting table descriptions.
"""

import pytest
from moto import mock_aws

from dynamodb_bootstrap import (
    BootstrapConfig,
    EntityDescriptor,
    KeyRole,
    OutcomeStatus,
    ScalarType,
    TableStoreGateway,
    build_table_schema,
    create_provisioner,
    provision_entities,
)

from tests.helpers import attribute


@pytest.fixture
def config(aws_credentials):
    return BootstrapConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,
        environment="dev",
        table_prefix="test",
        billing_mode="PAY_PER_REQUEST",
        max_workers=1,
        provision_timeout_seconds=None,
        wait_for_active=False,
        enable_debug_logging=False
    )


@pytest.fixture
def gateway(config):
    with mock_aws():
        yield TableStoreGateway(config)


class TestMotoProvisioning:
    """Provisioning against moto."""

    def test_user_table_created_then_skipped(self, config, gateway, user_descriptor):
        first = provision_entities([user_descriptor], config=config, store=gateway)
        second = provision_entities([user_descriptor], config=config, store=gateway)

        assert first[0].status is OutcomeStatus.CREATED
        assert second[0].status is OutcomeStatus.SKIPPED

        table = gateway.client.describe_table(TableName="test_dev_user")['Table']
        assert table['KeySchema'] == [
            {'AttributeName': 'id', 'KeyType': 'HASH'},
            {'AttributeName': 'dob', 'KeyType': 'RANGE'},
        ]
        assert {a['AttributeName'] for a in table['AttributeDefinitions']} == {
            'id', 'email', 'company', 'type', 'dob'
        }
        indexes = {i['IndexName']: i for i in table['GlobalSecondaryIndexes']}
        assert set(indexes) == {'index1', 'index2'}
        assert indexes['index1']['KeySchema'] == [
            {'AttributeName': 'email', 'KeyType': 'HASH'},
            {'AttributeName': 'type', 'KeyType': 'RANGE'},
        ]
        assert indexes['index2']['Projection'] == {'ProjectionType': 'ALL'}

    def test_existing_tables_listed(self, gateway, simple_descriptor, user_descriptor):
        provisioner = create_provisioner(gateway.config, store=gateway)
        provisioner.provision_entities([simple_descriptor, user_descriptor])

        assert {"test_dev_user", "test_dev_entity_without_index_key"} <= gateway.list_table_names()

    def test_list_table_names_paginates(self, gateway, simple_descriptor):
        provisioner = create_provisioner(gateway.config, store=gateway)
        entities = [
            simple_descriptor.model_copy(update={'entity_id': f"tests.T{n}", 'table_name': f"t_{n:03d}"})
            for n in range(105)
        ]

        provisioner.provision_entities(entities)

        assert len(gateway.list_table_names()) == 105

    def test_local_index_and_provisioned_billing(self, config, gateway, local_index_descriptor):
        config = config.model_copy(update={'billing_mode': 'PROVISIONED', 'read_capacity': 3, 'write_capacity': 4})

        outcomes = provision_entities([local_index_descriptor], config=config, store=gateway)

        assert outcomes[0].status is OutcomeStatus.CREATED
        table = gateway.client.describe_table(TableName="test_dev_order")['Table']
        assert [i['IndexName'] for i in table['LocalSecondaryIndexes']] == ["by_created"]
        assert [i['IndexName'] for i in table['GlobalSecondaryIndexes']] == ["by_status"]
        assert table['ProvisionedThroughput']['ReadCapacityUnits'] == 3
        assert table['ProvisionedThroughput']['WriteCapacityUnits'] == 4

    def test_table_created_elsewhere_is_skipped(self, config, gateway, simple_descriptor):
        gateway.client.create_table(
            TableName=simple_descriptor.table_name,
            AttributeDefinitions=[{'AttributeName': 'id', 'AttributeType': 'S'}],
            KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
            BillingMode='PAY_PER_REQUEST'
        )

        outcomes = provision_entities([simple_descriptor], config=config, store=gateway)

        assert outcomes[0].status is OutcomeStatus.SKIPPED

    def test_lost_race_against_real_store(self, gateway, simple_descriptor):
        """A table created after the snapshot surfaces as a benign failure."""
        provisioner = create_provisioner(gateway.config, store=gateway)
        gateway.create_table(build_table_schema(simple_descriptor))

        outcome = provisioner.provision_entity(simple_descriptor, frozenset())

        assert outcome.status is OutcomeStatus.FAILED_BENIGN

    def test_wait_for_active(self, config, gateway, simple_descriptor):
        config = config.model_copy(update={'wait_for_active': True})

        outcomes = provision_entities([simple_descriptor], config=config, store=gateway)

        assert outcomes[0].status is OutcomeStatus.CREATED
        table = gateway.client.describe_table(TableName=simple_descriptor.table_name)['Table']
        assert table['TableStatus'] == 'ACTIVE'

    def test_bad_entity_does_not_block_others(self, config, gateway, user_descriptor):
        broken = EntityDescriptor(
            entity_id="tests.Broken",
            table_name="test_dev_broken",
            attributes=(attribute("name", ScalarType.STRING, KeyRole.sort_key()),),
        )

        outcomes = provision_entities([broken, user_descriptor], config=config, store=gateway)

        assert [o.status for o in outcomes] == [OutcomeStatus.FAILED_HARD, OutcomeStatus.CREATED]
        assert "test_dev_broken" not in gateway.list_table_names()
