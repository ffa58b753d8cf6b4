"""
DynamoDB Table Store Gateway

The provisioning pass needs exactly two things from DynamoDB: the names of the
tables that already exist, and a way to create a table. TableStore is that
narrow interface; TableStoreGateway implements it over a boto3 DynamoDB
client.

The gateway focuses on:
- Creating the boto3 client lazily from BootstrapConfig
- Paginating ListTables into one snapshot
- Rendering TableSchema into a CreateTable call
- Mapping botocore failures to the library's exceptions

Anything else the store can do (reads, writes, UpdateTable) is deliberately
absent.
"""

import logging
from typing import Optional, Protocol, Set

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ..config import BootstrapConfig
from ..exceptions import (
    BootstrapError,
    InvalidSchemaError,
    StoreUnavailableError,
    TableAlreadyExistsError,
)
from ..models import TableSchema

logger = logging.getLogger(__name__)


class TableStore(Protocol):
    """The two store capabilities provisioning depends on."""

    def list_table_names(self) -> Set[str]:
        """Return the names of every existing table."""
        ...

    def create_table(self, schema: TableSchema) -> None:
        """Submit a CreateTable request for ``schema``."""
        ...

    def wait_for_table(self, table_name: str) -> None:
        """Block until ``table_name`` is ACTIVE; only called when waiting is enabled."""
        ...


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: Optional[str] = None
) -> BootstrapError:
    """Map DynamoDB ClientError to library exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "CreateTable", "ListTables")
        table_name: The DynamoDB table name, when the operation targets one

    Returns:
        TableAlreadyExistsError: For ResourceInUseException on CreateTable
        InvalidSchemaError: For requests DynamoDB rejects as malformed
        StoreUnavailableError: For network, auth, throttling, limit and service failures
    """
    error_code = error.response['Error']['Code']
    error_message = error.response['Error']['Message']

    context = operation
    if table_name:
        context += f" on {table_name}"
    full_message = f"{context}: {error_message}"

    if error_code in ['ResourceInUseException', 'TableAlreadyExistsException']:
        return TableAlreadyExistsError(table_name or '<unknown>', original_error=error)

    elif error_code == 'ValidationException':
        return InvalidSchemaError(
            f"Schema rejected by DynamoDB - {full_message}",
            table_name=table_name,
            original_error=error
        )

    elif error_code in [
        'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
        'ThrottlingException', 'TooManyRequestsException'
    ]:
        return StoreUnavailableError(f"Throttling - {full_message}", original_error=error, table_name=table_name)

    elif error_code == 'LimitExceededException':
        # Too many concurrent control-plane operations or the table quota is reached
        return StoreUnavailableError(f"Limit exceeded - {full_message}", original_error=error, table_name=table_name)

    elif error_code in [
        'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
        'InternalFailure', 'RequestTimeoutException'
    ]:
        return StoreUnavailableError(f"Service unavailable - {full_message}", original_error=error, table_name=table_name)

    elif error_code in [
        'UnrecognizedClientException', 'AccessDeniedException', 'ExpiredTokenException',
        'InvalidSignatureException', 'IncompleteSignatureException'
    ]:
        return StoreUnavailableError(f"Authentication/authorization failed - {full_message}", original_error=error, table_name=table_name)

    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to StoreUnavailableError")
    return StoreUnavailableError(
        f"DynamoDB operation failed - {full_message}",
        original_error=error,
        context={'error_code': error_code},
        table_name=table_name
    )


class TableStoreGateway:
    """boto3-backed TableStore."""

    def __init__(self, config: BootstrapConfig):
        """Initialize the gateway.

        Args:
            config: Connection and provisioning configuration
        """
        self.config = config
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the DynamoDB client."""
        if self._client is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                client_config = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    client_config['endpoint_url'] = self.config.endpoint_url

                # Retries and timeouts bound every in-flight call
                client_config['config'] = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )

                self._client = session.client('dynamodb', **client_config)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise StoreUnavailableError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._client

    def list_table_names(self) -> Set[str]:
        """List every table visible to the configured credentials.

        ListTables returns at most 100 names per page, so all pages are read.
        """
        try:
            names: Set[str] = set()
            paginator = self.client.get_paginator('list_tables')
            for page in paginator.paginate():
                names.update(page.get('TableNames', []))
            logger.debug(f"Found {len(names)} existing tables")
            return names
        except ClientError as e:
            raise map_dynamodb_error(e, "ListTables") from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"ListTables failed: {e}", e) from e

    def create_table(self, schema: TableSchema) -> None:
        """Submit CreateTable for ``schema``.

        Raises:
            TableAlreadyExistsError: The table exists (or is being created)
            InvalidSchemaError: DynamoDB rejected the request
            StoreUnavailableError: Any other failure
        """
        try:
            self.client.create_table(**schema.to_create_table_kwargs())
            logger.info(f"Submitted CreateTable for {schema.table_name}")
        except ClientError as e:
            raise map_dynamodb_error(e, "CreateTable", schema.table_name) from e
        except BotoCoreError as e:
            raise StoreUnavailableError(
                f"CreateTable on {schema.table_name} failed: {e}", e, table_name=schema.table_name
            ) from e

    def wait_for_table(self, table_name: str) -> None:
        """Block until ``table_name`` is ACTIVE."""
        try:
            waiter = self.client.get_waiter('table_exists')
            waiter.wait(TableName=table_name)
            logger.debug(f"Table {table_name} is active")
        except WaiterError as e:
            raise StoreUnavailableError(
                f"Table {table_name} did not become active: {e}", e, table_name=table_name
            ) from e
        except ClientError as e:
            raise map_dynamodb_error(e, "DescribeTable", table_name) from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"DescribeTable on {table_name} failed: {e}", e, table_name=table_name) from e


def create_table_store(config: BootstrapConfig) -> TableStoreGateway:
    """
    Factory function to create a TableStoreGateway instance.

    Args:
        config: Connection configuration

    Returns:
        Configured TableStoreGateway instance
    """
    return TableStoreGateway(config)
