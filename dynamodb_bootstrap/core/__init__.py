"""
Core provisioning components.

This module contains the components that talk to DynamoDB:
- TableStoreGateway: boto3 implementation of the ListTables/CreateTable seam
- TableProvisioner: idempotent create-or-skip pass over entity descriptors
- Factory functions for building both from configuration
"""

from .provisioner import TableProvisioner, create_provisioner, provision_entities
from .table_gateway import TableStore, TableStoreGateway, create_table_store, map_dynamodb_error

__all__ = [
    "TableProvisioner",
    "TableStore",
    "TableStoreGateway",
    "create_provisioner",
    "create_table_store",
    "map_dynamodb_error",
    "provision_entities",
]
