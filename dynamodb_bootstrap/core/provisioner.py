"""
Table Provisioner

Idempotent table provisioning for a set of entities. One pass:

1. Snapshot the existing table names (one ListTables sweep)
2. For each entity, independently:
   - skip document types and tables already in the snapshot
   - derive and validate the TableSchema
   - submit CreateTable
   - treat "already exists" as a lost race, not an error
3. Return one ProvisioningOutcome per entity, in input order

Failures are isolated per entity; the pass itself only fails when the
snapshot cannot be taken. The snapshot is not refreshed during the pass, so
two entities resolving to the same table both attempt creation and the second
one lands on the benign race path.

Usage:
    provisioner = create_provisioner(BootstrapConfig.from_env())
    outcomes = provisioner.provision_entities(registry.descriptors())
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Union

from ..config import BootstrapConfig
from ..exceptions import (
    BootstrapError,
    EntityNotFoundError,
    ProvisioningTimeoutError,
    TableAlreadyExistsError,
)
from ..models import BillingPolicy, EntityDescriptor, OutcomeStatus, ProvisioningOutcome
from ..schema import build_table_schema
from .table_gateway import TableStore, create_table_store

logger = logging.getLogger(__name__)

EntityRef = Union[EntityDescriptor, str]
EntityResolver = Callable[[str], EntityDescriptor]


class TableProvisioner:
    """
    Creates missing tables for entity descriptors.

    The provisioner holds no per-pass state: every call to provision_entities()
    takes its own snapshot, and every entity builds its own schema.
    """

    def __init__(
        self,
        store: TableStore,
        billing: Optional[BillingPolicy] = None,
        resolver: Optional[EntityResolver] = None,
        max_workers: int = 1,
        timeout_seconds: Optional[float] = None,
        wait_for_active: bool = False
    ):
        """Initialize the provisioner.

        Args:
            store: Store used for ListTables/CreateTable
            billing: Default billing policy (on-demand when None)
            resolver: Resolves string entity references to descriptors
            max_workers: Entities provisioned concurrently; 1 runs sequentially
            timeout_seconds: Deadline for a concurrent pass
            wait_for_active: Wait for created tables to become ACTIVE
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.store = store
        self.billing = billing
        self.resolver = resolver
        self.max_workers = max_workers
        self.timeout_seconds = timeout_seconds
        self.wait_for_active = wait_for_active

    def provision_entities(
        self,
        entities: Iterable[EntityRef],
        billing: Optional[BillingPolicy] = None
    ) -> List[ProvisioningOutcome]:
        """
        Provision tables for ``entities``.

        Args:
            entities: Descriptors, or references resolved through the resolver
            billing: Billing policy for this pass; falls back to the default

        Returns:
            One outcome per entity, in input order

        Raises:
            StoreUnavailableError: If the existing tables cannot be listed
        """
        entities = list(entities)
        billing = billing if billing is not None else self.billing

        existing_tables = frozenset(self.store.list_table_names())
        logger.debug(f"Provisioning {len(entities)} entities against {len(existing_tables)} existing tables")

        if self.max_workers == 1 or len(entities) <= 1:
            outcomes = [self.provision_entity(entity, existing_tables, billing) for entity in entities]
        else:
            outcomes = self._provision_concurrently(entities, existing_tables, billing)

        created = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.CREATED)
        failed = sum(1 for outcome in outcomes if outcome.is_hard_failure)
        logger.info(f"Provisioning pass finished: {created} created, {failed} failed, {len(outcomes)} entities")
        return outcomes

    def provision_entity(
        self,
        entity: EntityRef,
        existing_tables: FrozenSet[str],
        billing: Optional[BillingPolicy] = None
    ) -> ProvisioningOutcome:
        """Provision one entity against an existing-table snapshot."""
        entity_id = entity if isinstance(entity, str) else entity.entity_id
        table_name = None

        try:
            descriptor = self._resolve(entity)
            table_name = descriptor.table_name

            if descriptor.is_document:
                logger.debug(f"Entity {entity_id} is a document type. Skipping.")
                return ProvisioningOutcome(entity_id=entity_id, table_name=table_name, status=OutcomeStatus.SKIPPED)

            if table_name in existing_tables:
                logger.debug(f"Table {table_name} already exists. Skipping.")
                return ProvisioningOutcome(entity_id=entity_id, table_name=table_name, status=OutcomeStatus.SKIPPED)

            schema = build_table_schema(descriptor, billing)
            self.store.create_table(schema)
            if self.wait_for_active:
                self.store.wait_for_table(table_name)

            logger.info(f"Table {table_name} created for entity {entity_id}")
            return ProvisioningOutcome(entity_id=entity_id, table_name=table_name, status=OutcomeStatus.CREATED)

        except TableAlreadyExistsError as e:
            logger.debug(f"Table {table_name} was created concurrently: {e}")
            return ProvisioningOutcome(
                entity_id=entity_id, table_name=table_name, status=OutcomeStatus.FAILED_BENIGN, error=e
            )
        except BootstrapError as e:
            logger.error(f"Provisioning failed for entity {entity_id}: {e}")
            return ProvisioningOutcome(
                entity_id=entity_id, table_name=table_name, status=OutcomeStatus.FAILED_HARD, error=e
            )

    def _resolve(self, entity: EntityRef) -> EntityDescriptor:
        if isinstance(entity, EntityDescriptor):
            return entity
        if self.resolver is None:
            raise EntityNotFoundError(entity)
        return self.resolver(entity)

    def _provision_concurrently(
        self,
        entities: Sequence[EntityRef],
        existing_tables: FrozenSet[str],
        billing: Optional[BillingPolicy]
    ) -> List[ProvisioningOutcome]:
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="provision")
        try:
            futures = [
                executor.submit(self.provision_entity, entity, existing_tables, billing)
                for entity in entities
            ]
            wait(futures, timeout=self.timeout_seconds)

            outcomes = []
            for entity, future in zip(entities, futures):
                if future.done():
                    outcomes.append(future.result())
                    continue
                future.cancel()
                outcomes.append(self._timed_out(entity))
            return outcomes
        finally:
            # Calls already in flight are bounded by the client's read timeout
            executor.shutdown(wait=False)

    def _timed_out(self, entity: EntityRef) -> ProvisioningOutcome:
        if isinstance(entity, str):
            entity_id, table_name = entity, None
        else:
            entity_id, table_name = entity.entity_id, entity.table_name
        error = ProvisioningTimeoutError(table_name or entity_id, self.timeout_seconds)
        logger.error(f"Provisioning timed out for entity {entity_id}")
        return ProvisioningOutcome(
            entity_id=entity_id, table_name=table_name, status=OutcomeStatus.FAILED_HARD, error=error
        )


def create_provisioner(
    config: BootstrapConfig,
    store: Optional[TableStore] = None,
    resolver: Optional[EntityResolver] = None
) -> TableProvisioner:
    """
    Factory function to create a TableProvisioner from configuration.

    Args:
        config: Provisioning configuration
        store: Store to use; a boto3 gateway built from ``config`` when None
        resolver: Resolver for string entity references

    Returns:
        Configured TableProvisioner instance
    """
    if config.enable_debug_logging:
        logging.getLogger('dynamodb_bootstrap').setLevel(logging.DEBUG)

    return TableProvisioner(
        store=store if store is not None else create_table_store(config),
        billing=config.billing_policy(),
        resolver=resolver,
        max_workers=config.max_workers,
        timeout_seconds=config.provision_timeout_seconds,
        wait_for_active=config.wait_for_active
    )


def provision_entities(
    entities: Iterable[EntityRef],
    config: Optional[BootstrapConfig] = None,
    billing: Optional[BillingPolicy] = None,
    store: Optional[TableStore] = None,
    resolver: Optional[EntityResolver] = None
) -> List[ProvisioningOutcome]:
    """
    Run one provisioning pass; the entry point for application startup code.

    Args:
        entities: Descriptors or entity references
        config: Configuration (read from the environment when None)
        billing: Overrides the configured billing policy
        store: Overrides the boto3 gateway
        resolver: Resolver for string entity references

    Returns:
        One outcome per entity, in input order
    """
    config = config if config is not None else BootstrapConfig.from_env()
    provisioner = create_provisioner(config, store=store, resolver=resolver)
    return provisioner.provision_entities(entities, billing)
