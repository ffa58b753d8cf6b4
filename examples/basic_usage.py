#!/usr/bin/env python3
"""
Basic usage example for dynamodb-bootstrap.

This example demonstrates:
1. Setting up configuration
2. Declaring entities as pydantic models with a Meta class
3. Registering them and provisioning their tables at startup
4. Inspecting the per-entity outcomes
"""

from typing import Optional

from pydantic import BaseModel

from dynamodb_bootstrap import (
    BootstrapConfig,
    EntityRegistry,
    IndexDefinition,
    OutcomeStatus,
    TableMeta,
    build_table_schema,
    provision_entities,
)

# 1. Configure DynamoDB connection
config = BootstrapConfig.for_local_development()

# For deployed environments use:
# config = BootstrapConfig.from_env()

registry = EntityRegistry(config)


# 2. Declare entities
@registry.register
class User(BaseModel):
    id: str
    email: str
    company: str
    type: int
    dob: int
    display_name: Optional[str] = None

    class Meta(TableMeta):
        partition_key = "id"
        sort_key = "dob"
        indexes = [
            IndexDefinition("index1", partition_key="email", sort_key="type"),
            IndexDefinition("index2", partition_key="company", sort_key="type"),
        ]


@registry.register
class Order(BaseModel):
    customer_id: str
    order_id: str
    created_at: str
    status: str

    class Meta(TableMeta):
        partition_key = "customer_id"
        sort_key = "order_id"
        indexes = [
            IndexDefinition("by_created", partition_key="customer_id", sort_key="created_at"),
            IndexDefinition("by_status", partition_key="status"),
        ]
        local_index_names = ("by_created",)


@registry.register
class Address(BaseModel):
    street: str
    city: str

    class Meta(TableMeta):
        document = True


def main():
    """Provision every registered entity and report the results."""

    # 3. Preview the CreateTable request for one entity
    print("1. Derived schema for User:")
    user = registry.resolve(f"{User.__module__}.User")
    print(build_table_schema(user, config.billing_policy()).to_create_table_kwargs())

    # 4. Provision all registered entities
    print("2. Provisioning tables...")
    outcomes = provision_entities(registry.descriptors(), config=config)

    for outcome in outcomes:
        line = f"   {outcome.entity_id}: {outcome.status.value}"
        if outcome.table_name:
            line += f" ({outcome.table_name})"
        if outcome.reason:
            line += f" - {outcome.reason}"
        print(line)

    # 5. A second pass skips everything that now exists
    print("3. Provisioning again...")
    second = provision_entities(registry.descriptors(), config=config)
    skipped = sum(1 for outcome in second if outcome.status is OutcomeStatus.SKIPPED)
    print(f"   {skipped}/{len(second)} entities skipped")


if __name__ == "__main__":
    main()
