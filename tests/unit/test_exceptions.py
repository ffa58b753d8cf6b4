"""
Tests for the exception hierarchy (exceptions/)
"""

import pytest

from dynamodb_bootstrap.exceptions import (
    BootstrapError,
    EntityNotFoundError,
    InvalidSchemaError,
    ProvisioningTimeoutError,
    StoreUnavailableError,
    TableAlreadyExistsError,
)


class TestBootstrapError:
    """Test the shared table/entity context."""

    def test_message_only(self):
        error = BootstrapError("ListTables failed")

        assert str(error) == "ListTables failed"
        assert error.table_name is None
        assert error.entity_id is None
        assert error.context == {}

    def test_table_and_entity_lead_the_context(self):
        cause = RuntimeError("boom")
        error = BootstrapError(
            "CreateTable failed",
            original_error=cause,
            context={'error_code': 'X'},
            table_name="users",
            entity_id="app.models.User"
        )

        assert error.original_error is cause
        assert list(error.context) == ['table_name', 'entity_id', 'error_code']
        assert str(error) == "CreateTable failed [table_name=users, entity_id=app.models.User, error_code=X]"
        assert "table_name='users'" in repr(error)

    @pytest.mark.parametrize("error", [
        InvalidSchemaError("bad"),
        EntityNotFoundError("app.User"),
        TableAlreadyExistsError("users"),
        StoreUnavailableError("down"),
        ProvisioningTimeoutError("users", 5),
    ])
    def test_family(self, error):
        assert isinstance(error, BootstrapError)


class TestDomainExceptions:
    """Test the fields each failure exposes."""

    def test_invalid_schema_problems(self):
        error = InvalidSchemaError(
            "Invalid schema for table users",
            table_name="users",
            problems=["no partition key"],
            entity_id="app.User"
        )

        assert error.problems == ["no partition key"]
        assert error.context == {
            'table_name': 'users', 'entity_id': 'app.User', 'problems': ["no partition key"]
        }

    def test_invalid_schema_without_problems(self):
        error = InvalidSchemaError("Rejected", table_name="users")

        assert error.problems == []
        assert error.context == {'table_name': 'users'}

    def test_entity_not_found(self):
        error = EntityNotFoundError("app.Missing")

        assert error.entity_ref == "app.Missing"
        assert error.entity_id == "app.Missing"
        assert error.message == "Entity not found: app.Missing"

    def test_table_already_exists(self):
        error = TableAlreadyExistsError("users")

        assert error.table_name == "users"
        assert str(error) == "Table already exists: users [table_name=users]"

    def test_store_unavailable_keeps_extra_context(self):
        error = StoreUnavailableError("Service unavailable", context={'error_code': 'InternalServerError'},
                                      table_name="users")

        assert error.context == {'table_name': 'users', 'error_code': 'InternalServerError'}

    def test_provisioning_timeout(self):
        error = ProvisioningTimeoutError("users", 2.5)

        assert error.timeout_seconds == 2.5
        assert error.table_name == "users"
        assert error.context == {'table_name': 'users', 'timeout_seconds': 2.5}
