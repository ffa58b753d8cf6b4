from typing import Any, Dict, Optional


class BootstrapError(Exception):
    """Base exception for table provisioning failures.

    Nearly every failure concerns one table, one entity, or both. They are
    kept as attributes and folded into ``context`` first, so a recorded
    outcome or a log line always says which table the error belongs to.

    Attributes:
        message: Human-readable error message
        original_error: The botocore/pydantic error behind this one (if any)
        table_name: Physical table the error concerns
        entity_id: Entity type the error concerns
        context: table_name/entity_id plus any extra details
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        table_name: Optional[str] = None,
        entity_id: Optional[str] = None
    ):
        self.message = message
        self.original_error = original_error
        self.table_name = table_name
        self.entity_id = entity_id

        self.context: Dict[str, Any] = {}
        if table_name:
            self.context['table_name'] = table_name
        if entity_id:
            self.context['entity_id'] = entity_id
        self.context.update(context or {})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} [{details}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.message!r}, table_name={self.table_name!r}, "
            f"entity_id={self.entity_id!r}, original_error={self.original_error!r})"
        )
