from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from ..exceptions import BootstrapError


class OutcomeStatus(str, Enum):
    """Final state of one entity in a provisioning pass."""
    SKIPPED = "skipped"
    CREATED = "created"
    FAILED_BENIGN = "failed_benign"
    FAILED_HARD = "failed_hard"


FAILED_STATUSES = frozenset({OutcomeStatus.FAILED_BENIGN, OutcomeStatus.FAILED_HARD})


class ProvisioningOutcome(BaseModel):
    """Result of provisioning one entity.

    A benign failure (the table was created concurrently by someone else)
    leaves the store in the same state as a skip; only FAILED_HARD needs
    attention from the caller.
    """

    entity_id: str
    table_name: Optional[str] = None
    status: OutcomeStatus
    error: Optional[BootstrapError] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode='after')
    def check_error_matches_status(self) -> 'ProvisioningOutcome':
        if (self.status in FAILED_STATUSES) != (self.error is not None):
            raise ValueError(f"Outcome {self.status.value} must carry an error exactly when it failed")
        return self

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @property
    def is_hard_failure(self) -> bool:
        return self.status is OutcomeStatus.FAILED_HARD
