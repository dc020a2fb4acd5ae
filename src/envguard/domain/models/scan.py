"""Drift scan domain models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from envguard.domain.errors import InvalidScanTransitionError
from envguard.domain.models.base import DomainEntity, ValueObject


TERRAFORM_SOURCE = "terraform"


class Severity(str, Enum):
    """Severity of a drift finding, totally ordered by ``level``."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        return SEVERITY_LEVELS[self]


SEVERITY_LEVELS: dict[Severity, int] = {
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.CRITICAL: 3,
}


def severity_level(severity: Severity | str) -> int:
    """Order value of a severity; unknown values rank below ``info``."""
    try:
        return Severity(severity).level
    except ValueError:
        return 0


class ChangeType(str, Enum):
    """Kind of change Terraform proposes for a drifted resource."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ScanResult(ValueObject):
    """One detected drift finding."""

    source: str = TERRAFORM_SOURCE
    resource: str = Field(min_length=1)
    change_type: ChangeType = Field(alias="changeType")
    severity: Severity
    message: str = ""

    model_config = {"frozen": True, "populate_by_name": True}


class ScanStatus(str, Enum):
    """Drift scan lifecycle states."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    PLANNING = "planning"
    EXPORTING = "exporting"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


SCAN_VALID_TRANSITIONS: dict[ScanStatus, set[ScanStatus]] = {
    ScanStatus.IDLE: {ScanStatus.INITIALIZING, ScanStatus.FAILED},
    ScanStatus.INITIALIZING: {ScanStatus.PLANNING, ScanStatus.FAILED},
    ScanStatus.PLANNING: {ScanStatus.EXPORTING, ScanStatus.FAILED},
    ScanStatus.EXPORTING: {ScanStatus.CLASSIFYING, ScanStatus.FAILED},
    ScanStatus.CLASSIFYING: {ScanStatus.DONE, ScanStatus.FAILED},
    ScanStatus.DONE: set(),
    ScanStatus.FAILED: set(),
}


class ScanRun(DomainEntity):
    """State of a single drift scan invocation."""

    working_dir: str = ""
    status: ScanStatus = ScanStatus.IDLE
    results: list[ScanResult] = Field(default_factory=list)
    error_message: str = ""
    failed_stage: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not SCAN_VALID_TRANSITIONS[self.status]

    def transition_to(self, new_status: ScanStatus) -> None:
        """Move to ``new_status`` or raise if the state machine forbids it."""
        if new_status not in SCAN_VALID_TRANSITIONS[self.status]:
            raise InvalidScanTransitionError(self.status.value, new_status.value)
        self.status = new_status
        self.touch()

    def complete(self, results: list[ScanResult]) -> None:
        self.transition_to(ScanStatus.DONE)
        self.results = list(results)

    def fail(self, error_message: str, stage: str | None = None) -> None:
        self.transition_to(ScanStatus.FAILED)
        self.error_message = error_message
        self.failed_stage = stage
        self.results = []
