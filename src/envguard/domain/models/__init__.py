"""Domain models package."""

from envguard.domain.models.base import (
    DomainEntity,
    generate_id,
    utc_now,
    ValueObject,
)
from envguard.domain.models.plan import (
    Change,
    Plan,
    PlanAction,
    ResourceChange,
)
from envguard.domain.models.scan import (
    ChangeType,
    SCAN_VALID_TRANSITIONS,
    ScanResult,
    ScanRun,
    ScanStatus,
    Severity,
    severity_level,
    TERRAFORM_SOURCE,
)


__all__ = [
    "Change",
    "ChangeType",
    "DomainEntity",
    "Plan",
    "PlanAction",
    "ResourceChange",
    "SCAN_VALID_TRANSITIONS",
    "ScanResult",
    "ScanRun",
    "ScanStatus",
    "Severity",
    "TERRAFORM_SOURCE",
    "ValueObject",
    "generate_id",
    "severity_level",
    "utc_now",
]
