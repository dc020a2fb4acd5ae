"""Classification of Terraform change actions into drift findings."""

from __future__ import annotations

from collections.abc import Iterable

from envguard.domain.models.plan import PlanAction, ResourceChange
from envguard.domain.models.scan import ChangeType, ScanResult, Severity, TERRAFORM_SOURCE


# Action -> (change type, severity, message), in emission order.
DRIFT_RULES: dict[PlanAction, tuple[ChangeType, Severity, str]] = {
    PlanAction.UPDATE: (
        ChangeType.UPDATE,
        Severity.WARNING,
        "Terraform resource drift detected (update)",
    ),
    PlanAction.DELETE: (
        ChangeType.DELETE,
        Severity.CRITICAL,
        "Resource marked for deletion due to drift",
    ),
    PlanAction.CREATE: (
        ChangeType.CREATE,
        Severity.WARNING,
        "Terraform plans to create missing resource",
    ),
}


def classify_actions(
    resource: str,
    actions: Iterable[str],
    source: str = TERRAFORM_SOURCE,
) -> list[ScanResult]:
    """Produce one finding per drift action present on a resource.

    A replace (delete + create) yields two findings. ``no-op``, ``read`` and
    unrecognised actions yield nothing.
    """
    present = set(actions)
    results: list[ScanResult] = []
    for action, (change_type, severity, message) in DRIFT_RULES.items():
        if action.value in present:
            results.append(ScanResult(
                source=source,
                resource=resource,
                change_type=change_type,
                severity=severity,
                message=message,
            ))
    return results


def classify_resource_change(change: ResourceChange) -> list[ScanResult]:
    """Classify one ``resource_changes`` entry of a plan."""
    return classify_actions(change.resource_id, change.change.actions)
