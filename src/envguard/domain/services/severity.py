"""Severity aggregation and exit code policy."""

from __future__ import annotations

from collections.abc import Iterable

from envguard.domain.models.scan import ScanResult, Severity, severity_level


# Exit codes are the automation contract consumed by CI pipelines.
SEVERITY_EXIT_CODES: dict[Severity, int] = {
    Severity.CRITICAL: 3,
    Severity.WARNING: 2,
    Severity.INFO: 0,
}


def highest_severity(results: Iterable[ScanResult]) -> Severity:
    """Return the most severe level among ``results``, ``info`` when empty."""
    highest = Severity.INFO
    for result in results:
        if result.severity.level > highest.level:
            highest = result.severity
    return highest


def severity_to_exit_code(severity: Severity | str) -> int:
    """Map a severity to its process exit code; unknown values map to 0."""
    try:
        return SEVERITY_EXIT_CODES[Severity(severity)]
    except ValueError:
        return 0


def run_exit_code(results: Iterable[ScanResult], fail_on: Severity | str) -> int:
    """Exit code for a completed scan gated by the ``fail_on`` threshold.

    The run fails only when the highest finding reaches the threshold, in
    which case the code of that finding's severity is returned.
    """
    highest = highest_severity(results)
    if highest.level >= severity_level(fail_on):
        return severity_to_exit_code(highest)
    return 0
