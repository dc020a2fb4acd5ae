"""Drift scan error taxonomy.

Every error raised by the scan pipeline derives from :class:`DriftScanError`
and carries the pipeline stage it originated from, so callers can report the
failing step without parsing messages.
"""

from __future__ import annotations


class DriftScanError(Exception):
    """Raised when a drift scan fails."""

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage


class StageFailure(DriftScanError):
    """A planning tool stage exited non-zero, could not be spawned, or timed out."""

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"{stage} stage failed: {detail}", stage=stage)
        self.detail = detail


class DecodeFailure(DriftScanError):
    """The exported plan does not match the expected structured schema."""

    def __init__(self, detail: str, stage: str = "export") -> None:
        super().__init__(f"failed to parse plan JSON: {detail}", stage=stage)
        self.detail = detail


class PathResolutionFailure(DriftScanError):
    """The working directory cannot be resolved to an existing directory."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"cannot resolve working directory {path!r}: {detail}")
        self.path = path
        self.detail = detail


class InvalidScanTransitionError(Exception):
    """Raised when a scan is moved to a state its current state does not allow."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Invalid scan transition: {current} -> {target}")
        self.current = current
        self.target = target
