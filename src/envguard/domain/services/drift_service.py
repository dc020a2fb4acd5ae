"""Domain service orchestrating a drift scan."""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable
from enum import Enum

import structlog
from pydantic import ValidationError

from envguard.domain.errors import (
    DecodeFailure,
    DriftScanError,
    PathResolutionFailure,
    StageFailure,
)
from envguard.domain.models.plan import Plan
from envguard.domain.models.scan import ScanResult, ScanRun, ScanStatus
from envguard.domain.ports.services import PlanningTool
from envguard.domain.services.classifier import classify_resource_change


logger = structlog.get_logger(__name__)


class Stage(str, Enum):
    """Stages of the planning tool pipeline."""

    INITIALIZE = "initialize"
    PLAN = "plan"
    EXPORT = "export"


def resolve_working_dir(working_dir: str | None) -> str:
    """Return ``working_dir`` (default ``.``) as an absolute directory path."""
    path = working_dir or "."
    try:
        abs_path = os.path.abspath(path)
    except OSError as exc:
        raise PathResolutionFailure(path, str(exc)) from exc
    if not os.path.isdir(abs_path):
        raise PathResolutionFailure(path, "not a directory")
    return abs_path


class DriftScanService:
    """Drives the planning tool through init -> plan -> export and classifies the plan.

    Stages run strictly in order and the first failure aborts the scan; a
    failed scan never returns partial results.
    """

    def __init__(
        self,
        planning_tool: PlanningTool,
        on_stage: Callable[[Stage], None] | None = None,
    ) -> None:
        self._tool = planning_tool
        self._on_stage = on_stage
        self.last_run: ScanRun | None = None

    async def scan(self, working_dir: str | None = None) -> list[ScanResult]:
        """Scan ``working_dir`` for drift and return the findings in plan order."""
        run = ScanRun(working_dir=working_dir or ".")
        self.last_run = run

        try:
            abs_path = resolve_working_dir(working_dir)
            run.working_dir = abs_path
            logger.info(
                "drift_scan_started",
                run_id=run.id,
                tool=self._tool.name,
                working_dir=abs_path,
            )

            self._advance(run, ScanStatus.INITIALIZING)
            await self._run_stage(Stage.INITIALIZE, self._tool.init(abs_path))

            self._advance(run, ScanStatus.PLANNING)
            plan_path = await self._run_stage(Stage.PLAN, self._tool.plan(abs_path))

            self._advance(run, ScanStatus.EXPORTING)
            document = await self._run_stage(
                Stage.EXPORT, self._tool.show_plan(abs_path, plan_path)
            )

            self._advance(run, ScanStatus.CLASSIFYING)
            results = self.classify_plan(self.decode_plan(document))
        except DriftScanError as exc:
            run.fail(str(exc), stage=exc.stage)
            logger.error(
                "drift_scan_failed",
                run_id=run.id,
                stage=exc.stage,
                error=str(exc),
            )
            raise
        except BaseException as exc:
            if not run.is_terminal:
                run.fail(str(exc) or type(exc).__name__)
            logger.warning(
                "drift_scan_aborted",
                run_id=run.id,
                error_type=type(exc).__name__,
            )
            raise

        run.complete(results)
        logger.info(
            "drift_scan_completed",
            run_id=run.id,
            working_dir=run.working_dir,
            finding_count=len(results),
        )
        return results

    @staticmethod
    def decode_plan(document: str | bytes) -> Plan:
        """Parse an exported plan document."""
        try:
            return Plan.model_validate_json(document)
        except (ValidationError, UnicodeDecodeError) as exc:
            raise DecodeFailure(str(exc)) from exc

    @staticmethod
    def classify_plan(plan: Plan) -> list[ScanResult]:
        """Classify every resource change in the plan's own order."""
        results: list[ScanResult] = []
        for change in plan.resource_changes:
            results.extend(classify_resource_change(change))
        return results

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _advance(run: ScanRun, status: ScanStatus) -> None:
        previous = run.status
        run.transition_to(status)
        logger.debug(
            "scan_transition",
            run_id=run.id,
            from_status=previous.value,
            to_status=status.value,
        )

    async def _run_stage(
        self, stage: Stage, coro: Awaitable[tuple[bool, str | bytes]]
    ) -> str | bytes:
        """Run a planning tool stage and raise on failure."""
        if self._on_stage is not None:
            self._on_stage(stage)
        success, output = await coro
        if not success:
            raise StageFailure(stage.value, str(output))
        return output
