"""Terraform executor implementation."""

from __future__ import annotations

import asyncio
import contextlib
import os
from typing import Any

import structlog

from envguard.domain.ports.services import PlanningTool


logger = structlog.get_logger(__name__)

DEFAULT_PLAN_FILE = "plan.tfplan"
DEFAULT_TIMEOUT_SECONDS = 1800.0


class TerraformExecutor(PlanningTool):
    """Runs the Terraform CLI as a subprocess.

    ``init`` and ``plan`` stream their output live to ``live_output`` (the
    parent's stdout when ``None``) while ``show -json`` is captured. Every
    call is bounded by ``timeout_seconds``; a falsy timeout waits forever.
    """

    name = "terraform"

    def __init__(
        self,
        binary: str = "terraform",
        plan_file: str = DEFAULT_PLAN_FILE,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        live_output: Any = None,
    ) -> None:
        self._binary = binary
        self._plan_file = plan_file
        self._timeout = timeout_seconds or None
        self._live_output = live_output

    async def init(self, working_dir: str) -> tuple[bool, str]:
        """Run ``terraform init -input=false``."""
        return await self._execute(["init", "-input=false"], working_dir)

    async def plan(self, working_dir: str) -> tuple[bool, str]:
        """Run ``terraform plan`` and return the path of the saved plan."""
        success, output = await self._execute(
            ["plan", f"-out={self._plan_file}", "-input=false"], working_dir
        )
        if not success:
            return False, output
        return True, os.path.join(working_dir, self._plan_file)

    async def show_plan(self, working_dir: str, plan_path: str) -> tuple[bool, str | bytes]:
        """Run ``terraform show -json`` on the saved plan and return the raw stdout."""
        return await self._execute(["show", "-json", plan_path], working_dir, capture=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _execute(
        self, args: list[str], working_dir: str, capture: bool = False
    ) -> tuple[bool, str | bytes]:
        command = [self._binary, *args]
        display = f"{self._binary} {args[0]}"
        logger.info("terraform_stage_started", command=display, working_dir=working_dir)

        try:
            if capture:
                proc = await asyncio.create_subprocess_exec(
                    *command,
                    cwd=working_dir,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            else:
                proc = await asyncio.create_subprocess_exec(
                    *command,
                    cwd=working_dir,
                    stdout=self._live_output,
                )
        except OSError as exc:
            logger.error("terraform_stage_failed", command=display, error=str(exc))
            return False, f"{display} could not be started: {exc}"

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), self._timeout)
        except asyncio.TimeoutError:
            await self._terminate(proc)
            logger.error(
                "terraform_stage_failed",
                command=display,
                error="timeout",
                timeout_seconds=self._timeout,
            )
            return False, f"{display} timed out after {self._timeout:g}s"
        except asyncio.CancelledError:
            await self._terminate(proc)
            raise

        if proc.returncode != 0:
            detail = f"{display} exited with status {proc.returncode}"
            if stderr:
                detail = f"{detail}: {stderr.decode(errors='replace').strip()}"
            logger.error(
                "terraform_stage_failed",
                command=display,
                returncode=proc.returncode,
            )
            return False, detail

        logger.info("terraform_stage_completed", command=display)
        if capture:
            # Left undecoded; the plan parser reports invalid UTF-8.
            return True, stdout or b""
        return True, ""

    @staticmethod
    async def _terminate(proc: Any) -> None:
        """Kill a still-running child and reap it."""
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
        await proc.wait()
