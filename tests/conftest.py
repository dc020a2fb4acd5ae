"""Shared test fixtures."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from typing import Any

import pytest

from envguard.config import OutputFormat, OutputSettings, Settings, TerraformSettings
from envguard.domain.models.scan import ChangeType, ScanResult, Severity
from envguard.domain.ports.services import PlanningTool
from envguard.infrastructure.observability.logging import setup_logging


class FakePlanningTool(PlanningTool):
    """In-memory planning tool recording every stage call."""

    name = "fake"

    def __init__(
        self,
        document: dict[str, Any] | str | bytes | None = None,
        fail_stage: str | None = None,
    ) -> None:
        self._document = document if document is not None else {"format_version": "1.2"}
        self._fail_stage = fail_stage
        self.calls: list[tuple[str, str]] = []

    async def init(self, working_dir: str) -> tuple[bool, str]:
        self.calls.append(("init", working_dir))
        if self._fail_stage == "init":
            return False, "terraform init exited with status 1"
        return True, ""

    async def plan(self, working_dir: str) -> tuple[bool, str]:
        self.calls.append(("plan", working_dir))
        if self._fail_stage == "plan":
            return False, "terraform plan exited with status 1"
        return True, os.path.join(working_dir, "plan.tfplan")

    async def show_plan(
        self, working_dir: str, plan_path: str
    ) -> tuple[bool, str | bytes]:
        self.calls.append(("show", plan_path))
        if self._fail_stage == "show":
            return False, "terraform show exited with status 1"
        if isinstance(self._document, (str, bytes)):
            return True, self._document
        return True, json.dumps(self._document)


def build_plan(*changes: tuple[str, str, list[str]]) -> dict[str, Any]:
    """Build a ``terraform show -json`` document from (type, name, actions)."""
    return {
        "format_version": "1.2",
        "terraform_version": "1.7.5",
        "resource_changes": [
            {
                "address": f"{rtype}.{name}",
                "mode": "managed",
                "type": rtype,
                "name": name,
                "provider_name": "registry.terraform.io/hashicorp/aws",
                "change": {"actions": actions, "before": {}, "after": {}},
            }
            for rtype, name, actions in changes
        ],
    }


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Route structured logs to stderr so stdout holds only report output."""
    setup_logging("WARNING")


@pytest.fixture
def plan_factory() -> Callable[..., dict[str, Any]]:
    return build_plan


@pytest.fixture
def tool_factory() -> Callable[..., FakePlanningTool]:
    return FakePlanningTool


@pytest.fixture
def tf_dir(tmp_path: Any) -> str:
    """Provide a temporary Terraform working directory."""
    return str(tmp_path)


@pytest.fixture
def make_settings(tf_dir: str) -> Callable[..., Settings]:
    def _make(
        fmt: OutputFormat = OutputFormat.TEXT,
        fail_on: Severity = Severity.WARNING,
        directory: str | None = None,
    ) -> Settings:
        return Settings(
            terraform=TerraformSettings(dir=directory or tf_dir),
            output=OutputSettings(format=fmt, fail_on_severity=fail_on),
        )

    return _make


@pytest.fixture
def update_result() -> ScanResult:
    return ScanResult(
        resource="aws_instance.web",
        change_type=ChangeType.UPDATE,
        severity=Severity.WARNING,
        message="Terraform resource drift detected (update)",
    )


@pytest.fixture
def delete_result() -> ScanResult:
    return ScanResult(
        resource="aws_s3_bucket.logs",
        change_type=ChangeType.DELETE,
        severity=Severity.CRITICAL,
        message="Resource marked for deletion due to drift",
    )
