"""Unit tests for the structured plan models."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from envguard.domain.models.plan import Plan, PlanAction


class TestPlan:
    def test_parses_resource_changes(
        self, plan_factory: Callable[..., dict[str, Any]]
    ) -> None:
        document = plan_factory(("aws_instance", "web", ["update"]))
        plan = Plan.model_validate_json(json.dumps(document))
        assert plan.terraform_version == "1.7.5"
        assert len(plan.resource_changes) == 1
        change = plan.resource_changes[0]
        assert change.resource_id == "aws_instance.web"
        assert change.change.actions == ["update"]

    def test_missing_resource_changes_is_empty(self) -> None:
        plan = Plan.model_validate({"format_version": "1.0"})
        assert plan.resource_changes == []

    def test_null_resource_changes_is_empty(self) -> None:
        plan = Plan.model_validate({"format_version": "1.0", "resource_changes": None})
        assert plan.resource_changes == []

    def test_unknown_actions_are_kept(self) -> None:
        plan = Plan.model_validate({
            "format_version": "1.1",
            "resource_changes": [
                {"type": "aws_vpc", "name": "main", "change": {"actions": ["forget"]}},
            ],
        })
        assert plan.resource_changes[0].change.actions == ["forget"]

    def test_unrelated_keys_are_ignored(self) -> None:
        plan = Plan.model_validate({
            "format_version": "1.2",
            "planned_values": {"root_module": {}},
            "configuration": {},
        })
        assert plan.format_version == "1.2"

    def test_requires_format_version(self) -> None:
        with pytest.raises(ValidationError):
            Plan.model_validate({"resource_changes": []})

    @pytest.mark.parametrize("version", ["2.0", "0.9", "x.1"])
    def test_rejects_unsupported_format_version(self, version: str) -> None:
        with pytest.raises(ValidationError):
            Plan.model_validate({"format_version": version})

    def test_resource_change_requires_type_and_name(self) -> None:
        with pytest.raises(ValidationError):
            Plan.model_validate({
                "format_version": "1.2",
                "resource_changes": [{"type": "", "name": "web"}],
            })


class TestPlanAction:
    def test_values(self) -> None:
        assert {a.value for a in PlanAction} == {"no-op", "create", "read", "update", "delete"}
