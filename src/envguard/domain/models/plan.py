"""Models for the structured output of ``terraform show -json``.

Only the parts of the published plan representation that drift detection
reads are modelled; everything else in the document is ignored.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


SUPPORTED_FORMAT_MAJOR = 1


class PlanAction(str, Enum):
    """Actions Terraform may list for a resource change."""

    NO_OP = "no-op"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Change(BaseModel):
    """Proposed change for a single resource."""

    # Kept as plain strings so unrecognised actions decode and are skipped later.
    actions: list[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class ResourceChange(BaseModel):
    """Entry of the plan's ``resource_changes`` list."""

    address: str = ""
    mode: str = "managed"
    type: str = Field(min_length=1)
    name: str = Field(min_length=1)
    provider_name: str = ""
    change: Change = Field(default_factory=Change)

    model_config = {"extra": "ignore"}

    @property
    def resource_id(self) -> str:
        return f"{self.type}.{self.name}"


class Plan(BaseModel):
    """Top-level plan document."""

    format_version: str
    terraform_version: str = ""
    resource_changes: list[ResourceChange] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("format_version")
    @classmethod
    def _check_format_version(cls, value: str) -> str:
        major = value.split(".", 1)[0]
        if not major.isdigit():
            raise ValueError(f"malformed format_version {value!r}")
        if int(major) != SUPPORTED_FORMAT_MAJOR:
            raise ValueError(
                f"unsupported plan format_version {value!r}, "
                f"expected {SUPPORTED_FORMAT_MAJOR}.x"
            )
        return value

    @field_validator("resource_changes", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value
