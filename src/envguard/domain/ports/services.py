"""Service port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PlanningTool(ABC):
    """Port for the infrastructure-as-code planning tool.

    Each stage returns ``(success, output)``. On success ``output`` is the
    stage's captured result (the plan artifact path for :meth:`plan`, the
    exported document for :meth:`show_plan`); on failure it describes what
    went wrong.
    """

    name: str = "planning-tool"

    @abstractmethod
    async def init(self, working_dir: str) -> tuple[bool, str]:
        """Prepare the working directory non-interactively."""

    @abstractmethod
    async def plan(self, working_dir: str) -> tuple[bool, str]:
        """Compute a change set and persist it as an artifact in ``working_dir``."""

    @abstractmethod
    async def show_plan(
        self, working_dir: str, plan_path: str
    ) -> tuple[bool, str | bytes]:
        """Export the plan artifact as a structured JSON document, possibly undecoded."""
