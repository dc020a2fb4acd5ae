"""Rendering of scan results for terminals and machines."""

from __future__ import annotations

import json
from collections.abc import Sequence

from envguard.config import OutputFormat
from envguard.domain.models.scan import ScanResult
from envguard.domain.services.drift_service import Stage


NO_DRIFT_MESSAGE = "✅ No unmanaged drift detected."
SUMMARY_HEADER = "⚠️ Drift summary:"

STAGE_PROGRESS = {
    Stage.INITIALIZE: "→ Running terraform init...",
    Stage.PLAN: "→ Running terraform plan...",
    Stage.EXPORT: "→ Analyzing plan for drift...",
}


def render_json(results: Sequence[ScanResult]) -> str:
    """Render results as an indented JSON array."""
    payload = [result.model_dump(mode="json", by_alias=True) for result in results]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_text(results: Sequence[ScanResult]) -> str:
    """Render one summary line per finding."""
    if not results:
        return NO_DRIFT_MESSAGE
    lines = [SUMMARY_HEADER]
    lines.extend(
        f"- [{result.severity.value}] {result.resource}: {result.message}"
        for result in results
    )
    return "\n".join(lines)


def render_report(results: Sequence[ScanResult], fmt: OutputFormat | str) -> str:
    if OutputFormat(fmt) is OutputFormat.JSON:
        return render_json(results)
    return render_text(results)


def render_stage_progress(stage: Stage) -> str:
    return STAGE_PROGRESS[stage]
