"""Unit tests for logging configuration."""

from __future__ import annotations

import json

import pytest
import structlog

from envguard.infrastructure.observability.logging import setup_logging


class TestLogging:
    def test_setup_logging_info(self) -> None:
        setup_logging("INFO")  # Should not raise

    def test_setup_logging_debug(self) -> None:
        setup_logging("DEBUG")  # Should not raise

    def test_unknown_level_falls_back(self) -> None:
        setup_logging("CHATTY")  # Should not raise

    def test_events_go_to_stderr_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO")
        structlog.get_logger("envguard.test").info("drift_scan_started", working_dir="/infra")
        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "drift_scan_started"
        assert event["working_dir"] == "/infra"
        assert event["level"] == "info"

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("WARNING")
        structlog.get_logger("envguard.test").info("terraform_stage_started")
        assert capsys.readouterr().err == ""
