"""Application entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable, Sequence
from typing import Any, TextIO

import structlog
import yaml
from pydantic import ValidationError
from pydantic_settings import SettingsError

from envguard import __version__
from envguard.config import (
    ConfigFileNotFoundError,
    find_config_file,
    InvalidConfigFileError,
    load_settings,
    OutputFormat,
    Settings,
)
from envguard.domain.errors import DriftScanError
from envguard.domain.models.scan import Severity
from envguard.domain.ports.services import PlanningTool
from envguard.domain.services.drift_service import DriftScanService, Stage
from envguard.domain.services.severity import run_exit_code
from envguard.infrastructure.observability.logging import setup_logging
from envguard.infrastructure.terraform.executor import TerraformExecutor
from envguard.presentation.report import render_report, render_stage_progress


logger = structlog.get_logger(__name__)

EXIT_SCAN_ERROR = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envguard",
        description="EnvGuard checks your environment for misconfigurations and drift",
    )
    parser.add_argument("--config", help="config file (default is .envguard.yaml)")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    subparsers = parser.add_subparsers(dest="command")

    scan = subparsers.add_parser("scan", help="Scan your environment for misconfigurations")
    scan.add_argument("--tf-dir", help="Path to Terraform code (default: .)")
    fmt = scan.add_mutually_exclusive_group()
    fmt.add_argument("--json", action="store_true", help="Output results as JSON")
    fmt.add_argument(
        "--output", choices=[f.value for f in OutputFormat], help="Output format"
    )
    scan.add_argument(
        "--fail-on",
        choices=[s.value for s in Severity],
        help="Lowest severity that makes the run fail (default: warning)",
    )
    scan.add_argument(
        "--timeout",
        type=float,
        help="Per-stage Terraform timeout in seconds, 0 disables",
    )

    subparsers.add_parser("version", help="Print the envguard version")
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Translate explicitly given flags into nested settings overrides."""
    terraform: dict[str, Any] = {}
    if args.tf_dir is not None:
        terraform["dir"] = args.tf_dir
    if args.timeout is not None:
        terraform["timeout_seconds"] = args.timeout

    output: dict[str, Any] = {}
    if args.json:
        output["format"] = OutputFormat.JSON.value
    elif args.output is not None:
        output["format"] = args.output
    if args.fail_on is not None:
        output["fail_on_severity"] = args.fail_on

    overrides: dict[str, Any] = {}
    if terraform:
        overrides["terraform"] = terraform
    if output:
        overrides["output"] = output
    if args.verbose:
        overrides["verbose"] = True
    return overrides


def build_planning_tool(settings: Settings) -> TerraformExecutor:
    """Create the Terraform executor described by ``settings``."""
    json_output = settings.output.format is OutputFormat.JSON
    return TerraformExecutor(
        binary=settings.terraform.binary,
        plan_file=settings.terraform.plan_file,
        timeout_seconds=settings.terraform.timeout_seconds,
        # Keep stdout clean for the JSON document.
        live_output=sys.stderr if json_output else None,
    )


async def execute_scan(
    settings: Settings,
    planning_tool: PlanningTool,
    out: TextIO | None = None,
) -> int:
    """Run a scan, print the report and return the process exit code."""
    if out is None:
        out = sys.stdout

    def _print_stage(stage: Stage) -> None:
        print(render_stage_progress(stage), file=out, flush=True)

    on_stage: Callable[[Stage], None] | None = None
    if settings.output.format is OutputFormat.TEXT:
        print("🔍 Scanning Terraform for drift...", file=out, flush=True)
        on_stage = _print_stage

    service = DriftScanService(planning_tool, on_stage=on_stage)
    try:
        results = await service.scan(settings.terraform.dir)
    except DriftScanError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_SCAN_ERROR

    print(render_report(results, settings.output.format), file=out)
    return run_exit_code(results, settings.output.fail_on_severity)


def run_scan_command(args: argparse.Namespace) -> int:
    try:
        config_path = find_config_file(args.config)
        settings = load_settings(config_path, **_overrides_from_args(args))
    except (
        ConfigFileNotFoundError,
        SettingsError,
        ValidationError,
        InvalidConfigFileError,
        yaml.YAMLError,
    ) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_SCAN_ERROR

    setup_logging(settings.log_level)
    if config_path is not None and settings.output.format is OutputFormat.TEXT:
        print(f"Using config file: {config_path}")
    logger.info(
        "config_loaded",
        config_file=config_path,
        working_dir=settings.terraform.dir,
        output_format=settings.output.format.value,
        fail_on=settings.output.fail_on_severity.value,
    )

    try:
        return asyncio.run(execute_scan(settings, build_planning_tool(settings)))
    except KeyboardInterrupt:
        print("Scan cancelled.", file=sys.stderr)
        return EXIT_INTERRUPTED


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface and return its exit code."""
    args = build_parser().parse_args(argv)

    if args.command == "version":
        print(f"envguard version: {__version__}")
        return 0
    if args.command == "scan":
        return run_scan_command(args)

    print("EnvGuard: No subcommand specified. Try 'envguard scan'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
