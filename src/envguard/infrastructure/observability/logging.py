"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _stderr_logger(*args: Any) -> structlog.PrintLogger:  # noqa: ARG001
    # Resolved per logger so a swapped sys.stderr is honoured.
    return structlog.PrintLogger(sys.stderr)


def setup_logging(log_level: str = "WARNING") -> None:
    """Configure structured logging with structlog.

    Log events go to stderr; stdout is reserved for the scan report.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    # Configure standard library logging to use the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
