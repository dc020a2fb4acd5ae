"""Terraform drift detection for CI pipelines."""

__version__ = "0.2.0"
