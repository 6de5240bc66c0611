"""Validator engine: synchronous field checks and concurrent external checks."""

from plugopts.engine.external import run_external_checks
from plugopts.engine.validator import check_fields, validate, validate_sync

__all__ = [
    "check_fields",
    "run_external_checks",
    "validate",
    "validate_sync",
]
