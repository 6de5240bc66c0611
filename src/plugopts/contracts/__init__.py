"""Shared contracts for cross-boundary data types.

Enums, exceptions, and result types used by both the schema model and the
validator engine live here.

Import pattern:
    from plugopts.contracts import ConfigError, FieldType, ValidationResult
"""

from plugopts.contracts.enums import (
    ErrorKind,
    FieldType,
    UnknownFieldPolicy,
)
from plugopts.contracts.errors import (
    ConfigError,
    ExternalCheckError,
)
from plugopts.contracts.results import (
    SchemaTestResult,
    ValidationResult,
)

__all__ = [
    # enums
    "ErrorKind",
    "FieldType",
    "UnknownFieldPolicy",
    # errors
    "ConfigError",
    "ExternalCheckError",
    # results
    "SchemaTestResult",
    "ValidationResult",
]
