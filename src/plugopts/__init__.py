"""plugopts: declare and validate plugin configuration options.

Import pattern:
    from plugopts import SchemaBuilder, define_field, define_object, validate
"""

from plugopts.contracts import (
    ConfigError,
    ErrorKind,
    ExternalCheckError,
    FieldType,
    SchemaTestResult,
    UnknownFieldPolicy,
    ValidationResult,
)
from plugopts.core.config import EngineSettings
from plugopts.core.schema import (
    FieldRule,
    ObjectSchema,
    SchemaBuilder,
    define_field,
    define_object,
)
from plugopts.engine.validator import validate, validate_sync

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EngineSettings",
    "ErrorKind",
    "ExternalCheckError",
    "FieldRule",
    "FieldType",
    "ObjectSchema",
    "SchemaBuilder",
    "SchemaTestResult",
    "UnknownFieldPolicy",
    "ValidationResult",
    "__version__",
    "define_field",
    "define_object",
    "validate",
    "validate_sync",
]
