"""Core infrastructure: Schema model, Messages, Configuration, Canonical, Logging."""

from plugopts.core.canonical import canonical_json, stable_hash
from plugopts.core.config import EngineSettings, load_settings
from plugopts.core.logging import configure_logging, get_logger
from plugopts.core.messages import DEFAULT_MESSAGES, MessageTemplate, TemplateError
from plugopts.core.schema import (
    MISSING,
    FieldRule,
    ObjectSchema,
    SchemaBuilder,
    define_field,
    define_object,
    matches_type,
)

__all__ = [
    "DEFAULT_MESSAGES",
    "EngineSettings",
    "FieldRule",
    "MISSING",
    "MessageTemplate",
    "ObjectSchema",
    "SchemaBuilder",
    "TemplateError",
    "canonical_json",
    "configure_logging",
    "define_field",
    "define_object",
    "get_logger",
    "load_settings",
    "matches_type",
    "stable_hash",
]
