# src/plugopts/engine/validator.py
"""Validator engine: evaluate an ObjectSchema against raw plugin options.

Two phases:

1. Synchronous (schema declaration order): forbidden, required, default
   and type checks per declared field, then the unknown-key policy.
2. External: only when phase 1 produced no errors, every declared
   external check runs concurrently against the resolved record.

Bad input never raises. It is reported through ValidationResult.errors,
which hosts display verbatim to the user.

Usage:
    result = await validate(schema, {"optionA": True})
    if not result.is_valid:
        for error in result.errors:
            print(error)
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Mapping
from typing import Any

from plugopts.contracts import (
    ErrorKind,
    UnknownFieldPolicy,
    ValidationResult,
)
from plugopts.core.config import EngineSettings
from plugopts.core.logging import get_logger
from plugopts.core.messages import render_message
from plugopts.core.schema import ObjectSchema, matches_type
from plugopts.engine.external import run_external_checks

logger = get_logger(__name__)

# Label used when the options record itself is not a mapping
ROOT_LABEL = "value"


def _is_present(options: Mapping[str, Any], name: str) -> bool:
    """A key holding None counts as absent."""
    return name in options and options[name] is not None


def check_fields(
    schema: ObjectSchema,
    options: Mapping[str, Any],
) -> tuple[list[str], list[str], dict[str, Any]]:
    """Run the synchronous phase.

    Args:
        schema: Schema to check against
        options: Raw options mapping

    Returns:
        (errors, warnings, resolved_record). Errors are in declaration
        order, followed by unknown-key errors in input order.
    """
    errors: list[str] = []
    warnings: list[str] = []
    resolved: dict[str, Any] = {}

    for name, rule in schema:
        present = _is_present(options, name)

        # Forbidden short-circuits required/default/type for this field
        if rule.forbidden:
            if present:
                errors.append(rule.message(ErrorKind.FORBIDDEN, name))
            continue

        if not present:
            if rule.required:
                errors.append(rule.message(ErrorKind.REQUIRED, name))
            elif rule.has_default:
                resolved[name] = copy.deepcopy(rule.default)
            continue

        value = options[name]
        if not matches_type(rule.type, value):
            errors.append(rule.message(rule.type_error_kind, name))
            continue
        resolved[name] = value

    for key, value in options.items():
        if key in schema:
            continue
        if schema.unknown is UnknownFieldPolicy.REJECT:
            errors.append(render_message(ErrorKind.UNKNOWN_KEY, str(key)))
        elif schema.unknown is UnknownFieldPolicy.ALLOW:
            warnings.append(render_message(ErrorKind.UNKNOWN_KEY, str(key)))
            resolved[key] = value
        # STRIP: dropped

    return errors, warnings, resolved


async def validate(
    schema: ObjectSchema,
    options: Any,
    *,
    settings: EngineSettings | None = None,
) -> ValidationResult:
    """Validate an options record against a schema.

    Args:
        schema: The plugin's ObjectSchema
        options: Raw options (normally a mapping parsed from config)
        settings: Engine settings (timeouts, concurrency); defaults apply if None

    Returns:
        ValidationResult. On success ``value`` is a new dict with defaults
        applied; on failure ``errors`` lists every problem in schema order.
    """
    if settings is None:
        settings = EngineSettings()

    if not isinstance(options, Mapping):
        return ValidationResult.failure(
            [render_message(ErrorKind.OBJECT_BASE, ROOT_LABEL)]
        )

    errors, warnings, resolved = check_fields(schema, options)
    if errors:
        # External checks are skipped on already-invalid input
        logger.debug("Synchronous validation failed", error_count=len(errors))
        return ValidationResult.failure(errors, tuple(warnings))

    if schema.has_external_checks:
        external_errors = await run_external_checks(
            schema,
            resolved,
            timeout=settings.external_timeout_seconds,
            max_concurrency=settings.max_concurrent_external_checks,
        )
        if external_errors:
            logger.debug("External validation failed", error_count=len(external_errors))
            return ValidationResult.failure(external_errors, tuple(warnings))

    return ValidationResult.success(resolved, tuple(warnings))


def validate_sync(
    schema: ObjectSchema,
    options: Any,
    *,
    settings: EngineSettings | None = None,
) -> ValidationResult:
    """Blocking wrapper around validate() for hosts without an event loop.

    Raises:
        RuntimeError: If called from inside a running event loop
            (await validate() there instead)
    """
    return asyncio.run(validate(schema, options, settings=settings))
