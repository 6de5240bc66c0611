# src/plugopts/testing.py
"""Test helper for plugin option schemas.

Plugin test suites depend only on this module:

    from plugopts.testing import test_plugin_options_schema_sync

    def plugin_options_schema(builder):
        return builder.schema({
            "optionA": builder.boolean(required=True),
            "message": builder.string(required=True),
            "optionB": builder.boolean(),
        })

    def test_rejects_bad_options():
        result = test_plugin_options_schema_sync(
            plugin_options_schema,
            {"message": 123, "optionB": "not a boolean"},
        )
        assert not result.is_valid
        assert result.errors == (
            '"optionA" is required',
            '"message" must be a string',
            '"optionB" must be a boolean',
        )
"""

import asyncio
from collections.abc import Callable
from typing import Any

from plugopts.contracts import SchemaTestResult
from plugopts.core.config import EngineSettings
from plugopts.core.schema import ObjectSchema, SchemaBuilder
from plugopts.engine.validator import validate

SchemaFactory = Callable[[SchemaBuilder], ObjectSchema]


async def test_plugin_options_schema(
    schema_factory: SchemaFactory,
    options: Any,
    *,
    settings: EngineSettings | None = None,
) -> SchemaTestResult:
    """Build a schema with an injected builder and validate ``options``.

    Args:
        schema_factory: Callable receiving a SchemaBuilder, returning the schema
        options: Plugin options to validate
        settings: Optional engine settings

    Returns:
        SchemaTestResult with is_valid, errors and warnings

    Raises:
        ConfigError: If the factory builds a malformed schema
    """
    schema = schema_factory(SchemaBuilder())
    result = await validate(schema, options, settings=settings)
    return SchemaTestResult.from_result(result)


def test_plugin_options_schema_sync(
    schema_factory: SchemaFactory,
    options: Any,
    *,
    settings: EngineSettings | None = None,
) -> SchemaTestResult:
    """Blocking variant of test_plugin_options_schema()."""
    return asyncio.run(
        test_plugin_options_schema(schema_factory, options, settings=settings)
    )


# Helpers, not tests: keep pytest from collecting them when imported into test modules
test_plugin_options_schema.__test__ = False  # type: ignore[attr-defined]
test_plugin_options_schema_sync.__test__ = False  # type: ignore[attr-defined]
