# tests/plugins/test_manager.py
"""Tests for the option schema registry."""

import asyncio
from typing import Any

import pytest

from plugopts.contracts import ConfigError
from plugopts.core.schema import ObjectSchema, SchemaBuilder
from plugopts.plugins.hookspecs import hookimpl
from plugopts.plugins.manager import OptionsSchemaRegistry, SchemaSpec


class SitemapPlugin:
    @hookimpl
    def plugopts_plugin_options_schema(self, builder: SchemaBuilder) -> dict[str, ObjectSchema]:
        return {
            "sitemap": builder.schema(
                {
                    "output": builder.string(default="/sitemap.xml"),
                    "exclude": builder.array(),
                }
            )
        }


class AnalyticsPlugin:
    @hookimpl
    def plugopts_plugin_options_schema(self, builder: SchemaBuilder) -> dict[str, ObjectSchema]:
        return {
            "analytics": builder.schema(
                {
                    "trackingId": builder.string(required=True),
                    "anonymize": builder.boolean(
                        forbidden=True,
                        messages={"any.unknown": "anonymize is always on now"},
                    ),
                }
            )
        }


class TestOptionsSchemaRegistry:
    """Schema registration and lookup."""

    def test_create_registry(self) -> None:
        registry = OptionsSchemaRegistry()
        assert registry.plugin_names() == []

    def test_register_plugins(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())
        registry.register(AnalyticsPlugin())

        assert registry.plugin_names() == ["analytics", "sitemap"]

    def test_get_schema(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())

        schema = registry.get_schema("sitemap")

        assert schema is not None
        assert schema.field_names == ("output", "exclude")
        assert registry.get_schema("missing") is None

    def test_spec_carries_fingerprint(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())

        spec = registry.get_spec("sitemap")

        assert spec is not None
        assert spec.plugin_name == "sitemap"
        assert spec.fingerprint == spec.schema.fingerprint

    def test_duplicate_plugin_name_rejected(self) -> None:
        class OtherSitemap:
            @hookimpl
            def plugopts_plugin_options_schema(self, builder: SchemaBuilder) -> dict[str, Any]:
                return {"sitemap": builder.schema({})}

        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())

        with pytest.raises(ValueError, match="Duplicate options schema for plugin: 'sitemap'"):
            registry.register(OtherSitemap())

        # Failed registration leaves the registry as it was
        assert registry.plugin_names() == ["sitemap"]
        assert registry.get_schema("sitemap").field_names == ("output", "exclude")  # type: ignore[union-attr]

    def test_malformed_schema_rejected(self) -> None:
        class Broken:
            @hookimpl
            def plugopts_plugin_options_schema(self, builder: SchemaBuilder) -> dict[str, Any]:
                return {"broken": builder.schema({"a": builder.boolean(required=True, forbidden=True)})}

        registry = OptionsSchemaRegistry()

        with pytest.raises(ConfigError):
            registry.register(Broken())
        assert registry.plugin_names() == []

    def test_non_schema_rejected(self) -> None:
        class NotASchema:
            @hookimpl
            def plugopts_plugin_options_schema(self, builder: SchemaBuilder) -> dict[str, Any]:
                return {"bad": {"a": "boolean"}}

        registry = OptionsSchemaRegistry()

        with pytest.raises(ValueError, match="must be an ObjectSchema"):
            registry.register(NotASchema())


class TestValidateOptions:
    """Validating a named plugin's options."""

    def test_valid_options_resolved(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())

        result = asyncio.run(registry.validate_options("sitemap", {"exclude": ["/admin"]}))

        assert result.is_valid is True
        assert result.value == {"output": "/sitemap.xml", "exclude": ["/admin"]}

    def test_invalid_options_reported(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(AnalyticsPlugin())

        result = asyncio.run(registry.validate_options("analytics", {"anonymize": True}))

        assert result.errors == ('"trackingId" is required', "anonymize is always on now")

    def test_unknown_plugin_raises(self) -> None:
        registry = OptionsSchemaRegistry()
        registry.register(SitemapPlugin())

        with pytest.raises(KeyError, match="No options schema registered for plugin 'nope'"):
            asyncio.run(registry.validate_options("nope", {}))


class TestSchemaSpec:
    def test_from_schema(self) -> None:
        schema = SchemaBuilder().schema({"a": SchemaBuilder().boolean()})
        spec = SchemaSpec.from_schema("p", schema)

        assert spec.schema is schema
        assert len(spec.fingerprint) == 64
