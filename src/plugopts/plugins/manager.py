# src/plugopts/plugins/manager.py
"""Registry of plugin option schemas.

Uses pluggy for hook-based schema registration. The host calls
validate_options() before handing options to a plugin.
"""

from dataclasses import dataclass
from typing import Any

import pluggy

from plugopts.contracts import ValidationResult
from plugopts.core.config import EngineSettings
from plugopts.core.logging import get_logger
from plugopts.core.schema import ObjectSchema, SchemaBuilder
from plugopts.engine.validator import validate
from plugopts.plugins.hookspecs import PROJECT_NAME, PlugoptsSchemaSpec

logger = get_logger(__name__)


@dataclass(frozen=True)
class SchemaSpec:
    """Registration record for one plugin's option schema.

    Frozen for immutability - registered schemas shouldn't change.
    """

    plugin_name: str
    schema: ObjectSchema
    fingerprint: str

    @classmethod
    def from_schema(cls, plugin_name: str, schema: ObjectSchema) -> "SchemaSpec":
        """Create a spec, computing the schema fingerprint.

        Raises:
            ValueError: If the hook returned something other than an ObjectSchema
        """
        if not isinstance(schema, ObjectSchema):
            raise ValueError(
                f"Options schema for plugin '{plugin_name}' must be an ObjectSchema, "
                f"got {type(schema).__name__}. Build it with builder.schema(...)."
            )
        return cls(
            plugin_name=plugin_name,
            schema=schema,
            fingerprint=schema.fingerprint,
        )


class OptionsSchemaRegistry:
    """Collects option schemas from plugins and validates their options.

    Usage:
        registry = OptionsSchemaRegistry()
        registry.register(MyPlugin())

        result = await registry.validate_options("my-plugin", {"apiKey": "..."})
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PlugoptsSchemaSpec)
        self._builder = SchemaBuilder()
        self._settings = settings if settings is not None else EngineSettings()

        # Cache - map plugin name to spec for duplicate detection
        self._specs: dict[str, SchemaSpec] = {}

    def register(self, plugin: Any) -> None:
        """Register a plugin implementing plugopts_plugin_options_schema.

        Raises:
            ValueError: If two plugins declare a schema for the same name
            ConfigError: If a plugin builds a malformed schema
        """
        self._pm.register(plugin)
        try:
            self._refresh_cache()
        except Exception:
            # Keep the registry consistent with the cache
            self._pm.unregister(plugin)
            raise

    def _refresh_cache(self) -> None:
        """Rebuild the schema cache from hooks.

        Raises:
            ValueError: If a plugin name is declared twice
        """
        new_specs: dict[str, SchemaSpec] = {}

        for schemas in self._pm.hook.plugopts_plugin_options_schema(
            builder=self._builder
        ):
            for plugin_name, schema in schemas.items():
                if plugin_name in new_specs:
                    raise ValueError(
                        f"Duplicate options schema for plugin: '{plugin_name}'"
                    )
                new_specs[plugin_name] = SchemaSpec.from_schema(plugin_name, schema)

        # All validated, update cache
        self._specs = new_specs
        logger.debug("Option schemas registered", plugins=sorted(new_specs))

    # === Lookup ===

    def plugin_names(self) -> list[str]:
        """Names of plugins with a registered schema, sorted."""
        return sorted(self._specs)

    def get_spec(self, plugin_name: str) -> SchemaSpec | None:
        """Get the registration record for a plugin."""
        return self._specs.get(plugin_name)

    def get_schema(self, plugin_name: str) -> ObjectSchema | None:
        """Get a plugin's option schema."""
        spec = self._specs.get(plugin_name)
        return spec.schema if spec is not None else None

    # === Validation ===

    async def validate_options(
        self, plugin_name: str, options: Any
    ) -> ValidationResult:
        """Validate options for a registered plugin.

        Raises:
            KeyError: If no schema is registered for plugin_name
        """
        spec = self._specs.get(plugin_name)
        if spec is None:
            raise KeyError(
                f"No options schema registered for plugin '{plugin_name}'. "
                f"Available: {self.plugin_names()}"
            )
        result = await validate(spec.schema, options, settings=self._settings)
        if not result.is_valid:
            logger.info(
                "Plugin options rejected",
                plugin=plugin_name,
                error_count=len(result.errors),
            )
        return result
